from .subscription_repository import SqlAlchemySubscriptionRepository
from .matter_repository import SqlAlchemyMatterRepository
from .time_entry_repository import SqlAlchemyTimeEntryRepository
from .payment_plan_repository import SqlAlchemyPaymentPlanRepository
from .invoice_repository import SqlAlchemyInvoiceRepository

__all__ = [
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyMatterRepository",
    "SqlAlchemyTimeEntryRepository",
    "SqlAlchemyPaymentPlanRepository",
    "SqlAlchemyInvoiceRepository",
]
