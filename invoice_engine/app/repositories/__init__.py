from .subscription_repository import SubscriptionRepository
from .matter_repository import MatterRepository
from .time_entry_repository import TimeEntryRepository
from .payment_plan_repository import PaymentPlanRepository
from .invoice_repository import InvoiceRepository

__all__ = [
    "SubscriptionRepository",
    "MatterRepository",
    "TimeEntryRepository",
    "PaymentPlanRepository",
    "InvoiceRepository",
]
