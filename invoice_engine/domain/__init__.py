from .base import BaseModel, generate_uuid
from .subscription import (
    ClientSubscription,
    ServiceInclusion,
    SubscriptionStatus,
    BillingCycle,
    UsageUnit,
)
from .matter import Matter, CaseBillingConfig, CaseOutcome, BillingMethod, PaymentTerms
from .case_expense import CaseExpense, ExpenseStatus
from .time_entry import TimeEntry, EntryStatus
from .payment_plan import PaymentPlan, PaymentPlanStatus, PaymentFrequency
from .invoice import Invoice, InvoiceType, InvoiceStatus
from .invoice_line import InvoiceLine, LineType
from .invoice_sequence import InvoiceSequence
from .exceptions import DuplicateInvoiceError

__all__ = [
    "BaseModel",
    "generate_uuid",
    "ClientSubscription",
    "ServiceInclusion",
    "SubscriptionStatus",
    "BillingCycle",
    "UsageUnit",
    "Matter",
    "CaseBillingConfig",
    "CaseOutcome",
    "BillingMethod",
    "PaymentTerms",
    "CaseExpense",
    "ExpenseStatus",
    "TimeEntry",
    "EntryStatus",
    "PaymentPlan",
    "PaymentPlanStatus",
    "PaymentFrequency",
    "Invoice",
    "InvoiceType",
    "InvoiceStatus",
    "InvoiceLine",
    "LineType",
    "InvoiceSequence",
    "DuplicateInvoiceError",
]
