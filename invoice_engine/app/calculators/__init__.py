"""Pure billing calculators"""
from .rate import (
    round_money,
    compute_hourly_charge,
    compute_percentage_fee,
    compute_percentage_charge,
    compute_hybrid_charge,
    apply_minimum_fee,
    compute_overage_charge,
)
from .proration import compute_proration, is_active_in_period
from .usage import UsageRecord, aggregate_usage, aggregate_subscription_usage
from .schedule import (
    subscription_due_date,
    payment_terms_due_date,
    installment_due_date,
    days_late,
)

__all__ = [
    "round_money",
    "compute_hourly_charge",
    "compute_percentage_fee",
    "compute_percentage_charge",
    "compute_hybrid_charge",
    "apply_minimum_fee",
    "compute_overage_charge",
    "compute_proration",
    "is_active_in_period",
    "UsageRecord",
    "aggregate_usage",
    "aggregate_subscription_usage",
    "subscription_due_date",
    "payment_terms_due_date",
    "installment_due_date",
    "days_late",
]
