"""Due date and installment schedule rules"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from invoice_engine.domain.matter import PaymentTerms
from invoice_engine.domain.payment_plan import PaymentFrequency
from invoice_engine.domain.subscription import BillingCycle

# Days between issue and due date for subscription invoices
BILLING_CYCLE_DUE_DAYS = {
    BillingCycle.MONTHLY: 30,
    BillingCycle.QUARTERLY: 15,
    BillingCycle.YEARLY: 45,
}

FREQUENCY_STEPS = {
    PaymentFrequency.WEEKLY: relativedelta(weeks=1),
    PaymentFrequency.BIWEEKLY: relativedelta(weeks=2),
    PaymentFrequency.MONTHLY: relativedelta(months=1),
    PaymentFrequency.QUARTERLY: relativedelta(months=3),
}


def subscription_due_date(issue_date: date, billing_cycle: BillingCycle) -> date:
    return issue_date + timedelta(days=BILLING_CYCLE_DUE_DAYS[billing_cycle])


def payment_terms_due_date(issue_date: date, payment_terms: PaymentTerms) -> date:
    return issue_date + timedelta(days=PaymentTerms(payment_terms).days)


def installment_due_date(
    first_payment_date: date, frequency: PaymentFrequency, installment_number: int
) -> date:
    """
    Due date of the n-th installment

    Month-based steps are applied from the first payment date in one go, so
    a plan starting on the 31st is due on the last day of shorter months
    without drifting afterwards.
    """
    if installment_number < 1:
        raise ValueError("installment_number starts at 1")
    step = FREQUENCY_STEPS[PaymentFrequency(frequency)]
    return first_payment_date + step * (installment_number - 1)


def days_late(due_date: date, reference_date: date) -> int:
    """Days reference_date falls after due_date (0 when on time)"""
    return max(0, (reference_date - due_date).days)
