"""Proration of a period fee for subjects active part of the period"""

from datetime import date
from decimal import Decimal
from typing import Optional

from .rate import Number, ZERO, round_money


def is_active_in_period(
    period_start: date,
    period_end: date,
    subject_start_date: date,
    subject_end_date: Optional[date] = None,
) -> bool:
    if subject_start_date > period_end:
        return False
    if subject_end_date is not None and subject_end_date < period_start:
        return False
    return True


def compute_proration(
    period_start: date,
    period_end: date,
    subject_start_date: date,
    monthly_fee: Number,
    subject_end_date: Optional[date] = None,
) -> Decimal:
    """
    Charge for the part of [period_start, period_end] the subject is active

    Both period bounds are inclusive days. A subject active for the whole
    period pays monthly_fee unchanged; one that is not active at all pays 0.
    """
    if period_end < period_start:
        raise ValueError("period_end must not be before period_start")

    if not is_active_in_period(period_start, period_end, subject_start_date, subject_end_date):
        return ZERO

    ends_inside = subject_end_date is not None and subject_end_date < period_end
    if subject_start_date <= period_start and not ends_inside:
        return round_money(monthly_fee)

    active_start = max(subject_start_date, period_start)
    active_end = subject_end_date if ends_inside else period_end

    active_days = (active_end - active_start).days + 1
    period_days = (period_end - period_start).days + 1
    return round_money(Decimal(monthly_fee) * Decimal(active_days) / Decimal(period_days))
