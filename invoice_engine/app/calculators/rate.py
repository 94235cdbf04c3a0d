"""Rate calculations for billable time, outcomes and usage

Pure functions over Decimal. Every charge is rounded to cents with
ROUND_HALF_UP where it is computed, never only at the invoice total.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from invoice_engine.domain.matter import CaseOutcome
from invoice_engine.domain.time_entry import TimeEntry, EntryStatus

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MINUTES_PER_HOUR = Decimal("60")

Number = Union[Decimal, int, str]


def round_money(value: Number) -> Decimal:
    """Round an amount to cents, half up"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_chargeable(entry: TimeEntry) -> bool:
    """Approved billable entries are the only ones charged"""
    return entry.is_billable and entry.entry_status == EntryStatus.APPROVED


def entry_hours(entry: TimeEntry) -> Decimal:
    return Decimal(entry.effective_minutes) / MINUTES_PER_HOUR


def entry_amount(entry: TimeEntry, default_rate: Optional[Number] = None) -> Decimal:
    """
    Amount charged for a single entry

    Uses the stored billable_amount; entries without one are priced from
    their duration and the entry rate, falling back to default_rate.
    """
    if entry.billable_amount is not None:
        return round_money(entry.billable_amount)

    rate = entry.billable_rate if entry.billable_rate is not None else default_rate
    if rate is None:
        return ZERO
    return round_money(entry_hours(entry) * Decimal(rate))


def compute_hourly_charge(
    entries: Iterable[TimeEntry], default_rate: Optional[Number] = None
) -> Decimal:
    """Sum of amounts over approved billable entries; others are excluded"""
    total = ZERO
    for entry in entries:
        if is_chargeable(entry):
            total += entry_amount(entry, default_rate)
    return round_money(total)


def compute_percentage_fee(outcome: CaseOutcome, rate: Number) -> Decimal:
    """Percentage of the amount recovered, without the success fee"""
    return round_money(Decimal(outcome.amount_recovered) * Decimal(rate) / Decimal(100))


def compute_percentage_charge(outcome: CaseOutcome, rate: Number) -> Decimal:
    """amount_recovered * rate / 100 + success_fee"""
    success_fee = outcome.success_fee if outcome.success_fee is not None else ZERO
    return round_money(compute_percentage_fee(outcome, rate) + Decimal(success_fee))


def compute_hybrid_charge(
    entries: Iterable[TimeEntry],
    outcome: CaseOutcome,
    hourly_rate: Optional[Number],
    percentage_rate: Number,
) -> Decimal:
    return round_money(
        compute_hourly_charge(entries, default_rate=hourly_rate)
        + compute_percentage_charge(outcome, percentage_rate)
    )


def apply_minimum_fee(computed: Decimal, minimum_fee: Optional[Number]) -> Decimal:
    """Raise the computed fee to the minimum when one is configured"""
    if minimum_fee is None:
        return round_money(computed)
    return round_money(max(Decimal(computed), Decimal(minimum_fee)))


def compute_overage_charge(used: Number, included: Number, overage_rate: Number) -> Decimal:
    """Units above the included quantity times the rate; zero when within the plan"""
    overage = max(Decimal(0), Decimal(used) - Decimal(included))
    return round_money(overage * Decimal(overage_rate))
