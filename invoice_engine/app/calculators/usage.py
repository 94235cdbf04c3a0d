"""Aggregation of subscription time entries into usage records"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_CEILING
from typing import Iterable, List

from invoice_engine.domain.subscription import ServiceInclusion, UsageUnit
from invoice_engine.domain.time_entry import TimeEntry
from .rate import MINUTES_PER_HOUR, compute_overage_charge


@dataclass(frozen=True)
class UsageRecord:
    """Usage of one included service during a billing period"""

    service_type: str
    unit: UsageUnit
    included: Decimal
    used: Decimal
    overage_rate: Decimal

    @property
    def overage(self) -> Decimal:
        return max(Decimal(0), self.used - self.included)

    @property
    def overage_charge(self) -> Decimal:
        return compute_overage_charge(self.used, self.included, self.overage_rate)


def _matches(entry: TimeEntry, service_type: str, period_start: date, period_end: date) -> bool:
    return (
        entry.service_type == service_type
        and period_start <= entry.entry_date <= period_end
    )


def aggregate_usage(
    entries: Iterable[TimeEntry],
    inclusion: ServiceInclusion,
    period_start: date,
    period_end: date,
) -> UsageRecord:
    """
    Build the usage record of one inclusion

    Hour-based services sum effective minutes and round up to whole hours;
    every other unit counts matching entries.
    """
    matching = [
        e for e in entries
        if _matches(e, inclusion.service_type, period_start, period_end)
    ]

    if inclusion.unit == UsageUnit.HOURS:
        minutes = sum(e.effective_minutes for e in matching)
        used = (Decimal(minutes) / MINUTES_PER_HOUR).to_integral_value(rounding=ROUND_CEILING)
    else:
        used = Decimal(len(matching))

    return UsageRecord(
        service_type=inclusion.service_type,
        unit=inclusion.unit,
        included=Decimal(inclusion.quantity_included),
        used=used,
        overage_rate=Decimal(inclusion.overage_rate),
    )


def aggregate_subscription_usage(
    entries: Iterable[TimeEntry],
    inclusions: Iterable[ServiceInclusion],
    period_start: date,
    period_end: date,
) -> List[UsageRecord]:
    entries = list(entries)
    return [
        aggregate_usage(entries, inclusion, period_start, period_end)
        for inclusion in inclusions
    ]
