"""Unit tests for subscription usage aggregation"""

from datetime import date
from decimal import Decimal

from invoice_engine.app.calculators.usage import aggregate_subscription_usage, aggregate_usage
from invoice_engine.domain.subscription import ServiceInclusion, UsageUnit
from invoice_engine.domain.time_entry import EntryStatus, TimeEntry

PERIOD_START = date(2025, 1, 1)
PERIOD_END = date(2025, 1, 31)


def make_entry(service_type, minutes=60, entry_date=date(2025, 1, 15)):
    return TimeEntry(
        law_firm_id="firm_001",
        client_subscription_id="sub_001",
        service_type=service_type,
        description="Consultation",
        effective_minutes=minutes,
        is_billable=True,
        entry_status=EntryStatus.APPROVED,
        entry_date=entry_date,
    )


def make_inclusion(service_type, included, unit, rate):
    return ServiceInclusion(
        client_subscription_id="sub_001",
        service_type=service_type,
        quantity_included=Decimal(included),
        unit=unit,
        overage_rate=Decimal(rate),
    )


class TestAggregateUsage:
    def test_counts_sessions_of_matching_service(self):
        """
        Given: 8 consultation entries and 5 included sessions at 200
        When: Usage is aggregated
        Then: 3 sessions of overage cost 600
        """
        entries = [make_entry("consultation") for _ in range(8)]
        entries.append(make_entry("contract_review"))
        inclusion = make_inclusion("consultation", 5, UsageUnit.SESSIONS, "200")

        record = aggregate_usage(entries, inclusion, PERIOD_START, PERIOD_END)

        assert record.used == Decimal(8)
        assert record.overage == Decimal(3)
        assert record.overage_charge == Decimal("600.00")

    def test_ignores_entries_outside_period(self):
        entries = [
            make_entry("consultation", entry_date=date(2024, 12, 31)),
            make_entry("consultation", entry_date=date(2025, 2, 1)),
            make_entry("consultation", entry_date=PERIOD_END),
        ]
        inclusion = make_inclusion("consultation", 5, UsageUnit.SESSIONS, "200")

        record = aggregate_usage(entries, inclusion, PERIOD_START, PERIOD_END)

        assert record.used == Decimal(1)

    def test_hours_round_up_to_whole_hours(self):
        entries = [make_entry("advisory", minutes=90), make_entry("advisory", minutes=45)]
        inclusion = make_inclusion("advisory", 1, UsageUnit.HOURS, "300")

        record = aggregate_usage(entries, inclusion, PERIOD_START, PERIOD_END)

        assert record.used == Decimal(3)
        assert record.overage_charge == Decimal("600.00")

    def test_overage_never_negative(self):
        inclusion = make_inclusion("consultation", 10, UsageUnit.SESSIONS, "200")

        record = aggregate_usage([make_entry("consultation")], inclusion, PERIOD_START, PERIOD_END)

        assert record.overage == Decimal(0)
        assert record.overage_charge == Decimal("0.00")


class TestAggregateSubscriptionUsage:
    def test_one_record_per_inclusion(self):
        inclusions = [
            make_inclusion("consultation", 5, UsageUnit.SESSIONS, "200"),
            make_inclusion("document_review", 2, UsageUnit.DOCUMENTS, "80"),
        ]
        entries = (make_entry("document_review") for _ in range(4))

        records = aggregate_subscription_usage(entries, inclusions, PERIOD_START, PERIOD_END)

        assert [r.service_type for r in records] == ["consultation", "document_review"]
        assert records[0].overage_charge == Decimal("0.00")
        assert records[1].overage_charge == Decimal("160.00")
