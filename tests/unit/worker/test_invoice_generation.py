"""Unit tests for InvoiceGenerationWorker

Tests cover:
- Worker initialization with configuration
- Billing period calculation
- run_once summary and feature switches
- Subscription billing per law firm, duplicates counted as skipped
- Installment billing within the lead window
- run_forever subscription billing window
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from invoice_engine.app.use_cases.invoicing.dtos import BatchInvoiceResultDTO, BatchItemErrorDTO
from invoice_engine.domain.payment_plan import PaymentFrequency, PaymentPlan
from invoice_engine.worker.invoice_generation import InvoiceGenerationWorker
from tests.fixtures.clock import FixedClock

MODULE = "invoice_engine.worker.invoice_generation"


@pytest.fixture
def mock_app_config():
    with patch(f"{MODULE}.ApplicationConfig") as config:
        config.DB_URI = "sqlite+aiosqlite:///./default.db"
        config.DEFAULT_CURRENCY = "BRL"
        config.PAYMENT_PLAN_LEAD_DAYS = 7
        config.SUBSCRIPTION_BILLING_ENABLED = True
        config.PAYMENT_PLAN_BILLING_ENABLED = True
        config.WORKER_RUN_WINDOW_DAYS = 3
        config.WORKER_INTERVAL_SECONDS = 86400
        yield config


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture
def make_worker(mock_app_config, mock_session):
    """Builds a worker with engine and session factory patched out"""

    def factory(today=date(2025, 2, 5), db_uri=None):
        with patch(f"{MODULE}.create_async_engine") as mock_create_engine, patch(
            f"{MODULE}.sessionmaker"
        ) as mock_sessionmaker:
            mock_create_engine.return_value = MagicMock(dispose=AsyncMock())
            mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
            return InvoiceGenerationWorker(db_uri=db_uri, clock=FixedClock(today))

    return factory


class TestInvoiceGenerationWorkerInit:
    def test_initializes_with_default_config(self, make_worker):
        worker = make_worker()

        assert worker.db_uri == "sqlite+aiosqlite:///./default.db"
        assert worker.currency == "BRL"
        assert worker.lead_days == 7

    def test_initializes_with_custom_db_uri(self, make_worker):
        worker = make_worker(db_uri="postgresql+asyncpg://custom@localhost/invoices")

        assert worker.db_uri == "postgresql+asyncpg://custom@localhost/invoices"


class TestBillingPeriod:
    def test_defaults_to_previous_month(self, make_worker):
        worker = make_worker(today=date(2025, 3, 2))

        assert worker._get_billing_period() == (date(2025, 2, 1), date(2025, 2, 28))

    def test_january_rolls_back_to_december(self, make_worker):
        worker = make_worker(today=date(2025, 1, 2))

        assert worker._get_billing_period() == (date(2024, 12, 1), date(2024, 12, 31))

    def test_explicit_leap_month(self, make_worker):
        worker = make_worker()

        assert worker._get_billing_period(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


@pytest.mark.asyncio
class TestRunOnce:
    async def test_summarizes_both_billing_runs(self, make_worker):
        """
        Given: Subscription and installment billing both produce invoices
        When: run_once is called
        Then: The summary carries counts of both runs
        """
        worker = make_worker()
        worker._bill_subscriptions = AsyncMock(return_value=(2, 5, 1, 3))
        worker._bill_due_installments = AsyncMock(return_value=(4, 0, 1))

        result = await worker.run_once()

        assert result.billing_period_start == date(2025, 1, 1)
        assert result.billing_period_end == date(2025, 1, 31)
        assert result.law_firms_processed == 2
        assert result.subscription_invoices_created == 5
        assert result.subscription_failures == 1
        assert result.installment_invoices_created == 4
        assert result.duplicates_skipped == 4
        worker._bill_subscriptions.assert_awaited_once_with(date(2025, 1, 1), date(2025, 1, 31))
        worker._bill_due_installments.assert_awaited_once_with(date(2025, 2, 5))

    async def test_respects_disabled_subscription_billing(self, make_worker, mock_app_config):
        mock_app_config.SUBSCRIPTION_BILLING_ENABLED = False
        worker = make_worker()
        worker._bill_subscriptions = AsyncMock()
        worker._bill_due_installments = AsyncMock(return_value=(0, 0, 0))

        await worker.run_once()

        worker._bill_subscriptions.assert_not_called()

    async def test_skips_subscriptions_on_request(self, make_worker):
        worker = make_worker()
        worker._bill_subscriptions = AsyncMock()
        worker._bill_due_installments = AsyncMock(return_value=(1, 0, 0))

        result = await worker.run_once(bill_subscriptions=False)

        worker._bill_subscriptions.assert_not_called()
        assert result.installment_invoices_created == 1


@pytest.mark.asyncio
class TestBillSubscriptions:
    @patch(f"{MODULE}.GenerateSubscriptionInvoiceBatch")
    @patch(f"{MODULE}.SqlAlchemySubscriptionRepository")
    async def test_counts_duplicates_apart_from_failures(
        self, mock_subscription_repo_class, mock_batch_class, make_worker
    ):
        """
        Given: One law firm whose batch created 2 invoices, hit 1 duplicate and 1 failure
        When: Subscriptions are billed
        Then: The duplicate is skipped, not counted as a failure
        """
        mock_subscription_repo = MagicMock()
        mock_subscription_repo.get_law_firm_ids_with_active_subscriptions = AsyncMock(
            return_value=["firm_001"]
        )
        mock_subscription_repo_class.return_value = mock_subscription_repo

        batch = BatchInvoiceResultDTO(
            batch_id="batch_1",
            total_requested=4,
            successful_generations=2,
            failed_generations=2,
            errors=[
                BatchItemErrorDTO(subject_id="sub_2", code="DUPLICATE_INVOICE", message="billed"),
                BatchItemErrorDTO(subject_id="sub_3", code="SUBJECT_NOT_ACTIVE_IN_PERIOD", message="ended"),
            ],
        )
        mock_batch_class.return_value.execute = AsyncMock(return_value=Return.ok(batch))

        worker = make_worker()
        result = await worker._bill_subscriptions(date(2025, 1, 1), date(2025, 1, 31))

        assert result == (1, 2, 1, 1)
        command = mock_batch_class.return_value.execute.call_args.args[0]
        assert command.law_firm_id == "firm_001"
        assert command.period_end == date(2025, 1, 31)

    @patch(f"{MODULE}.GenerateSubscriptionInvoiceBatch")
    @patch(f"{MODULE}.SqlAlchemySubscriptionRepository")
    async def test_failed_law_firm_does_not_stop_others(
        self, mock_subscription_repo_class, mock_batch_class, make_worker
    ):
        mock_subscription_repo = MagicMock()
        mock_subscription_repo.get_law_firm_ids_with_active_subscriptions = AsyncMock(
            return_value=["firm_001", "firm_002"]
        )
        mock_subscription_repo_class.return_value = mock_subscription_repo
        mock_batch_class.return_value.execute = AsyncMock(
            side_effect=[
                Return.err(Error(code="PERSISTENCE_ERROR", message="db down")),
                Return.ok(
                    BatchInvoiceResultDTO(
                        batch_id="batch_2", total_requested=1, successful_generations=1, failed_generations=0
                    )
                ),
            ]
        )

        worker = make_worker()
        result = await worker._bill_subscriptions(date(2025, 1, 1), date(2025, 1, 31))

        assert result == (2, 1, 1, 0)


@pytest.mark.asyncio
class TestBillDueInstallments:
    @patch(f"{MODULE}.GeneratePaymentPlanInvoice")
    @patch(f"{MODULE}.SqlAlchemyInvoiceRepository")
    @patch(f"{MODULE}.SqlAlchemyPaymentPlanRepository")
    async def test_bills_installments_due_within_lead_window(
        self, mock_plan_repo_class, mock_invoice_repo_class, mock_generator_class, make_worker
    ):
        """
        Given: Monthly plan from Jan 10 with nothing billed, today Feb 5, 7 lead days
        When: Due installments are billed
        Then: Installments 1 (Jan 10) and 2 (Feb 10) are invoiced, 3 (Mar 10) is not
        """
        plan = PaymentPlan(
            id="plan_001",
            law_firm_id="firm_001",
            client_id="client_042",
            total_amount=Decimal("7500.00"),
            installment_count=3,
            installment_amount=Decimal("2500.00"),
            frequency=PaymentFrequency.MONTHLY,
            first_payment_date=date(2025, 1, 10),
            auto_generate_invoices=True,
        )
        mock_plan_repo_class.return_value.get_auto_generating_plans = AsyncMock(return_value=[plan])
        mock_invoice_repo_class.return_value.get_last_installment_number = AsyncMock(return_value=0)
        mock_generator_class.return_value.execute = AsyncMock(return_value=Return.ok(MagicMock()))

        worker = make_worker(today=date(2025, 2, 5))
        result = await worker._bill_due_installments(date(2025, 2, 5))

        assert result == (2, 0, 0)
        commands = [c.args[0] for c in mock_generator_class.return_value.execute.call_args_list]
        assert [c.installment_number for c in commands] == [1, 2]
        assert all(c.scheduled_date == date(2025, 2, 5) for c in commands)

    @patch(f"{MODULE}.GeneratePaymentPlanInvoice")
    @patch(f"{MODULE}.SqlAlchemyInvoiceRepository")
    @patch(f"{MODULE}.SqlAlchemyPaymentPlanRepository")
    async def test_stops_plan_on_first_failure(
        self, mock_plan_repo_class, mock_invoice_repo_class, mock_generator_class, make_worker
    ):
        plan = PaymentPlan(
            id="plan_001",
            law_firm_id="firm_001",
            client_id="client_042",
            total_amount=Decimal("7500.00"),
            installment_count=3,
            installment_amount=Decimal("2500.00"),
            frequency=PaymentFrequency.WEEKLY,
            first_payment_date=date(2025, 1, 1),
            auto_generate_invoices=True,
        )
        mock_plan_repo_class.return_value.get_auto_generating_plans = AsyncMock(return_value=[plan])
        mock_invoice_repo_class.return_value.get_last_installment_number = AsyncMock(return_value=0)
        mock_generator_class.return_value.execute = AsyncMock(
            return_value=Return.err(Error(code="PERSISTENCE_ERROR", message="db down"))
        )

        worker = make_worker()
        result = await worker._bill_due_installments(date(2025, 2, 5))

        assert result == (0, 1, 0)
        mock_generator_class.return_value.execute.assert_awaited_once()


@pytest.mark.asyncio
class TestRunForever:
    @patch(f"{MODULE}.asyncio.sleep")
    async def test_bills_subscriptions_inside_run_window(self, mock_sleep, make_worker):
        mock_sleep.side_effect = KeyboardInterrupt("Test termination")
        worker = make_worker(today=date(2025, 2, 2))
        worker.run_once = AsyncMock()

        with pytest.raises(KeyboardInterrupt):
            await worker.run_forever(check_interval_seconds=60)

        worker.run_once.assert_awaited_once_with(bill_subscriptions=True)
        mock_sleep.assert_awaited_once_with(60)

    @patch(f"{MODULE}.asyncio.sleep")
    async def test_only_installments_after_run_window(self, mock_sleep, make_worker):
        mock_sleep.side_effect = KeyboardInterrupt("Test termination")
        worker = make_worker(today=date(2025, 2, 15))
        worker.run_once = AsyncMock()

        with pytest.raises(KeyboardInterrupt):
            await worker.run_forever()

        worker.run_once.assert_awaited_once_with(bill_subscriptions=False)
        mock_sleep.assert_awaited_once_with(86400)


@pytest.mark.asyncio
async def test_shutdown_disposes_engine(make_worker):
    worker = make_worker()

    await worker.shutdown()

    worker.engine.dispose.assert_awaited_once()
