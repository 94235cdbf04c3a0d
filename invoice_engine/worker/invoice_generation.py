"""Invoice Generation Background Worker

Generates subscription invoices for the previous month and invoices for
payment plan installments that fall due, for every law firm.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
import time
from calendar import monthrange
from datetime import date, timedelta
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from invoice_engine.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentPlanRepository,
    SqlAlchemySubscriptionRepository,
    SqlAlchemyTimeEntryRepository,
)
from invoice_engine.adapter.services import (
    SqlAlchemyInvoiceNumberAllocator,
    SqlAlchemyUnitOfWork,
    SystemClock,
)
from invoice_engine.app.calculators.schedule import installment_due_date
from invoice_engine.app.services.clock import Clock
from invoice_engine.app.use_cases.invoicing import (
    GeneratePaymentPlanInvoice,
    GeneratePaymentPlanInvoiceCommandDTO,
    GenerateSubscriptionBatchCommandDTO,
    GenerateSubscriptionInvoice,
    GenerateSubscriptionInvoiceBatch,
    InvoiceErrorCode,
    InvoiceGenerationRunResultDTO,
)
from invoice_engine.depends import create_tables

logger = logging.getLogger(__name__)


class InvoiceGenerationWorker:
    """
    Background worker for scheduled invoice generation

    Features:
    - Bills every active subscription for the previous calendar month
    - Bills installments of auto-generating payment plans due within
      PAYMENT_PLAN_LEAD_DAYS
    - Idempotent: already invoiced subscriptions and installments are
      skipped by the duplicate guard
    - Each law firm and each plan runs in its own session

    Usage:
        # Run once for previous month (typical cron usage)
        worker = InvoiceGenerationWorker()
        result = await worker.run_once()

        # Run once for a specific month
        result = await worker.run_once(year=2025, month=1)

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            clock: Clock used for billing periods and late fees
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.clock = clock or SystemClock()
        self.currency = ApplicationConfig.DEFAULT_CURRENCY
        self.lead_days = ApplicationConfig.PAYMENT_PLAN_LEAD_DAYS

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("InvoiceGenerationWorker initialized")

    def _get_billing_period(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> Tuple[date, date]:
        """
        Get billing period start and end dates

        If year/month not provided, uses previous month.
        """
        if year is None or month is None:
            today = self.clock.today()
            if today.month == 1:
                year = today.year - 1
                month = 12
            else:
                year = today.year
                month = today.month - 1

        _, last_day = monthrange(year, month)
        return date(year, month, 1), date(year, month, last_day)

    def _subscription_generator(self, session: AsyncSession) -> GenerateSubscriptionInvoice:
        return GenerateSubscriptionInvoice(
            uow=SqlAlchemyUnitOfWork(session),
            subscription_repo=SqlAlchemySubscriptionRepository(session),
            time_entry_repo=SqlAlchemyTimeEntryRepository(session),
            invoice_repo=SqlAlchemyInvoiceRepository(session),
            number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
            clock=self.clock,
            currency=self.currency,
        )

    def _payment_plan_generator(self, session: AsyncSession) -> GeneratePaymentPlanInvoice:
        return GeneratePaymentPlanInvoice(
            uow=SqlAlchemyUnitOfWork(session),
            payment_plan_repo=SqlAlchemyPaymentPlanRepository(session),
            invoice_repo=SqlAlchemyInvoiceRepository(session),
            number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
            clock=self.clock,
            currency=self.currency,
        )

    async def _bill_subscriptions(
        self, period_start: date, period_end: date
    ) -> Tuple[int, int, int, int]:
        """Returns (law_firms_processed, created, failed, duplicates)"""
        created = failed = duplicates = 0

        async with self.async_session_factory() as session:
            law_firm_ids = await SqlAlchemySubscriptionRepository(
                session
            ).get_law_firm_ids_with_active_subscriptions()

        logger.info(f"Found {len(law_firm_ids)} law firms with active subscriptions")

        for law_firm_id in law_firm_ids:
            try:
                async with self.async_session_factory() as firm_session:
                    batch_uc = GenerateSubscriptionInvoiceBatch(
                        subscription_repo=SqlAlchemySubscriptionRepository(firm_session),
                        generator=self._subscription_generator(firm_session),
                    )
                    result = await batch_uc.execute(
                        GenerateSubscriptionBatchCommandDTO(
                            law_firm_id=law_firm_id,
                            period_start=period_start,
                            period_end=period_end,
                        )
                    )

                if result.is_err():
                    logger.error(
                        f"Subscription billing failed for law firm {law_firm_id}: "
                        f"{result.error.message}"
                    )
                    failed += 1
                    continue

                batch = result.value
                created += batch.successful_generations
                for error in batch.errors:
                    if error.code == InvoiceErrorCode.DUPLICATE_INVOICE.value:
                        duplicates += 1
                    else:
                        failed += 1
                        logger.warning(
                            f"Subscription {error.subject_id} not invoiced: "
                            f"{error.code} {error.message}"
                        )

            except Exception as e:
                logger.error(f"Unexpected error billing law firm {law_firm_id}: {e}")
                failed += 1

        return len(law_firm_ids), created, failed, duplicates

    async def _bill_due_installments(self, today: date) -> Tuple[int, int, int]:
        """Returns (created, failed, duplicates)"""
        created = failed = duplicates = 0
        horizon = today + timedelta(days=self.lead_days)

        async with self.async_session_factory() as session:
            plans = await SqlAlchemyPaymentPlanRepository(session).get_auto_generating_plans()

        logger.info(f"Found {len(plans)} auto-generating payment plans")

        for plan in plans:
            try:
                async with self.async_session_factory() as plan_session:
                    invoice_repo = SqlAlchemyInvoiceRepository(plan_session)
                    generator = self._payment_plan_generator(plan_session)

                    installment_number = await invoice_repo.get_last_installment_number(plan.id) + 1

                    while (
                        installment_number <= plan.installment_count
                        and installment_due_date(
                            plan.first_payment_date, plan.frequency, installment_number
                        ) <= horizon
                    ):
                        result = await generator.execute(
                            GeneratePaymentPlanInvoiceCommandDTO(
                                law_firm_id=plan.law_firm_id,
                                payment_plan_id=plan.id,
                                installment_number=installment_number,
                                scheduled_date=today,
                            )
                        )

                        if result.is_ok():
                            created += 1
                        elif result.error.code == InvoiceErrorCode.DUPLICATE_INVOICE.value:
                            duplicates += 1
                        else:
                            failed += 1
                            logger.warning(
                                f"Installment {installment_number} of plan {plan.id} "
                                f"not invoiced: {result.error.code} {result.error.message}"
                            )
                            break

                        installment_number += 1

            except Exception as e:
                logger.error(f"Unexpected error billing payment plan {plan.id}: {e}")
                failed += 1

        return created, failed, duplicates

    async def run_once(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        bill_subscriptions: bool = True,
    ) -> InvoiceGenerationRunResultDTO:
        """
        Run invoice generation once

        Args:
            year: Year (optional, defaults to previous month)
            month: Month (optional, defaults to previous month)
            bill_subscriptions: Also bill subscriptions for the period

        Returns:
            InvoiceGenerationRunResultDTO with summary
        """
        start_time = time.time()
        period_start, period_end = self._get_billing_period(year, month)

        logger.info(f"Starting invoice generation for period {period_start} to {period_end}")

        law_firms_processed = sub_created = sub_failed = 0
        plan_created = plan_failed = 0
        duplicates = 0

        if bill_subscriptions and ApplicationConfig.SUBSCRIPTION_BILLING_ENABLED:
            law_firms_processed, sub_created, sub_failed, sub_duplicates = (
                await self._bill_subscriptions(period_start, period_end)
            )
            duplicates += sub_duplicates

        if ApplicationConfig.PAYMENT_PLAN_BILLING_ENABLED:
            plan_created, plan_failed, plan_duplicates = await self._bill_due_installments(
                self.clock.today()
            )
            duplicates += plan_duplicates

        execution_time_ms = int((time.time() - start_time) * 1000)

        result = InvoiceGenerationRunResultDTO(
            billing_period_start=period_start,
            billing_period_end=period_end,
            law_firms_processed=law_firms_processed,
            subscription_invoices_created=sub_created,
            subscription_failures=sub_failed,
            installment_invoices_created=plan_created,
            installment_failures=plan_failed,
            duplicates_skipped=duplicates,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Invoice generation complete: "
            f"{sub_created} subscription invoices ({sub_failed} failed), "
            f"{plan_created} installment invoices ({plan_failed} failed), "
            f"{duplicates} already invoiced, "
            f"{execution_time_ms}ms"
        )

        return result

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run generation continuously

        Installments are checked every cycle; subscriptions are billed once
        per month during the first WORKER_RUN_WINDOW_DAYS days.

        Args:
            check_interval_seconds: Seconds between checks
                (default: ApplicationConfig.WORKER_INTERVAL_SECONDS)
        """
        interval = check_interval_seconds or ApplicationConfig.WORKER_INTERVAL_SECONDS
        logger.info(f"Starting continuous invoice generation with {interval}s interval")

        last_processed_month = None

        while True:
            try:
                today = self.clock.today()
                current_month = (today.year, today.month)
                bill_subscriptions = (
                    today.day <= ApplicationConfig.WORKER_RUN_WINDOW_DAYS
                    and last_processed_month != current_month
                )

                await self.run_once(bill_subscriptions=bill_subscriptions)

                if bill_subscriptions:
                    last_processed_month = current_month

            except Exception as e:
                logger.error(f"Invoice generation cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InvoiceGenerationWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for previous month
        python -m invoice_engine.worker.invoice_generation

        # Run for specific month
        python -m invoice_engine.worker.invoice_generation --year 2025 --month 1

        # Run continuously
        python -m invoice_engine.worker.invoice_generation --continuous
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Invoice Generation Worker")
    parser.add_argument("--year", type=int, help="Year of the subscription billing period")
    parser.add_argument("--month", type=int, help="Month of the subscription billing period")
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    args = parser.parse_args()

    worker = InvoiceGenerationWorker()

    try:
        if ApplicationConfig.AUTO_CREATE_TABLES:
            await create_tables(worker.engine)

        if args.continuous:
            await worker.run_forever()
        else:
            result = await worker.run_once(year=args.year, month=args.month)
            print("Invoice generation complete:")
            print(f"  Period: {result.billing_period_start} - {result.billing_period_end}")
            print(f"  Law firms processed: {result.law_firms_processed}")
            print(f"  Subscription invoices: {result.subscription_invoices_created} "
                  f"({result.subscription_failures} failed)")
            print(f"  Installment invoices: {result.installment_invoices_created} "
                  f"({result.installment_failures} failed)")
            print(f"  Already invoiced: {result.duplicates_skipped}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
