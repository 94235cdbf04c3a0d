"""Integration tests for payment plan invoicing against a real database"""

import pytest
from datetime import date
from decimal import Decimal

from invoice_engine.adapter.repositories import SqlAlchemyInvoiceRepository, SqlAlchemyPaymentPlanRepository
from invoice_engine.app.use_cases.invoicing import (
    GeneratePaymentPlanInvoiceCommandDTO,
    GenerateRemainingInstallments,
    GenerateRemainingInstallmentsCommandDTO,
)
from tests.integration.seed import LAW_FIRM_ID, payment_plan


class TestPaymentPlanInvoicingIntegration:
    @pytest.mark.asyncio
    async def test_remaining_installments_get_sequential_numbers(self, db_session, payment_plan_generator):
        """
        Given: A 3 x 2500 monthly plan starting 2025-01-10, billed on 2025-02-01
        When: All remaining installments are generated
        Then: Three PLAN invoices in order, only the overdue first one with a late fee
        """
        # Arrange
        db_session.add(payment_plan())
        await db_session.commit()
        use_case = GenerateRemainingInstallments(
            payment_plan_repo=SqlAlchemyPaymentPlanRepository(db_session),
            invoice_repo=SqlAlchemyInvoiceRepository(db_session),
            generator=payment_plan_generator,
        )

        # Act
        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001")
        )

        # Assert
        assert result.is_ok()
        batch = result.value
        assert batch.total_requested == 3
        assert batch.successful_generations == 3
        assert [i.invoice_number for i in batch.invoices] == [
            "PLAN-2025-000001",
            "PLAN-2025-000002",
            "PLAN-2025-000003",
        ]
        assert [i.installment_number for i in batch.invoices] == [1, 2, 3]
        assert [i.due_date for i in batch.invoices] == [
            date(2025, 1, 10),
            date(2025, 2, 10),
            date(2025, 3, 10),
        ]
        assert [i.total_amount for i in batch.invoices] == [
            Decimal("2575.00"),
            Decimal("2500.00"),
            Decimal("2500.00"),
        ]

    @pytest.mark.asyncio
    async def test_rerun_after_partial_billing_continues_from_next_installment(
        self, db_session, payment_plan_generator
    ):
        db_session.add(payment_plan())
        await db_session.commit()
        first = await payment_plan_generator.execute(
            GeneratePaymentPlanInvoiceCommandDTO(
                law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001", scheduled_date=date(2025, 1, 10)
            )
        )
        assert first.value.total_amount == Decimal("2500.00")

        use_case = GenerateRemainingInstallments(
            payment_plan_repo=SqlAlchemyPaymentPlanRepository(db_session),
            invoice_repo=SqlAlchemyInvoiceRepository(db_session),
            generator=payment_plan_generator,
        )
        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001")
        )

        assert result.value.total_requested == 2
        assert [i.installment_number for i in result.value.invoices] == [2, 3]

    @pytest.mark.asyncio
    async def test_explicit_start_reports_already_billed_installment(self, db_session, payment_plan_generator):
        """
        Given: Installment 1 already billed
        When: Remaining installments are generated starting from 1
        Then: Installment 1 fails as a duplicate while 2 and 3 are created
        """
        db_session.add(payment_plan())
        await db_session.commit()
        await payment_plan_generator.execute(
            GeneratePaymentPlanInvoiceCommandDTO(
                law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001", installment_number=1
            )
        )

        use_case = GenerateRemainingInstallments(
            payment_plan_repo=SqlAlchemyPaymentPlanRepository(db_session),
            invoice_repo=SqlAlchemyInvoiceRepository(db_session),
            generator=payment_plan_generator,
        )
        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(
                law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001", start_from_installment=1
            )
        )

        batch = result.value
        assert batch.successful_generations == 2
        assert batch.failed_generations == 1
        assert batch.errors[0].installment_number == 1
        assert batch.errors[0].code == "DUPLICATE_INVOICE"

    @pytest.mark.asyncio
    async def test_installment_beyond_plan_is_rejected(self, db_session, payment_plan_generator):
        db_session.add(payment_plan(installment_count=2))
        await db_session.commit()

        result = await payment_plan_generator.execute(
            GeneratePaymentPlanInvoiceCommandDTO(
                law_firm_id=LAW_FIRM_ID, payment_plan_id="plan_001", installment_number=3
            )
        )

        assert result.is_err()
        assert result.error.code == "INSTALLMENT_OUT_OF_RANGE"
