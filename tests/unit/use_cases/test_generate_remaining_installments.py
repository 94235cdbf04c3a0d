"""Unit tests for GenerateRemainingInstallments use case"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from libs.result import Error, Return
from invoice_engine.app.use_cases.invoicing.dtos import GenerateRemainingInstallmentsCommandDTO
from invoice_engine.app.use_cases.invoicing.generate_payment_plan_invoice import GeneratePaymentPlanInvoice
from invoice_engine.app.use_cases.invoicing.generate_remaining_installments import GenerateRemainingInstallments
from invoice_engine.domain.payment_plan import PaymentFrequency, PaymentPlan


@pytest.fixture
def sample_plan():
    return PaymentPlan(
        id="plan_001",
        law_firm_id="firm_001",
        client_id="client_042",
        total_amount=Decimal("3000.00"),
        installment_count=3,
        installment_amount=Decimal("1000.00"),
        frequency=PaymentFrequency.MONTHLY,
        first_payment_date=date(2025, 3, 10),
        late_fee_rate=Decimal("2.00"),
    )


@pytest.fixture
def mock_payment_plan_repo(sample_plan):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_plan)
    return repo


@pytest.fixture
def generator(mock_uow, mock_payment_plan_repo, mock_invoice_repo, mock_allocator, clock):
    return GeneratePaymentPlanInvoice(
        uow=mock_uow,
        payment_plan_repo=mock_payment_plan_repo,
        invoice_repo=mock_invoice_repo,
        number_allocator=mock_allocator,
        clock=clock,
    )


@pytest.fixture
def use_case(mock_payment_plan_repo, mock_invoice_repo, generator):
    return GenerateRemainingInstallments(mock_payment_plan_repo, mock_invoice_repo, generator)


@pytest.mark.asyncio
class TestGenerateRemainingInstallments:
    async def test_bills_every_installment_in_order(self, use_case):
        """
        Given: A 3 installment plan with nothing billed
        When: Remaining installments are generated
        Then: Three invoices numbered in installment order
        """
        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id="firm_001", payment_plan_id="plan_001")
        )

        assert result.is_ok()
        batch = result.value
        assert batch.total_requested == 3
        assert batch.successful_generations == 3
        assert batch.failed_generations == 0
        assert [inv.installment_number for inv in batch.invoices] == [1, 2, 3]
        assert [inv.invoice_number for inv in batch.invoices] == [
            "PLAN-2025-000001",
            "PLAN-2025-000002",
            "PLAN-2025-000003",
        ]
        assert [inv.due_date for inv in batch.invoices] == [
            date(2025, 3, 10),
            date(2025, 4, 10),
            date(2025, 5, 10),
        ]

    async def test_starts_after_last_billed_installment(self, use_case, mock_invoice_repo):
        mock_invoice_repo.get_last_installment_number = AsyncMock(return_value=2)

        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id="firm_001", payment_plan_id="plan_001")
        )

        assert result.value.total_requested == 1
        assert result.value.invoices[0].installment_number == 3

    async def test_explicit_start(self, use_case):
        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(
                law_firm_id="firm_001", payment_plan_id="plan_001", start_from_installment=2
            )
        )

        assert [inv.installment_number for inv in result.value.invoices] == [2, 3]

    async def test_one_failure_does_not_abort_batch(self, mock_payment_plan_repo, mock_invoice_repo, generator):
        """
        Given: Installment 2 fails as a duplicate
        When: Remaining installments are generated
        Then: Installments 1 and 3 still succeed and the failure is reported
        """
        original_execute = generator.execute

        async def execute(command):
            if command.installment_number == 2:
                return Return.err(Error(code="DUPLICATE_INVOICE", message="already billed"))
            return await original_execute(command)

        generator.execute = execute
        use_case = GenerateRemainingInstallments(mock_payment_plan_repo, mock_invoice_repo, generator)

        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id="firm_001", payment_plan_id="plan_001")
        )

        batch = result.value
        assert batch.successful_generations == 2
        assert batch.failed_generations == 1
        assert batch.errors[0].installment_number == 2
        assert batch.errors[0].code == "DUPLICATE_INVOICE"

    async def test_fully_billed_plan_is_empty_batch(self, use_case, mock_invoice_repo):
        mock_invoice_repo.get_last_installment_number = AsyncMock(return_value=3)

        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id="firm_001", payment_plan_id="plan_001")
        )

        assert result.value.total_requested == 0
        assert result.value.invoices == []

    async def test_plan_not_found(self, use_case, mock_payment_plan_repo):
        mock_payment_plan_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(
            GenerateRemainingInstallmentsCommandDTO(law_firm_id="firm_001", payment_plan_id="missing")
        )

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
