"""Integration tests for case invoicing against a real database"""

import pytest
from datetime import date
from decimal import Decimal
from sqlmodel import func, select

from invoice_engine.app.use_cases.invoicing import GenerateCaseInvoiceCommandDTO
from invoice_engine.domain import CaseExpense, ExpenseStatus, Invoice
from tests.integration.seed import LAW_FIRM_ID, hourly_matter_rows, percentage_matter_rows


class TestCaseInvoicingIntegration:
    @pytest.mark.asyncio
    async def test_hourly_matter_bills_approved_time_up_to_minimum(self, db_session, case_generator):
        """
        Given: 3.5 approved hours at 350/h, one draft entry, minimum fee 2000
        When: The matter is invoiced
        Then: Only approved entries are charged and an adjustment lifts the total to 2000
        """
        # Arrange
        db_session.add_all(hourly_matter_rows())
        await db_session.commit()

        # Act
        result = await case_generator.execute(
            GenerateCaseInvoiceCommandDTO(law_firm_id=LAW_FIRM_ID, matter_id="matter_001")
        )

        # Assert
        assert result.is_ok()
        invoice = result.value
        assert invoice.invoice_number == "CASE-2025-000001"
        assert invoice.total_amount == Decimal("2000.00")
        assert invoice.due_date == date(2025, 3, 3)

        time_lines = [line for line in invoice.line_items if line.line_type == "time_entry"]
        assert [line.total_price for line in time_lines] == [Decimal("700.00"), Decimal("525.00")]
        adjustment = [line for line in invoice.line_items if line.line_type == "adjustment"]
        assert adjustment[0].total_price == Decimal("775.00")

    @pytest.mark.asyncio
    async def test_percentage_matter_with_reimbursable_expenses(self, db_session, case_generator):
        """
        Given: 30% of 50000 recovered plus a 2000 success fee and two expenses
        When: The matter is invoiced with expenses
        Then: Fee 17000 plus only the approved reimbursable expense
        """
        db_session.add_all(percentage_matter_rows())
        db_session.add_all([
            CaseExpense(
                matter_id="matter_002",
                description="Court filing fee",
                amount=Decimal("150.00"),
                expense_date=date(2025, 1, 8),
                status=ExpenseStatus.APPROVED,
                is_reimbursable=True,
            ),
            CaseExpense(
                matter_id="matter_002",
                description="Office supplies",
                amount=Decimal("80.00"),
                expense_date=date(2025, 1, 9),
                status=ExpenseStatus.APPROVED,
                is_reimbursable=False,
            ),
        ])
        await db_session.commit()

        result = await case_generator.execute(
            GenerateCaseInvoiceCommandDTO(
                law_firm_id=LAW_FIRM_ID, matter_id="matter_002", include_expenses=True
            )
        )

        assert result.is_ok()
        assert result.value.total_amount == Decimal("17150.00")
        assert result.value.payment_terms == "15_days"
        assert result.value.due_date == date(2025, 2, 16)
        expense_lines = [line for line in result.value.line_items if line.line_type == "expense"]
        assert len(expense_lines) == 1

    @pytest.mark.asyncio
    async def test_same_matter_and_period_is_rejected_unless_forced(self, db_session, case_generator):
        db_session.add_all(hourly_matter_rows())
        await db_session.commit()
        command = GenerateCaseInvoiceCommandDTO(
            law_firm_id=LAW_FIRM_ID,
            matter_id="matter_001",
            billing_period_start=date(2025, 1, 1),
            billing_period_end=date(2025, 1, 31),
        )
        await case_generator.execute(command)

        duplicate = await case_generator.execute(command)
        forced = await case_generator.execute(command.model_copy(update={"force_regenerate": True}))

        assert duplicate.error.code == "DUPLICATE_INVOICE"
        assert forced.is_ok()
        assert forced.value.invoice_number == "CASE-2025-000002"

    @pytest.mark.asyncio
    async def test_missing_outcome_for_percentage_matter(self, db_session, case_generator):
        matter, config, _ = percentage_matter_rows("matter_003")
        db_session.add_all([matter, config])
        await db_session.commit()

        result = await case_generator.execute(
            GenerateCaseInvoiceCommandDTO(law_firm_id=LAW_FIRM_ID, matter_id="matter_003")
        )

        assert result.is_err()
        assert result.error.code == "MISSING_OUTCOME_DATA"

    @pytest.mark.asyncio
    async def test_matter_without_billing_config_is_not_found(self, db_session, case_generator):
        """
        Given: A matter with no case billing configuration
        When: The matter is invoiced
        Then: NOT_FOUND for the matter and no invoice is stored
        """
        matter, *_ = hourly_matter_rows("matter_004")
        db_session.add(matter)
        await db_session.commit()

        result = await case_generator.execute(
            GenerateCaseInvoiceCommandDTO(law_firm_id=LAW_FIRM_ID, matter_id="matter_004")
        )

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
        assert result.error.details["subject_type"] == "matter"
        stored = (await db_session.execute(select(func.count()).select_from(Invoice))).scalar_one()
        assert stored == 0
