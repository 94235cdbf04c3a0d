"""SQLAlchemy Matter Repository Implementation"""

from datetime import date
from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.repositories.matter_repository import MatterRepository
from invoice_engine.domain.case_expense import CaseExpense, ExpenseStatus
from invoice_engine.domain.matter import CaseBillingConfig, CaseOutcome, Matter


class SqlAlchemyMatterRepository(MatterRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, matter_id: str) -> Optional[Matter]:
        statement = select(Matter).where(Matter.id == matter_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_billing_config(self, matter_id: str) -> Optional[CaseBillingConfig]:
        statement = select(CaseBillingConfig).where(CaseBillingConfig.matter_id == matter_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_case_outcome(self, matter_id: str) -> Optional[CaseOutcome]:
        statement = select(CaseOutcome).where(CaseOutcome.matter_id == matter_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_approved_expenses(
        self,
        matter_id: str,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> List[CaseExpense]:
        """
        Retrieve approved reimbursable expenses of a matter

        Args:
            matter_id: Matter ID
            period_start: Optional first expense date (inclusive)
            period_end: Optional last expense date (inclusive)

        Returns:
            List of expenses ordered by expense date
        """
        statement = (
            select(CaseExpense)
            .where(CaseExpense.matter_id == matter_id)
            .where(CaseExpense.status == ExpenseStatus.APPROVED)
            .where(CaseExpense.is_reimbursable == True)  # noqa: E712
        )

        if period_start:
            statement = statement.where(CaseExpense.expense_date >= period_start)
        if period_end:
            statement = statement.where(CaseExpense.expense_date <= period_end)

        statement = statement.order_by(CaseExpense.expense_date, CaseExpense.id)

        result = await self.session.execute(statement)
        return list(result.scalars().all())
