"""SQLAlchemy Payment Plan Repository Implementation"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.repositories.payment_plan_repository import PaymentPlanRepository
from invoice_engine.domain.payment_plan import PaymentPlan, PaymentPlanStatus


class SqlAlchemyPaymentPlanRepository(PaymentPlanRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payment_plan_id: str) -> Optional[PaymentPlan]:
        statement = select(PaymentPlan).where(PaymentPlan.id == payment_plan_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_auto_generating_plans(self) -> List[PaymentPlan]:
        statement = (
            select(PaymentPlan)
            .where(PaymentPlan.status == PaymentPlanStatus.ACTIVE)
            .where(PaymentPlan.auto_generate_invoices == True)  # noqa: E712
            .order_by(PaymentPlan.law_firm_id, PaymentPlan.first_payment_date)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
