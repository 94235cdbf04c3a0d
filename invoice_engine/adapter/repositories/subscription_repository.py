"""SQLAlchemy Subscription Repository Implementation

Implements client subscription persistence using SQLAlchemy async session.
"""

from datetime import date
from typing import Optional, List, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.repositories.subscription_repository import SubscriptionRepository
from invoice_engine.domain.subscription import ClientSubscription, SubscriptionStatus


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Service inclusions are loaded eagerly with the subscription.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, subscription_id: str) -> Optional[ClientSubscription]:
        statement = select(ClientSubscription).where(ClientSubscription.id == subscription_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_billable_subscriptions(
        self,
        law_firm_id: str,
        period_end: date,
        client_ids: Optional[Sequence[str]] = None,
        subscription_ids: Optional[Sequence[str]] = None,
    ) -> List[ClientSubscription]:
        statement = (
            select(ClientSubscription)
            .where(ClientSubscription.law_firm_id == law_firm_id)
            .where(ClientSubscription.status == SubscriptionStatus.ACTIVE)
            .where(ClientSubscription.start_date <= period_end)
        )

        if client_ids:
            statement = statement.where(ClientSubscription.client_id.in_(list(client_ids)))

        if subscription_ids:
            statement = statement.where(ClientSubscription.id.in_(list(subscription_ids)))

        statement = statement.order_by(ClientSubscription.start_date, ClientSubscription.id)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_law_firm_ids_with_active_subscriptions(self) -> List[str]:
        statement = (
            select(ClientSubscription.law_firm_id)
            .where(ClientSubscription.status == SubscriptionStatus.ACTIVE)
            .distinct()
            .order_by(ClientSubscription.law_firm_id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, subscription: ClientSubscription) -> ClientSubscription:
        """
        Create a new subscription

        Args:
            subscription: ClientSubscription entity to persist

        Returns:
            Created ClientSubscription
        """
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription
