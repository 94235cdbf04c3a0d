"""SQLAlchemy Time Entry Repository Implementation"""

from datetime import date
from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.repositories.time_entry_repository import TimeEntryRepository
from invoice_engine.domain.time_entry import EntryStatus, TimeEntry


class SqlAlchemyTimeEntryRepository(TimeEntryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_matter(
        self,
        matter_id: str,
        status: Optional[EntryStatus] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> List[TimeEntry]:
        statement = select(TimeEntry).where(TimeEntry.matter_id == matter_id)

        if status:
            statement = statement.where(TimeEntry.entry_status == status)
        if period_start:
            statement = statement.where(TimeEntry.entry_date >= period_start)
        if period_end:
            statement = statement.where(TimeEntry.entry_date <= period_end)

        statement = statement.order_by(TimeEntry.entry_date, TimeEntry.created_at)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_for_subscription(
        self, client_subscription_id: str, period_start: date, period_end: date
    ) -> List[TimeEntry]:
        statement = (
            select(TimeEntry)
            .where(TimeEntry.client_subscription_id == client_subscription_id)
            .where(TimeEntry.entry_date >= period_start)
            .where(TimeEntry.entry_date <= period_end)
            .order_by(TimeEntry.entry_date, TimeEntry.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
