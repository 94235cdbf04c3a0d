"""Time Entry Repository Interface

Defines the contract for reading time entries used as line item sources.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from invoice_engine.domain.time_entry import TimeEntry, EntryStatus


class TimeEntryRepository(ABC):
    """Repository interface for TimeEntry reads"""

    @abstractmethod
    async def get_for_matter(
        self,
        matter_id: str,
        status: Optional[EntryStatus] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> List[TimeEntry]:
        """
        Retrieve time entries recorded against a matter

        Args:
            matter_id: Matter ID
            status: Optional filter by entry status
            period_start: Optional first entry date (inclusive)
            period_end: Optional last entry date (inclusive)

        Returns:
            List of entries ordered by entry date
        """
        pass

    @abstractmethod
    async def get_for_subscription(
        self,
        client_subscription_id: str,
        period_start: date,
        period_end: date,
    ) -> List[TimeEntry]:
        """
        Retrieve time entries tagged to a subscription within a period

        Args:
            client_subscription_id: Subscription ID
            period_start: First entry date (inclusive)
            period_end: Last entry date (inclusive)

        Returns:
            List of entries ordered by entry date
        """
        pass
