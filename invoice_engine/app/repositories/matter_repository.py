"""Matter Repository Interface

Defines the contract for reading matters and their billing data.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from invoice_engine.domain.matter import Matter, CaseBillingConfig, CaseOutcome
from invoice_engine.domain.case_expense import CaseExpense


class MatterRepository(ABC):
    """Repository interface for Matter and its billing configuration"""

    @abstractmethod
    async def get_by_id(self, matter_id: str) -> Optional[Matter]:
        """
        Retrieve matter by ID

        Args:
            matter_id: Matter ID

        Returns:
            Matter if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_billing_config(self, matter_id: str) -> Optional[CaseBillingConfig]:
        """
        Retrieve the case billing configuration of a matter

        Returns:
            CaseBillingConfig if configured, None otherwise
        """
        pass

    @abstractmethod
    async def get_case_outcome(self, matter_id: str) -> Optional[CaseOutcome]:
        """
        Retrieve the recorded outcome of a matter

        Returns:
            CaseOutcome if recorded, None otherwise
        """
        pass

    @abstractmethod
    async def get_approved_expenses(
        self,
        matter_id: str,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> List[CaseExpense]:
        """
        Retrieve approved expenses of a matter, optionally within a period

        Returns:
            List of expenses ordered by expense date
        """
        pass
