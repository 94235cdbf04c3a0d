"""Payment Plan Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional, List
from invoice_engine.domain.payment_plan import PaymentPlan


class PaymentPlanRepository(ABC):
    """Repository interface for PaymentPlan persistence"""

    @abstractmethod
    async def get_by_id(self, payment_plan_id: str) -> Optional[PaymentPlan]:
        """
        Retrieve payment plan by ID

        Returns:
            PaymentPlan if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_auto_generating_plans(self) -> List[PaymentPlan]:
        """
        Retrieve active plans with auto_generate_invoices enabled

        Used by the invoice generation worker.
        """
        pass
