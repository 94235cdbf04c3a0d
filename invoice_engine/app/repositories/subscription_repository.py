"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List, Sequence
from invoice_engine.domain.subscription import ClientSubscription


class SubscriptionRepository(ABC):
    """
    Repository interface for ClientSubscription persistence

    Subscriptions are returned with their service inclusions loaded.
    """

    @abstractmethod
    async def get_by_id(self, subscription_id: str) -> Optional[ClientSubscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID

        Returns:
            ClientSubscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_billable_subscriptions(
        self,
        law_firm_id: str,
        period_end: date,
        client_ids: Optional[Sequence[str]] = None,
        subscription_ids: Optional[Sequence[str]] = None,
    ) -> List[ClientSubscription]:
        """
        Retrieve active subscriptions of a law firm started by period_end

        Used by batch subscription billing.

        Args:
            law_firm_id: Law firm identifier
            period_end: Last day of the billing period
            client_ids: Optional filter by client
            subscription_ids: Optional filter by subscription

        Returns:
            List of subscriptions ordered by start date
        """
        pass

    @abstractmethod
    async def get_law_firm_ids_with_active_subscriptions(self) -> List[str]:
        """Law firms that have at least one active subscription"""
        pass

    @abstractmethod
    async def create(self, subscription: ClientSubscription) -> ClientSubscription:
        pass
