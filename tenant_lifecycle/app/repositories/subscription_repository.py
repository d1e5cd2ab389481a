from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from tenant_lifecycle.domain.entities import Subscription

# Receives the current row, returns the column changes to write (None = no change)
SubscriptionMutator = Callable[[Subscription], Optional[Dict[str, Any]]]


class ISubscriptionRepository(ABC):
    """Subscription repository interface - application layer"""

    @abstractmethod
    async def get_by_organization_id(self, organization_id: UUID) -> Optional[Subscription]:
        """Get subscription by organization ID"""
        pass

    @abstractmethod
    async def get_by_external_customer_ref(
        self, external_customer_ref: str
    ) -> Optional[Subscription]:
        """Get subscription by payment-provider customer reference"""
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """Create a new subscription"""
        pass

    @abstractmethod
    async def conditional_apply_event(
        self,
        organization_id: UUID,
        event_id: str,
        event_at: datetime,
        mutator: SubscriptionMutator,
        now: datetime,
    ) -> Optional[Subscription]:
        """
        Apply one event to the subscription row.

        Returns None when the event is a duplicate or not strictly newer than
        the last applied one. Otherwise writes the mutator's changes plus the
        new event markers, guarded by the previously observed
        last_applied_event_at, and returns the refreshed row.

        Raises:
            StoreConflictError: the guard kept failing because of concurrent writers
        """
        pass
