import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.app.repositories.subscription_repository import (
    ISubscriptionRepository,
    SubscriptionMutator,
)
from tenant_lifecycle.app.services.unit_of_work import StoreConflictError
from tenant_lifecycle.domain.entities import Subscription

logger = logging.getLogger(__name__)

MAX_APPLY_ATTEMPTS = 3


class SubscriptionRepository(ISubscriptionRepository):
    """Subscription repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_organization_id(self, organization_id: UUID) -> Optional[Subscription]:
        """Get subscription by organization ID"""
        stmt = (
            select(Subscription)
            .where(Subscription.organization_id == organization_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_external_customer_ref(
        self, external_customer_ref: str
    ) -> Optional[Subscription]:
        """Get subscription by payment-provider customer reference"""
        stmt = (
            select(Subscription)
            .where(Subscription.external_customer_ref == external_customer_ref)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, subscription: Subscription) -> Subscription:
        """Create a new subscription"""
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def conditional_apply_event(
        self,
        organization_id: UUID,
        event_id: str,
        event_at: datetime,
        mutator: SubscriptionMutator,
        now: datetime,
    ) -> Optional[Subscription]:
        for attempt in range(1, MAX_APPLY_ATTEMPTS + 1):
            current = await self.get_by_organization_id(organization_id)
            if current is None:
                return None
            if current.last_applied_event_id == event_id:
                return None
            observed_at = current.last_applied_event_at
            if observed_at is not None and event_at <= observed_at:
                return None

            values = dict(mutator(current) or {})
            values.update(
                last_applied_event_id=event_id,
                last_applied_event_at=event_at,
                updated_at=now,
            )

            stmt = update(Subscription).where(Subscription.organization_id == organization_id)
            if observed_at is None:
                stmt = stmt.where(Subscription.last_applied_event_at.is_(None))
            else:
                stmt = stmt.where(Subscription.last_applied_event_at == observed_at)
            stmt = stmt.values(**values).execution_options(synchronize_session=False)

            result = await self.session.execute(stmt)
            if result.rowcount == 1:
                return await self.get_by_organization_id(organization_id)

            logger.warning(
                f"Subscription {organization_id} changed while applying {event_id} "
                f"(attempt {attempt}/{MAX_APPLY_ATTEMPTS})"
            )

        raise StoreConflictError(
            f"Subscription {organization_id} kept changing while applying {event_id}"
        )
