from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.app.repositories.notification_dismissal_repository import (
    IDismissalBackend,
)
from tenant_lifecycle.domain.entities import NotificationDismissal, NotificationKind


class NotificationDismissalRepository(IDismissalBackend):
    """Dismissal backend stored in the notification_dismissals table"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, organization_id: UUID, kind: NotificationKind) -> Optional[datetime]:
        stmt = select(NotificationDismissal.dismissed_at).where(
            NotificationDismissal.organization_id == organization_id,
            NotificationDismissal.notification_kind == kind,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def set(self, organization_id: UUID, kind: NotificationKind, at: datetime) -> None:
        await self.session.merge(
            NotificationDismissal(
                organization_id=organization_id, notification_kind=kind, dismissed_at=at
            )
        )
        await self.session.flush()

    async def delete(self, organization_id: UUID, kind: NotificationKind) -> None:
        stmt = (
            delete(NotificationDismissal)
            .where(
                NotificationDismissal.organization_id == organization_id,
                NotificationDismissal.notification_kind == kind,
            )
        )
        await self.session.execute(stmt)
