from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.app.repositories.invite_repository import IInviteRepository
from tenant_lifecycle.domain.entities import Invite, InviteStatus


class InviteRepository(IInviteRepository):
    """Invite repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invite_id: UUID) -> Optional[Invite]:
        """Get invite by ID"""
        stmt = (
            select(Invite)
            .where(Invite.id == invite_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_pending_by_organization_and_email(
        self, organization_id: UUID, email: str
    ) -> Optional[Invite]:
        """Get pending invite by organization and email"""
        stmt = (
            select(Invite)
            .where(
                Invite.organization_id == organization_id,
                Invite.email == email,
                Invite.status == InviteStatus.pending,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_pending_for_email(self, email: str, now: datetime) -> List[Invite]:
        """Get pending, unexpired invites for an email across organizations"""
        stmt = (
            select(Invite)
            .where(
                Invite.email == email,
                Invite.status == InviteStatus.pending,
                Invite.expires_at > now,
            )
            .order_by(Invite.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_by_organization(self, organization_id: UUID) -> List[Invite]:
        """Get all invites for an organization"""
        stmt = (
            select(Invite)
            .where(Invite.organization_id == organization_id)
            .order_by(Invite.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, invite: Invite) -> Invite:
        """Create a new invite"""
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite)
        return invite

    async def upsert_pending(self, invite: Invite, now: datetime) -> Tuple[Invite, bool]:
        existing = await self.get_pending_by_organization_and_email(
            invite.organization_id, invite.email
        )
        if existing is not None:
            return existing, False
        # A concurrent insert trips uq_invite_pending_org_email on flush
        invite.created_at = now
        invite.updated_at = now
        return await self.create(invite), True

    async def extend_expiry_if_pending(
        self, invite_id: UUID, expires_at: datetime, now: datetime
    ) -> bool:
        stmt = (
            update(Invite)
            .where(Invite.id == invite_id, Invite.status == InviteStatus.pending)
            .values(expires_at=expires_at, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def update_status_if(
        self,
        invite_id: UUID,
        expected_status: InviteStatus,
        new_status: InviteStatus,
        now: datetime,
    ) -> bool:
        stmt = (
            update(Invite)
            .where(Invite.id == invite_id, Invite.status == expected_status)
            .values(status=new_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def delete_if_status_in(
        self, invite_id: UUID, statuses: Iterable[InviteStatus]
    ) -> bool:
        stmt = (
            delete(Invite)
            .where(Invite.id == invite_id, Invite.status.in_(list(statuses)))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def expire_overdue(self, now: datetime) -> int:
        stmt = (
            update(Invite)
            .where(Invite.status == InviteStatus.pending, Invite.expires_at <= now)
            .values(status=InviteStatus.expired, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_expired_before(self, cutoff: datetime) -> int:
        stmt = (
            delete(Invite)
            .where(Invite.status == InviteStatus.expired, Invite.updated_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def count_by_status(self, status: InviteStatus) -> int:
        stmt = select(func.count()).select_from(Invite).where(Invite.status == status)
        result = await self.session.exec(stmt)
        return result.one()

    async def count_overdue_pending(self, now: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(Invite)
            .where(Invite.status == InviteStatus.pending, Invite.expires_at <= now)
        )
        result = await self.session.exec(stmt)
        return result.one()
