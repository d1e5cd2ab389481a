from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from tenant_lifecycle.domain.entities import Invite, InviteStatus


class IInviteRepository(ABC):
    """Invite repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invite_id: UUID) -> Optional[Invite]:
        """Get invite by ID"""
        pass

    @abstractmethod
    async def get_pending_by_organization_and_email(
        self, organization_id: UUID, email: str
    ) -> Optional[Invite]:
        """Get the pending invite for (organization, normalized email)"""
        pass

    @abstractmethod
    async def list_pending_for_email(self, email: str, now: datetime) -> List[Invite]:
        """Pending, unexpired invites for an email across organizations, newest first"""
        pass

    @abstractmethod
    async def list_by_organization(self, organization_id: UUID) -> List[Invite]:
        """All invites of an organization, newest first"""
        pass

    @abstractmethod
    async def create(self, invite: Invite) -> Invite:
        """Insert a new invite"""
        pass

    @abstractmethod
    async def upsert_pending(self, invite: Invite, now: datetime) -> Tuple[Invite, bool]:
        """
        Insert ``invite`` unless a pending one exists for its (organization, email).

        Returns the stored invite and whether it was newly created. When a
        pending invite already exists it is returned untouched; extending it
        is the caller's decision.
        """
        pass

    @abstractmethod
    async def extend_expiry_if_pending(
        self, invite_id: UUID, expires_at: datetime, now: datetime
    ) -> bool:
        """Set expires_at only while the invite is still pending"""
        pass

    @abstractmethod
    async def update_status_if(
        self,
        invite_id: UUID,
        expected_status: InviteStatus,
        new_status: InviteStatus,
        now: datetime,
    ) -> bool:
        """Conditional status transition; False when the row was not in expected_status"""
        pass

    @abstractmethod
    async def delete_if_status_in(
        self, invite_id: UUID, statuses: Iterable[InviteStatus]
    ) -> bool:
        """Conditional delete; False when no row matched"""
        pass

    @abstractmethod
    async def expire_overdue(self, now: datetime) -> int:
        """Flip every pending invite with expires_at <= now to expired"""
        pass

    @abstractmethod
    async def delete_expired_before(self, cutoff: datetime) -> int:
        """Delete expired invites last updated before cutoff"""
        pass

    @abstractmethod
    async def count_by_status(self, status: InviteStatus) -> int:
        """Number of invites in a status"""
        pass

    @abstractmethod
    async def count_overdue_pending(self, now: datetime) -> int:
        """Pending invites already past expires_at"""
        pass
