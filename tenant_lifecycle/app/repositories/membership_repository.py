from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from tenant_lifecycle.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_organization(
        self, user_id: UUID, organization_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and organization"""
        pass

    @abstractmethod
    async def get_by_email_and_organization(
        self, email: str, organization_id: UUID
    ) -> Optional[Membership]:
        """Get membership by normalized email and organization"""
        pass

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        pass
