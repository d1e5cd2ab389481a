from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_lifecycle.domain.entities import NotificationKind


class IDismissalBackend(ABC):
    """
    Key-value backend for notification dismissals, keyed by
    (organization_id, notification kind), valued by a naive UTC timestamp.
    """

    @abstractmethod
    async def get(self, organization_id: UUID, kind: NotificationKind) -> Optional[datetime]:
        pass

    @abstractmethod
    async def set(self, organization_id: UUID, kind: NotificationKind, at: datetime) -> None:
        pass

    @abstractmethod
    async def delete(self, organization_id: UUID, kind: NotificationKind) -> None:
        pass
