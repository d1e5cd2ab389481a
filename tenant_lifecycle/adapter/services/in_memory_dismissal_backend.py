from datetime import datetime
from typing import Dict, Optional, Tuple
from uuid import UUID

from tenant_lifecycle.app.repositories.notification_dismissal_repository import (
    IDismissalBackend,
)
from tenant_lifecycle.domain.entities import NotificationKind


class InMemoryDismissalBackend(IDismissalBackend):
    """Process-local dismissal backend, one instance per client session"""

    def __init__(self):
        self._entries: Dict[Tuple[UUID, NotificationKind], datetime] = {}

    async def get(self, organization_id: UUID, kind: NotificationKind) -> Optional[datetime]:
        return self._entries.get((organization_id, kind))

    async def set(self, organization_id: UUID, kind: NotificationKind, at: datetime) -> None:
        self._entries[(organization_id, kind)] = at

    async def delete(self, organization_id: UUID, kind: NotificationKind) -> None:
        self._entries.pop((organization_id, kind), None)
