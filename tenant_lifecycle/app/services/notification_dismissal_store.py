"""
Notification Dismissal Store

Per (organization, notification kind) dismissal timestamps with a time-boxed
reset: a dismissal counts while ``now - dismissed_at <= window`` (24h by
default, boundary inclusive) and is treated as absent afterwards. Expiry is
lazy; stale records are evicted when read.

The conversion-success banner is a one-shot flag stored under its own kind.
Raising it clears both trial dismissals.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from tenant_lifecycle.app.repositories.notification_dismissal_repository import (
    IDismissalBackend,
)
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.domain.entities import NotificationKind

logger = logging.getLogger(__name__)

DEFAULT_DISMISS_WINDOW = timedelta(hours=24)

TRIAL_KINDS = (NotificationKind.trial_countdown, NotificationKind.trial_expired)


class VisibleNotifications(BaseModel):
    """Which trial banners the UI should render"""

    show_trial_countdown: bool
    show_trial_expired: bool
    show_conversion_success: bool


class NotificationDismissalStore:
    def __init__(
        self,
        backend: IDismissalBackend,
        clock: Clock,
        window: timedelta = DEFAULT_DISMISS_WINDOW,
    ):
        self.backend = backend
        self.clock = clock
        self.window = window

    async def is_dismissed(self, organization_id: UUID, kind: NotificationKind) -> bool:
        dismissed_at = await self.backend.get(organization_id, kind)
        if dismissed_at is None:
            return False
        if self.clock.now() - dismissed_at <= self.window:
            return True
        # Window elapsed: treat as absent and evict
        await self.backend.delete(organization_id, kind)
        return False

    async def dismiss(self, organization_id: UUID, kind: NotificationKind) -> None:
        if kind == NotificationKind.conversion_success:
            await self.dismiss_conversion_success(organization_id)
            return
        await self.backend.set(organization_id, kind, self.clock.now())

    async def show_conversion_success(self, organization_id: UUID) -> None:
        await self.backend.set(
            organization_id, NotificationKind.conversion_success, self.clock.now()
        )
        for kind in TRIAL_KINDS:
            await self.backend.delete(organization_id, kind)
        logger.info(f"Conversion success raised for organization {organization_id}")

    async def dismiss_conversion_success(self, organization_id: UUID) -> None:
        await self.backend.delete(organization_id, NotificationKind.conversion_success)

    async def is_conversion_success_raised(self, organization_id: UUID) -> bool:
        raised_at = await self.backend.get(organization_id, NotificationKind.conversion_success)
        return raised_at is not None

    async def visible(
        self,
        organization_id: UUID,
        is_in_trial: bool,
        has_used_trial: bool,
    ) -> VisibleNotifications:
        """Combine the trial projection with the user's dismissals"""
        show_countdown = is_in_trial and not await self.is_dismissed(
            organization_id, NotificationKind.trial_countdown
        )
        show_expired = (
            has_used_trial
            and not is_in_trial
            and not await self.is_dismissed(organization_id, NotificationKind.trial_expired)
        )
        return VisibleNotifications(
            show_trial_countdown=show_countdown,
            show_trial_expired=show_expired,
            show_conversion_success=await self.is_conversion_success_raised(organization_id),
        )


def parse_notification_kind(raw: str) -> Optional[NotificationKind]:
    try:
        return NotificationKind(raw)
    except ValueError:
        return None
