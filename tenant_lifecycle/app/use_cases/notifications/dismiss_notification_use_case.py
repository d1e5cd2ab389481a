"""
Dismiss Notification Use Case

Hides a trial banner for the dismissal window (24h by default).
"""

import logging
from datetime import timedelta
from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.notification_dismissal_store import (
    DEFAULT_DISMISS_WINDOW,
    NotificationDismissalStore,
    parse_notification_kind,
)
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import DismissNotificationResponse

logger = logging.getLogger(__name__)


class DismissNotificationUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        dismiss_window: timedelta = DEFAULT_DISMISS_WINDOW,
    ):
        self.uow = uow
        self.clock = clock
        self.dismiss_window = dismiss_window

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID, kind: str
    ) -> Result[DismissNotificationResponse]:
        denied = authorize(caller.role_in(organization_id), Action.manage_notifications)
        if denied:
            return Return.err(denied)

        notification_kind = parse_notification_kind(kind)
        if notification_kind is None:
            return Return.err(
                Error("INVALID_NOTIFICATION_KIND", f"Unknown notification kind: {kind}")
            )

        dismissed_at = self.clock.now()
        async with self.uow:
            store = NotificationDismissalStore(
                self.uow.notification_dismissals, self.clock, self.dismiss_window
            )
            await store.dismiss(organization_id, notification_kind)
            await self.uow.commit()

        logger.info(f"Notification {notification_kind.value} dismissed for {organization_id}")
        return Return.ok(
            DismissNotificationResponse(
                kind=notification_kind.value, dismissed_at=dismissed_at.isoformat()
            )
        )
