"""
Purge Expired Invites Use Case

Deletes expired invites that have not changed for the retention window.
Accepted invites are never touched.
"""

import logging
from datetime import timedelta

from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent
from tenant_lifecycle.libs.result import Result, Return

from .dtos import PurgeExpiredInvitesResponse

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=30)


class PurgeExpiredInvitesUseCase:
    def __init__(self, uow: UnitOfWork, clock: Clock, retention: timedelta = DEFAULT_RETENTION):
        self.uow = uow
        self.clock = clock
        self.retention = retention

    @store_errors_as_results
    async def execute(self) -> Result[PurgeExpiredInvitesResponse]:
        now = self.clock.now()
        cutoff = now - self.retention

        async with self.uow:
            purged_count = await self.uow.invites.delete_expired_before(cutoff)

            if purged_count > 0:
                await self.uow.audit_events.create(
                    AuditEvent(
                        action=AuditAction.expired_invites_purged,
                        affected_count=purged_count,
                        created_at=now,
                    )
                )

            await self.uow.commit()

        logger.info(f"Purged {purged_count} expired invite(s) older than {cutoff.isoformat()}")
        return Return.ok(
            PurgeExpiredInvitesResponse(purged_count=purged_count, cutoff=cutoff.isoformat())
        )
