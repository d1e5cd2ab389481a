"""
Invite Expiry Sweep Use Case

Flips every overdue pending invite to expired in one conditional bulk update.
Running it twice, or concurrently, is harmless: the second run matches nothing.
"""

import logging

from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent
from tenant_lifecycle.libs.result import Result, Return

from .dtos import ExpirySweepResponse

logger = logging.getLogger(__name__)


class ExpirySweepUseCase:
    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(self) -> Result[ExpirySweepResponse]:
        now = self.clock.now()

        async def sweep(uow: UnitOfWork) -> int:
            count = await uow.invites.expire_overdue(now)
            if count > 0:
                await uow.audit_events.create(
                    AuditEvent(
                        action=AuditAction.invites_expired,
                        affected_count=count,
                        created_at=now,
                    )
                )
            return count

        expired_count = await self.uow.run_in_transaction(sweep)

        logger.info(f"Expiry sweep expired {expired_count} invite(s)")
        return Return.ok(ExpirySweepResponse(expired_count=expired_count))
