from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import InviteStatus
from tenant_lifecycle.libs.result import Result, Return

from .dtos import InviteCleanupStatsResponse


class InviteCleanupStatsUseCase:
    """Counts behind the expiry sweep and purge jobs"""

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(self) -> Result[InviteCleanupStatsResponse]:
        async with self.uow:
            pending = await self.uow.invites.count_by_status(InviteStatus.pending)
            overdue_pending = await self.uow.invites.count_overdue_pending(self.clock.now())
            expired = await self.uow.invites.count_by_status(InviteStatus.expired)

        return Return.ok(
            InviteCleanupStatsResponse(
                pending=pending, overdue_pending=overdue_pending, expired=expired
            )
        )
