"""
List Pending Invites For User Use Case

Invites waiting for the signed-in user across all organizations. Clients poll
this endpoint; the polling cadence is handed out with the result.
"""

from typing import Optional

from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import normalize_email
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import InviteView, PendingInvitesResponse


class ListPendingInvitesForUserUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        poll_interval_seconds: int = 30,
        poll_jitter_seconds: int = 5,
    ):
        self.uow = uow
        self.clock = clock
        self.poll_interval_seconds = poll_interval_seconds
        self.poll_jitter_seconds = poll_jitter_seconds

    @store_errors_as_results
    async def execute(
        self, caller: Caller, email: Optional[str] = None
    ) -> Result[PendingInvitesResponse]:
        """Only the owner of ``email`` may list its invites; defaults to the caller's"""
        email = normalize_email(email or caller.email)
        if not caller.owns_email(email):
            return Return.err(
                Error("EMAIL_MISMATCH", "You can only list invites sent to your own email")
            )

        async with self.uow:
            invites = await self.uow.invites.list_pending_for_email(email, self.clock.now())

        return Return.ok(
            PendingInvitesResponse(
                invites=[InviteView.from_entity(invite) for invite in invites],
                poll_interval_seconds=self.poll_interval_seconds,
                poll_jitter_seconds=self.poll_jitter_seconds,
            )
        )
