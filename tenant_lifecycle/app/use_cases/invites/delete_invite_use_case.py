"""
Delete Invite Use Case

Removes a pending or expired invite. Accepted invites are kept as records.
"""

import logging
from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent, InviteStatus
from tenant_lifecycle.libs.result import Result, Return

from .dtos import DeleteInviteResponse
from .invite_expiry import INVITE_ALREADY_ACCEPTED, INVITE_NOT_FOUND, resolve_in_organization

logger = logging.getLogger(__name__)

DELETABLE_STATUSES = (InviteStatus.pending, InviteStatus.expired)


class DeleteInviteUseCase:
    """
    Use case for deleting an invite.

    Business Rules:
    - Only owner/admin of the invite's organization can delete
    - pending and expired invites can be deleted
    - accepted invites are retained -> INVITE_ALREADY_ACCEPTED
    - The delete is conditional on status so it cannot remove an invite
      that is being accepted concurrently
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(self, caller: Caller, invite_id: UUID) -> Result[DeleteInviteResponse]:
        denied = authorize(caller.role, Action.delete_invite)
        if denied:
            return Return.err(denied)

        async with self.uow:
            invite = resolve_in_organization(
                await self.uow.invites.get_by_id(invite_id), caller.organization_id
            )
            if invite is None:
                return Return.err(INVITE_NOT_FOUND)
            if invite.status == InviteStatus.accepted:
                return Return.err(INVITE_ALREADY_ACCEPTED)

            deleted = await self.uow.invites.delete_if_status_in(invite_id, DELETABLE_STATUSES)
            if not deleted:
                # Lost a race: re-read to report what happened instead
                current = await self.uow.invites.get_by_id(invite_id)
                if current is not None and current.status == InviteStatus.accepted:
                    return Return.err(INVITE_ALREADY_ACCEPTED)
                return Return.err(INVITE_NOT_FOUND)

            await self.uow.audit_events.create(
                AuditEvent(
                    organization_id=invite.organization_id,
                    actor_user_id=caller.user_id,
                    action=AuditAction.invite_deleted,
                    invite_id=invite_id,
                    created_at=self.clock.now(),
                )
            )

            await self.uow.commit()

        logger.info(f"Invite {invite_id} deleted from organization {invite.organization_id}")
        return Return.ok(DeleteInviteResponse(invite_id=str(invite_id)))
