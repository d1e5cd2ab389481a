"""
Resend Invite Use Case

Extends the expiry of a pending invite and re-delivers it.
"""

import logging
from datetime import timedelta
from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier, notify_invite_sent
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent
from tenant_lifecycle.libs.result import Result, Return

from .create_invite_use_case import DEFAULT_INVITE_TTL
from .dtos import ResendInviteResponse
from .invite_expiry import INVITE_NOT_FOUND, extend_pending_invite, resolve_in_organization

logger = logging.getLogger(__name__)


class ResendInviteUseCase:
    """
    Use case for resending a pending invite.

    Business Rules:
    - Only owner/admin of the invite's organization can resend
    - Invites of other organizations look exactly like missing ones
    - Accepted -> INVITE_ALREADY_ACCEPTED
    - Expired, or pending past expiry -> INVITE_EXPIRED (row flipped to expired)
    - New expiry is now + TTL and strictly later than the previous one
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        notifier: IInviteNotifier,
        invite_ttl: timedelta = DEFAULT_INVITE_TTL,
    ):
        self.uow = uow
        self.clock = clock
        self.notifier = notifier
        self.invite_ttl = invite_ttl

    @store_errors_as_results
    async def execute(self, caller: Caller, invite_id: UUID) -> Result[ResendInviteResponse]:
        denied = authorize(caller.role, Action.resend_invite)
        if denied:
            return Return.err(denied)

        now = self.clock.now()

        async with self.uow:
            invite = resolve_in_organization(
                await self.uow.invites.get_by_id(invite_id), caller.organization_id
            )
            if invite is None:
                return Return.err(INVITE_NOT_FOUND)

            extended = await extend_pending_invite(self.uow, invite, now, self.invite_ttl)
            if extended.is_err():
                return extended

            await self.uow.audit_events.create(
                AuditEvent(
                    organization_id=invite.organization_id,
                    actor_user_id=caller.user_id,
                    action=AuditAction.invite_resent,
                    invite_id=invite.id,
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(f"Invite {invite.id} resent for organization {invite.organization_id}")
        await notify_invite_sent(self.notifier, invite, resent=True)

        return Return.ok(
            ResendInviteResponse(
                invite_id=str(invite.id),
                status=invite.status.value,
                expires_at=invite.expires_at.isoformat(),
            )
        )
