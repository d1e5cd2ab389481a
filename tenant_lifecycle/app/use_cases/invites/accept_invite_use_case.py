"""
Accept Invite Use Case

Turns a pending invite into an organization membership.
"""

import logging
from uuid import UUID

from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import (
    AuditAction,
    AuditEvent,
    Invite,
    InviteStatus,
    Membership,
    MembershipRole,
)
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import AcceptInviteResponse
from .invite_expiry import INVITE_EXPIRED, INVITE_NOT_FOUND, expire_if_overdue

logger = logging.getLogger(__name__)

INVITE_ALREADY_PROCESSED = Error(
    "INVITE_ALREADY_PROCESSED", "This invite has already been accepted or has expired"
)


class AcceptInviteUseCase:
    """
    Use case for accepting an invite.

    Business Rules:
    - Invite must be pending and not past expires_at
    - Accepting email must equal the invite email (case-insensitive)
    - Status flip and membership upsert commit together
    - Two concurrent accepts: exactly one wins, the other gets
      INVITE_ALREADY_PROCESSED
    - An existing membership takes the invite role, owners are never demoted
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(self, caller: Caller, invite_id: UUID) -> Result[AcceptInviteResponse]:
        """
        Execute accept invite use case.

        Args:
            caller: Authenticated user accepting the invite
            invite_id: Invite to accept

        Returns:
            Result with AcceptInviteResponse DTO, or Error
        """
        now = self.clock.now()

        async with self.uow:
            invite = await self.uow.invites.get_by_id(invite_id)
            if invite is None:
                return Return.err(INVITE_NOT_FOUND)

            if invite.status != InviteStatus.pending:
                return Return.err(INVITE_ALREADY_PROCESSED)

            if invite.is_overdue(now):
                await expire_if_overdue(self.uow, invite, now)
                return Return.err(INVITE_EXPIRED)

            if not caller.owns_email(invite.email):
                return Return.err(
                    Error("EMAIL_MISMATCH", "This invite was sent to a different email address")
                )

            accepted = await self.uow.invites.update_status_if(
                invite_id, InviteStatus.pending, InviteStatus.accepted, now
            )
            if not accepted:
                current = await self.uow.invites.get_by_id(invite_id)
                if current is None:
                    return Return.err(INVITE_NOT_FOUND)
                return Return.err(INVITE_ALREADY_PROCESSED)

            membership = await self._upsert_membership(caller, invite, now)

            await self.uow.audit_events.create(
                AuditEvent(
                    organization_id=invite.organization_id,
                    actor_user_id=caller.user_id,
                    action=AuditAction.invite_accepted,
                    invite_id=invite_id,
                    membership_id=membership.id,
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(f"Invite {invite_id} accepted into organization {invite.organization_id}")

        return Return.ok(
            AcceptInviteResponse(
                invite_id=str(invite_id),
                organization_id=str(invite.organization_id),
                membership_id=str(membership.id),
                role=membership.role.value,
            )
        )

    async def _upsert_membership(self, caller: Caller, invite: Invite, now) -> Membership:
        invited_role = MembershipRole(invite.role.value)
        membership = await self.uow.memberships.get_by_user_and_organization(
            caller.user_id, invite.organization_id
        )
        if membership is None:
            return await self.uow.memberships.create(
                Membership(
                    user_id=caller.user_id,
                    organization_id=invite.organization_id,
                    email=invite.email,
                    role=invited_role,
                    created_at=now,
                    updated_at=now,
                )
            )

        if membership.role != MembershipRole.owner:
            membership.role = invited_role
        membership.email = invite.email
        membership.updated_at = now
        return await self.uow.memberships.update(membership)
