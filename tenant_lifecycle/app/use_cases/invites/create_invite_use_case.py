"""
Create Invite Use Case

Handles inviting an email address to join an organization.
"""

import logging
from datetime import timedelta
from uuid import UUID

from pydantic import EmailStr, TypeAdapter, ValidationError

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier, notify_invite_sent
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import (
    AuditAction,
    AuditEvent,
    Invite,
    InviteRole,
    InviteStatus,
    normalize_email,
)
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import CreateInviteResponse
from .invite_expiry import expire_if_overdue, extend_pending_invite

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

DEFAULT_INVITE_TTL = timedelta(days=7)


class CreateInviteUseCase:
    """
    Use case for inviting an email address to an organization.

    Business Rules:
    - Only owner/admin can invite
    - Role must be member or admin (ownership is never granted by invite)
    - Existing members cannot be invited again (ALREADY_MEMBER)
    - A pending invite for the same email is resent instead of duplicated:
      same id and role, expiry extended, ``reused=True``
    - New invites expire after the invite TTL (7 days by default)
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
    async def execute(
        self, caller: Caller, organization_id: UUID, email: str, role: str
    ) -> Result[CreateInviteResponse]:
        """
        Execute create invite use case.

        Args:
            caller: Authenticated inviter
            organization_id: Target organization
            email: Email address to invite
            role: Role to grant on acceptance (member/admin)

        Returns:
            Result with CreateInviteResponse DTO, or Error
        """
        denied = authorize(caller.role_in(organization_id), Action.create_invite)
        if denied:
            return Return.err(denied)

        email = normalize_email(email)
        try:
            _email_adapter.validate_python(email)
        except ValidationError:
            return Return.err(Error("INVALID_EMAIL", "Invalid email address"))

        try:
            invite_role = InviteRole(role)
        except ValueError:
            return Return.err(
                Error("INVALID_ROLE", f"Invalid role: {role}. Must be one of: member, admin")
            )

        now = self.clock.now()

        async with self.uow:
            membership = await self.uow.memberships.get_by_email_and_organization(
                email, organization_id
            )
            if membership is not None:
                return Return.err(
                    Error("ALREADY_MEMBER", "This email already belongs to a member")
                )

            existing = await self.uow.invites.get_pending_by_organization_and_email(
                organization_id, email
            )
            # An overdue pending invite is retired so a fresh one can take its slot
            if existing is not None and await expire_if_overdue(self.uow, existing, now):
                existing = None

            if existing is not None:
                extended = await extend_pending_invite(self.uow, existing, now, self.invite_ttl)
                if extended.is_err():
                    return extended
                invite, reused = extended.value, True
            else:
                invite, created = await self.uow.invites.upsert_pending(
                    Invite(
                        organization_id=organization_id,
                        email=email,
                        role=invite_role,
                        status=InviteStatus.pending,
                        invited_by_user_id=caller.user_id,
                        expires_at=now + self.invite_ttl,
                    ),
                    now,
                )
                reused = not created
                if reused:
                    extended = await extend_pending_invite(
                        self.uow, invite, now, self.invite_ttl
                    )
                    if extended.is_err():
                        return extended

            await self.uow.audit_events.create(
                AuditEvent(
                    organization_id=organization_id,
                    actor_user_id=caller.user_id,
                    action=AuditAction.invite_resent if reused else AuditAction.invite_sent,
                    invite_id=invite.id,
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(
            f"Invite {invite.id} {'resent' if reused else 'created'} "
            f"for organization {organization_id}"
        )
        await notify_invite_sent(self.notifier, invite, resent=reused)

        return Return.ok(
            CreateInviteResponse(
                invite_id=str(invite.id),
                status=invite.status.value,
                expires_at=invite.expires_at.isoformat(),
                reused=reused,
            )
        )

