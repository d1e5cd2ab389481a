"""
Invite expiry helpers shared by the invite use cases.

CreateInvite (when a pending invite already exists) and ResendInvite extend
the expiry through ``extend_pending_invite`` so both follow the same rules.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.domain.entities import Invite, InviteStatus, next_expiry
from tenant_lifecycle.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

INVITE_NOT_FOUND = Error("INVITE_NOT_FOUND", "Invite not found")
INVITE_ALREADY_ACCEPTED = Error(
    "INVITE_ALREADY_ACCEPTED", "This invite has already been accepted"
)
INVITE_EXPIRED = Error("INVITE_EXPIRED", "This invite has expired")


async def expire_if_overdue(uow: UnitOfWork, invite: Invite, now: datetime) -> bool:
    """
    Flip a pending, overdue invite to expired and commit.

    Returns True when the invite is (now) expired. A concurrent writer that
    already moved the row out of pending wins; nothing is overwritten.
    """
    if invite.status == InviteStatus.expired:
        return True
    if invite.status != InviteStatus.pending or not invite.is_overdue(now):
        return False
    flipped = await uow.invites.update_status_if(
        invite.id, InviteStatus.pending, InviteStatus.expired, now
    )
    if flipped:
        await uow.commit()
        invite.status = InviteStatus.expired
        logger.info(f"Invite {invite.id} expired on access")
    return flipped


async def _status_error(uow: UnitOfWork, invite_id: UUID) -> Error:
    current = await uow.invites.get_by_id(invite_id)
    if current is None:
        return INVITE_NOT_FOUND
    if current.status == InviteStatus.accepted:
        return INVITE_ALREADY_ACCEPTED
    return INVITE_EXPIRED


async def extend_pending_invite(
    uow: UnitOfWork, invite: Invite, now: datetime, ttl: timedelta
) -> Result[Invite]:
    """
    Push expires_at to ``now + ttl`` (always strictly later than before).

    Errors:
        INVITE_ALREADY_ACCEPTED: invite was accepted
        INVITE_EXPIRED: invite was expired, or pending past its expiry
            (the stored status is flipped to expired)
        INVITE_NOT_FOUND: invite disappeared concurrently
    """
    if invite.status == InviteStatus.accepted:
        return Return.err(INVITE_ALREADY_ACCEPTED)
    if await expire_if_overdue(uow, invite, now):
        return Return.err(INVITE_EXPIRED)

    new_expiry = next_expiry(invite.expires_at, now, ttl)
    extended = await uow.invites.extend_expiry_if_pending(invite.id, new_expiry, now)
    if not extended:
        return Return.err(await _status_error(uow, invite.id))

    invite.expires_at = new_expiry
    invite.updated_at = now
    return Return.ok(invite)


def resolve_in_organization(
    invite: Optional[Invite], organization_id: Optional[UUID]
) -> Optional[Invite]:
    """Hide invites of other organizations; callers see INVITE_NOT_FOUND either way"""
    if invite is None or invite.organization_id != organization_id:
        return None
    return invite
