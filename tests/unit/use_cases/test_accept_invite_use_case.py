from datetime import timedelta
from uuid import uuid4

import pytest

from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.use_cases.invites import AcceptInviteUseCase
from tenant_lifecycle.domain.entities import (
    AuditAction,
    Invite,
    InviteRole,
    InviteStatus,
    Membership,
    MembershipRole,
)


@pytest.fixture
def invite(organization_id, clock):
    return Invite(
        id=uuid4(),
        organization_id=organization_id,
        email="a@x.io",
        role=InviteRole.admin,
        status=InviteStatus.pending,
        invited_by_user_id=uuid4(),
        expires_at=clock.now() + timedelta(days=1),
    )


@pytest.fixture
def invitee():
    # Token scoped to some other organization; accept does not depend on it
    return Caller(user_id=uuid4(), email="A@X.io", organization_id=uuid4())


@pytest.mark.asyncio
async def test_accept_creates_membership(mock_uow, clock, invite, invitee):
    mock_uow.invites.get_by_id.return_value = invite

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.is_ok()
    assert result.value.role == "admin"
    assert result.value.organization_id == str(invite.organization_id)
    mock_uow.invites.update_status_if.assert_awaited_once_with(
        invite.id, InviteStatus.pending, InviteStatus.accepted, clock.now()
    )
    membership = mock_uow.memberships.create.call_args.args[0]
    assert membership.user_id == invitee.user_id
    assert membership.role == MembershipRole.admin
    assert membership.email == "a@x.io"
    mock_uow.commit.assert_called_once()
    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.action == AuditAction.invite_accepted
    assert audit.invite_id == invite.id
    assert audit.membership_id == membership.id
    assert audit.actor_user_id == invitee.user_id


@pytest.mark.asyncio
async def test_accept_updates_existing_membership_role(mock_uow, clock, invite, invitee):
    existing = Membership(
        user_id=invitee.user_id,
        organization_id=invite.organization_id,
        email="a@x.io",
        role=MembershipRole.member,
    )
    mock_uow.invites.get_by_id.return_value = invite
    mock_uow.memberships.get_by_user_and_organization.return_value = existing

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.is_ok()
    assert existing.role == MembershipRole.admin
    mock_uow.memberships.create.assert_not_called()
    mock_uow.memberships.update.assert_awaited_once_with(existing)


@pytest.mark.asyncio
async def test_accept_never_demotes_owner(mock_uow, clock, invite, invitee):
    owner = Membership(
        user_id=invitee.user_id,
        organization_id=invite.organization_id,
        email="a@x.io",
        role=MembershipRole.owner,
    )
    mock_uow.invites.get_by_id.return_value = invite
    mock_uow.memberships.get_by_user_and_organization.return_value = owner

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.value.role == "owner"
    assert owner.role == MembershipRole.owner


@pytest.mark.asyncio
async def test_accept_expired_invite_flips_status(mock_uow, clock, invite, invitee):
    invite.expires_at = clock.now()  # expires_at <= now counts as expired
    mock_uow.invites.get_by_id.return_value = invite

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.error.code == "INVITE_EXPIRED"
    mock_uow.invites.update_status_if.assert_awaited_once_with(
        invite.id, InviteStatus.pending, InviteStatus.expired, clock.now()
    )
    mock_uow.commit.assert_called_once()
    mock_uow.memberships.create.assert_not_called()


@pytest.mark.asyncio
async def test_accept_email_mismatch(mock_uow, clock, invite):
    mock_uow.invites.get_by_id.return_value = invite
    stranger = Caller(user_id=uuid4(), email="b@x.io")

    result = await AcceptInviteUseCase(mock_uow, clock).execute(stranger, invite.id)

    assert result.error.code == "EMAIL_MISMATCH"
    mock_uow.invites.update_status_if.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [InviteStatus.accepted, InviteStatus.expired])
async def test_accept_already_processed(mock_uow, clock, invite, invitee, status):
    invite.status = status
    mock_uow.invites.get_by_id.return_value = invite

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.error.code == "INVITE_ALREADY_PROCESSED"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_accept_loses_concurrent_race(mock_uow, clock, invite, invitee):
    accepted = Invite(**{**invite.model_dump(), "status": InviteStatus.accepted})
    mock_uow.invites.get_by_id.side_effect = [invite, accepted]
    mock_uow.invites.update_status_if.return_value = False

    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, invite.id)

    assert result.error.code == "INVITE_ALREADY_PROCESSED"
    mock_uow.memberships.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_accept_missing_invite(mock_uow, clock, invitee):
    result = await AcceptInviteUseCase(mock_uow, clock).execute(invitee, uuid4())

    assert result.error.code == "INVITE_NOT_FOUND"
