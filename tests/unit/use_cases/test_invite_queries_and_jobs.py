from datetime import timedelta
from uuid import uuid4

import pytest

from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.use_cases.invites import (
    ExpirySweepUseCase,
    InviteCleanupStatsUseCase,
    ListOrganizationInvitesUseCase,
    ListPendingInvitesForUserUseCase,
    PurgeExpiredInvitesUseCase,
)
from tenant_lifecycle.domain.entities import Invite, InviteRole, InviteStatus, MembershipRole


def make_invite(organization_id, clock, email="a@x.io"):
    return Invite(
        id=uuid4(),
        organization_id=organization_id,
        email=email,
        role=InviteRole.member,
        status=InviteStatus.pending,
        invited_by_user_id=uuid4(),
        expires_at=clock.now() + timedelta(days=1),
        created_at=clock.now(),
        updated_at=clock.now(),
    )


@pytest.mark.asyncio
async def test_list_pending_for_own_email(mock_uow, clock, organization_id):
    invite = make_invite(organization_id, clock)
    mock_uow.invites.list_pending_for_email.return_value = [invite]
    caller = Caller(user_id=uuid4(), email="A@x.io")

    result = await ListPendingInvitesForUserUseCase(
        mock_uow, clock, poll_interval_seconds=45, poll_jitter_seconds=10
    ).execute(caller, "a@X.io")

    assert result.is_ok()
    assert [view.id for view in result.value.invites] == [str(invite.id)]
    assert result.value.poll_interval_seconds == 45
    assert result.value.poll_jitter_seconds == 10
    mock_uow.invites.list_pending_for_email.assert_awaited_once_with("a@x.io", clock.now())


@pytest.mark.asyncio
async def test_list_pending_defaults_to_caller_email(mock_uow, clock):
    caller = Caller(user_id=uuid4(), email="me@x.io")

    result = await ListPendingInvitesForUserUseCase(mock_uow, clock).execute(caller)

    assert result.is_ok()
    mock_uow.invites.list_pending_for_email.assert_awaited_once_with("me@x.io", clock.now())


@pytest.mark.asyncio
async def test_list_pending_for_someone_else_rejected(mock_uow, clock):
    caller = Caller(user_id=uuid4(), email="me@x.io")

    result = await ListPendingInvitesForUserUseCase(mock_uow, clock).execute(caller, "you@x.io")

    assert result.error.code == "EMAIL_MISMATCH"
    mock_uow.invites.list_pending_for_email.assert_not_called()


@pytest.mark.asyncio
async def test_list_organization_invites(mock_uow, clock, make_caller, organization_id):
    mock_uow.invites.list_by_organization.return_value = [
        make_invite(organization_id, clock, "a@x.io"),
        make_invite(organization_id, clock, "b@x.io"),
    ]

    result = await ListOrganizationInvitesUseCase(mock_uow).execute(
        make_caller(role=MembershipRole.owner), organization_id
    )

    assert [view.email for view in result.value.invites] == ["a@x.io", "b@x.io"]


@pytest.mark.asyncio
async def test_list_organization_invites_member_forbidden(
    mock_uow, make_caller, organization_id
):
    result = await ListOrganizationInvitesUseCase(mock_uow).execute(
        make_caller(role=MembershipRole.member), organization_id
    )

    assert result.error.code == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_expiry_sweep_records_audit_when_invites_expire(mock_uow, clock):
    mock_uow.invites.expire_overdue.return_value = 3

    result = await ExpirySweepUseCase(mock_uow, clock).execute()

    assert result.value.expired_count == 3
    mock_uow.invites.expire_overdue.assert_awaited_once_with(clock.now())
    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.action == "invites_expired"
    assert audit.affected_count == 3
    assert audit.organization_id is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_expiry_sweep_nothing_to_do(mock_uow, clock):
    result = await ExpirySweepUseCase(mock_uow, clock).execute()

    assert result.value.expired_count == 0
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_purge_uses_retention_cutoff(mock_uow, clock):
    mock_uow.invites.delete_expired_before.return_value = 2

    result = await PurgeExpiredInvitesUseCase(
        mock_uow, clock, retention=timedelta(days=30)
    ).execute()

    cutoff = clock.now() - timedelta(days=30)
    assert result.value.purged_count == 2
    assert result.value.cutoff == cutoff.isoformat()
    mock_uow.invites.delete_expired_before.assert_awaited_once_with(cutoff)


@pytest.mark.asyncio
async def test_cleanup_stats(mock_uow, clock):
    counts = {InviteStatus.pending: 5, InviteStatus.expired: 7}
    mock_uow.invites.count_by_status.side_effect = lambda status: counts[status]
    mock_uow.invites.count_overdue_pending.return_value = 2

    result = await InviteCleanupStatsUseCase(mock_uow, clock).execute()

    assert result.value.pending == 5
    assert result.value.overdue_pending == 2
    assert result.value.expired == 7
