from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from tenant_lifecycle.api.error import ClientError, raise_for_error
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.app.use_cases.invites import (
    AcceptInviteUseCase,
    DeleteInviteUseCase,
    ListPendingInvitesForUserUseCase,
    ResendInviteUseCase,
)
from tenant_lifecycle.depends import (
    get_clock,
    get_config,
    get_current_caller,
    get_invite_notifier,
    get_unit_of_work,
)
from tenant_lifecycle.libs.result import Error

router = APIRouter(prefix="/invitations", tags=["Invitations"])


def parse_invite_id(invite_id: str) -> UUID:
    try:
        return UUID(invite_id)
    except ValueError:
        raise ClientError(
            Error("INVALID_INVITE_ID", "Invalid invite ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.get("/pending", status_code=status.HTTP_200_OK)
async def list_pending_invites(
    email: Optional[str] = Query(None, description="Defaults to the caller's email"),
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """
    List Pending Invites for the signed-in user

    Returns pending, unexpired invites across organizations plus the polling
    interval and jitter clients should use when refreshing this list.

    Raises:
        - 403 Forbidden: EMAIL_MISMATCH (querying someone else's email)
    """
    use_case = ListPendingInvitesForUserUseCase(
        uow,
        clock,
        poll_interval_seconds=config.INVITE_POLL_INTERVAL_SECONDS,
        poll_jitter_seconds=config.INVITE_POLL_JITTER_SECONDS,
    )
    result = await use_case.execute(caller, email)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.post("/{invite_id}/resend", status_code=status.HTTP_200_OK)
async def resend_invite(
    invite_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    notifier: IInviteNotifier = Depends(get_invite_notifier),
    config=Depends(get_config),
):
    """
    Resend Invite

    Extends the expiry of a pending invite and re-delivers it.

    Raises:
        - 400 Bad Request: INVALID_INVITE_ID
        - 403 Forbidden: INSUFFICIENT_ROLE
        - 404 Not Found: INVITE_NOT_FOUND
        - 409 Conflict: INVITE_ALREADY_ACCEPTED
        - 410 Gone: INVITE_EXPIRED
    """
    use_case = ResendInviteUseCase(
        uow, clock, notifier, invite_ttl=timedelta(days=config.INVITE_TTL_DAYS)
    )
    result = await use_case.execute(caller, parse_invite_id(invite_id))

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.delete("/{invite_id}", status_code=status.HTTP_200_OK)
async def delete_invite(
    invite_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Delete Invite

    Removes a pending or expired invite. Accepted invites are kept.

    Raises:
        - 400 Bad Request: INVALID_INVITE_ID
        - 403 Forbidden: INSUFFICIENT_ROLE
        - 404 Not Found: INVITE_NOT_FOUND
        - 409 Conflict: INVITE_ALREADY_ACCEPTED
    """
    use_case = DeleteInviteUseCase(uow, clock)
    result = await use_case.execute(caller, parse_invite_id(invite_id))

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.post("/{invite_id}/accept", status_code=status.HTTP_200_OK)
async def accept_invite(
    invite_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Accept Invite

    Raises:
        - 400 Bad Request: INVALID_INVITE_ID
        - 403 Forbidden: EMAIL_MISMATCH
        - 404 Not Found: INVITE_NOT_FOUND
        - 409 Conflict: INVITE_ALREADY_PROCESSED
        - 410 Gone: INVITE_EXPIRED
    """
    use_case = AcceptInviteUseCase(uow, clock)
    result = await use_case.execute(caller, parse_invite_id(invite_id))

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()
