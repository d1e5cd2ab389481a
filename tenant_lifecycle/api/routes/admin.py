"""
Admin API Routes - Invite Maintenance Endpoints

Called by schedulers (cron, task runners), not by users.
Authentication is via Admin API Key, not user JWTs.
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, status

from tenant_lifecycle.api.error import raise_for_error
from tenant_lifecycle.api.utils.admin_auth import verify_admin_api_key
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.app.use_cases.invites import (
    ExpirySweepResponse,
    ExpirySweepUseCase,
    InviteCleanupStatsResponse,
    InviteCleanupStatsUseCase,
    PurgeExpiredInvitesResponse,
    PurgeExpiredInvitesUseCase,
)
from tenant_lifecycle.depends import get_clock, get_config, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/invitations/expiry-sweep",
    status_code=status.HTTP_200_OK,
    response_model=ExpirySweepResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expiry_sweep(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Expiry Sweep

    Marks every pending invite past its expiry as expired. Idempotent.

    Requires: X-Admin-API-Key header
    """
    result = await ExpirySweepUseCase(uow, clock).execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/invitations/purge-expired",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredInvitesResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_expired_invites(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """
    Purge Expired Invites

    Deletes expired invites untouched for EXPIRED_INVITE_RETENTION_DAYS.

    Requires: X-Admin-API-Key header
    """
    use_case = PurgeExpiredInvitesUseCase(
        uow, clock, retention=timedelta(days=config.EXPIRED_INVITE_RETENTION_DAYS)
    )
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/invitations/stats",
    status_code=status.HTTP_200_OK,
    response_model=InviteCleanupStatsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def invite_cleanup_stats(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """Invite counts for monitoring the cleanup jobs"""
    result = await InviteCleanupStatsUseCase(uow, clock).execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
