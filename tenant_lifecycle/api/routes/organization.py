"""
Organization API Routes

Organization-scoped endpoints: invites, subscription and trial banners.
The caller's token must be scoped to the organization in the path.
"""

from datetime import timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tenant_lifecycle.api.error import raise_for_error
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.app.use_cases.billing import GetSubscriptionUseCase
from tenant_lifecycle.app.use_cases.invites import (
    CreateInviteUseCase,
    ListOrganizationInvitesUseCase,
)
from tenant_lifecycle.app.use_cases.notifications import (
    DismissConversionSuccessUseCase,
    DismissNotificationUseCase,
    GetNotificationsUseCase,
    ShowConversionSuccessUseCase,
)
from tenant_lifecycle.depends import (
    get_clock,
    get_config,
    get_current_caller,
    get_invite_notifier,
    get_unit_of_work,
)

router = APIRouter(prefix="/organizations/{organization_id}", tags=["Organizations"])


class CreateInviteRequest(BaseModel):
    """
    Create invite HTTP request payload

    Email syntax and role are validated by the use case so failures carry
    INVALID_EMAIL / INVALID_ROLE codes.
    """

    email: str = Field(..., description="Invitee email address")
    role: str = Field("member", description="member or admin")


# ============================================================================
# Invites
# ============================================================================


@router.post("/invitations", status_code=status.HTTP_201_CREATED)
async def create_invite(
    organization_id: UUID,
    request: CreateInviteRequest,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    notifier: IInviteNotifier = Depends(get_invite_notifier),
    config=Depends(get_config),
):
    """
    Create Invite

    Invites an email address to the organization. When a pending invite for
    the same email exists it is resent instead (``reused: true``).

    Raises:
        - 400 Bad Request: INVALID_EMAIL, INVALID_ROLE
        - 403 Forbidden: INSUFFICIENT_ROLE
        - 409 Conflict: ALREADY_MEMBER, CONCURRENT_UPDATE
    """
    use_case = CreateInviteUseCase(
        uow, clock, notifier, invite_ttl=timedelta(days=config.INVITE_TTL_DAYS)
    )
    result = await use_case.execute(caller, organization_id, request.email, request.role)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.get("/invitations", status_code=status.HTTP_200_OK)
async def list_organization_invites(
    organization_id: UUID,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List every invite of the organization (owner/admin only)"""
    result = await ListOrganizationInvitesUseCase(uow).execute(caller, organization_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


# ============================================================================
# Subscription
# ============================================================================


@router.get("/subscription", status_code=status.HTTP_200_OK)
async def get_subscription(
    organization_id: UUID,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """
    Get Subscription

    Subscription status with the trial countdown projection.

    Raises:
        - 403 Forbidden: INSUFFICIENT_ROLE (token scoped to another organization)
        - 404 Not Found: SUBSCRIPTION_NOT_FOUND
    """
    use_case = GetSubscriptionUseCase(
        uow, clock, ending_warning_days=config.TRIAL_ENDING_WARNING_DAYS
    )
    result = await use_case.execute(caller, organization_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


# ============================================================================
# Notifications
# ============================================================================


@router.get("/notifications", status_code=status.HTTP_200_OK)
async def get_notifications(
    organization_id: UUID,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """Trial banners to show, after applying dismissals"""
    use_case = GetNotificationsUseCase(
        uow,
        clock,
        dismiss_window=timedelta(hours=config.NOTIFICATION_DISMISS_HOURS),
        ending_warning_days=config.TRIAL_ENDING_WARNING_DAYS,
    )
    result = await use_case.execute(caller, organization_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.post("/notifications/conversion-success", status_code=status.HTTP_200_OK)
async def show_conversion_success(
    organization_id: UUID,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    result = await ShowConversionSuccessUseCase(uow, clock).execute(caller, organization_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.delete("/notifications/conversion-success", status_code=status.HTTP_200_OK)
async def dismiss_conversion_success(
    organization_id: UUID,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    result = await DismissConversionSuccessUseCase(uow, clock).execute(caller, organization_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()


@router.post("/notifications/{kind}/dismiss", status_code=status.HTTP_200_OK)
async def dismiss_notification(
    organization_id: UUID,
    kind: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """
    Dismiss Notification

    Hides trial_countdown or trial_expired for NOTIFICATION_DISMISS_HOURS.

    Raises:
        - 400 Bad Request: INVALID_NOTIFICATION_KIND
    """
    use_case = DismissNotificationUseCase(
        uow, clock, dismiss_window=timedelta(hours=config.NOTIFICATION_DISMISS_HOURS)
    )
    result = await use_case.execute(caller, organization_id, kind)

    if result.is_err():
        raise_for_error(result.error)

    return result.to_action()
