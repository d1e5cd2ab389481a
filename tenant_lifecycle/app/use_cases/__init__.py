"""
Use Cases

Organized into domain folders:
- invites/: Invite lifecycle
- billing/: Webhook processing and subscription state
- notifications/: Trial banners and dismissals
"""

from .billing import GetSubscriptionUseCase, ProcessWebhookUseCase
from .invites import (
    AcceptInviteUseCase,
    CreateInviteUseCase,
    DeleteInviteUseCase,
    ExpirySweepUseCase,
    InviteCleanupStatsUseCase,
    ListOrganizationInvitesUseCase,
    ListPendingInvitesForUserUseCase,
    PurgeExpiredInvitesUseCase,
    ResendInviteUseCase,
)
from .notifications import (
    DismissConversionSuccessUseCase,
    DismissNotificationUseCase,
    GetNotificationsUseCase,
    ShowConversionSuccessUseCase,
)

__all__ = [
    # Invites
    "CreateInviteUseCase",
    "ResendInviteUseCase",
    "DeleteInviteUseCase",
    "AcceptInviteUseCase",
    "ListPendingInvitesForUserUseCase",
    "ListOrganizationInvitesUseCase",
    "ExpirySweepUseCase",
    "PurgeExpiredInvitesUseCase",
    "InviteCleanupStatsUseCase",
    # Billing
    "ProcessWebhookUseCase",
    "GetSubscriptionUseCase",
    # Notifications
    "GetNotificationsUseCase",
    "DismissNotificationUseCase",
    "ShowConversionSuccessUseCase",
    "DismissConversionSuccessUseCase",
]
