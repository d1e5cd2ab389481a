"""
Invite Use Cases

Invite lifecycle: create, resend, delete, accept, listing and cleanup jobs.
"""

from .accept_invite_use_case import AcceptInviteUseCase
from .create_invite_use_case import CreateInviteUseCase
from .delete_invite_use_case import DeleteInviteUseCase
from .dtos import (
    AcceptInviteResponse,
    CreateInviteResponse,
    DeleteInviteResponse,
    ExpirySweepResponse,
    InviteCleanupStatsResponse,
    InviteView,
    OrganizationInvitesResponse,
    PendingInvitesResponse,
    PurgeExpiredInvitesResponse,
    ResendInviteResponse,
)
from .expiry_sweep_use_case import ExpirySweepUseCase
from .invite_cleanup_stats_use_case import InviteCleanupStatsUseCase
from .list_organization_invites_use_case import ListOrganizationInvitesUseCase
from .list_pending_invites_use_case import ListPendingInvitesForUserUseCase
from .purge_expired_invites_use_case import PurgeExpiredInvitesUseCase
from .resend_invite_use_case import ResendInviteUseCase

__all__ = [
    "CreateInviteUseCase",
    "ResendInviteUseCase",
    "DeleteInviteUseCase",
    "AcceptInviteUseCase",
    "ListPendingInvitesForUserUseCase",
    "ListOrganizationInvitesUseCase",
    "ExpirySweepUseCase",
    "PurgeExpiredInvitesUseCase",
    "InviteCleanupStatsUseCase",
    "CreateInviteResponse",
    "ResendInviteResponse",
    "DeleteInviteResponse",
    "AcceptInviteResponse",
    "PendingInvitesResponse",
    "OrganizationInvitesResponse",
    "ExpirySweepResponse",
    "PurgeExpiredInvitesResponse",
    "InviteCleanupStatsResponse",
    "InviteView",
]
