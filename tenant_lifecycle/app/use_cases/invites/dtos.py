"""
Invite Use Case DTOs (Data Transfer Objects)

All Response classes for the invite domain.
"""

from typing import List

from pydantic import BaseModel

from tenant_lifecycle.domain.entities import Invite


# ============================================================================
# Shared
# ============================================================================


class InviteView(BaseModel):
    """Invite as shown to owners/admins and to the invitee"""

    id: str
    organization_id: str
    email: str
    role: str
    status: str
    expires_at: str
    created_at: str

    @classmethod
    def from_entity(cls, invite: Invite) -> "InviteView":
        return cls(
            id=str(invite.id),
            organization_id=str(invite.organization_id),
            email=invite.email,
            role=invite.role.value,
            status=invite.status.value,
            expires_at=invite.expires_at.isoformat(),
            created_at=invite.created_at.isoformat(),
        )


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInviteResponse(BaseModel):
    """Response for create invite use case"""

    invite_id: str
    status: str
    expires_at: str
    reused: bool  # True when an existing pending invite was resent instead


class ResendInviteResponse(BaseModel):
    """Response for resend invite use case"""

    invite_id: str
    status: str
    expires_at: str


class DeleteInviteResponse(BaseModel):
    """Response for delete invite use case"""

    invite_id: str
    status: str = "deleted"


class AcceptInviteResponse(BaseModel):
    """Response for accept invite use case"""

    invite_id: str
    organization_id: str
    membership_id: str
    role: str


class PendingInvitesResponse(BaseModel):
    """Pending invites of the signed-in user plus client polling hints"""

    invites: List[InviteView]
    poll_interval_seconds: int
    poll_jitter_seconds: int


class OrganizationInvitesResponse(BaseModel):
    """Response for list organization invites use case"""

    invites: List[InviteView]


class ExpirySweepResponse(BaseModel):
    """Response for expiry sweep use case"""

    expired_count: int


class PurgeExpiredInvitesResponse(BaseModel):
    """Response for purge expired invites use case"""

    purged_count: int
    cutoff: str


class InviteCleanupStatsResponse(BaseModel):
    """Counts used to monitor the expiry and purge jobs"""

    pending: int
    overdue_pending: int
    expired: int
