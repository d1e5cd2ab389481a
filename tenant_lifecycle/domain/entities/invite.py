"""
Invite Entity

Pending offer of organization membership, bound to an email and an expiry.
"""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_lifecycle.domain.base import utc_now

from .enums import InviteRole, InviteStatus


def normalize_email(email: str) -> str:
    return email.strip().lower()


def next_expiry(current: datetime, now: datetime, ttl: timedelta) -> datetime:
    """
    Expiry for a (re)sent invite: now + ttl, but always strictly later than
    the current expiry so a resend never shortens or keeps it.
    """
    candidate = now + ttl
    if candidate <= current:
        candidate = current + timedelta(seconds=1)
    return candidate


class Invite(SQLModel, table=True):
    """
    Invite entity - membership offer for an email address.

    Business Rules:
    - Created by owner/admin, expires after INVITE_TTL_DAYS (7 by default)
    - At most one pending invite per (organization_id, email)
    - pending -> expired | accepted, never back
    - Accepted invites are kept as audit records
    """

    __tablename__ = "invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)

    role: InviteRole = Field(nullable=False)
    status: InviteStatus = Field(default=InviteStatus.pending)

    invited_by_user_id: UUID = Field(nullable=False)

    # Timestamps (naive UTC)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_invite_expires_at", "expires_at"),
        Index("idx_invite_status", "status"),
        Index(
            "uq_invite_pending_org_email",
            "organization_id",
            "email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def is_overdue(self, now: datetime) -> bool:
        return self.expires_at <= now
