"""
AuditEvent Entity

Append-only trail of invite and subscription state changes.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_lifecycle.domain.base import utc_now

from .enums import AuditAction


class AuditEvent(SQLModel, table=True):
    """
    One row per committed state change.

    Reference columns are filled according to the action:
    - invite_* actions carry invite_id (invite_accepted also membership_id)
    - invites_expired / expired_invites_purged carry affected_count and have
      no organization
    - subscription_event_applied carries the billing event id and kind
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    action: AuditAction = Field(nullable=False)

    organization_id: Optional[UUID] = Field(default=None, index=True)
    actor_user_id: Optional[UUID] = Field(default=None)

    invite_id: Optional[UUID] = Field(default=None, index=True)
    membership_id: Optional[UUID] = Field(default=None)
    billing_event_id: Optional[str] = Field(default=None, max_length=255)
    billing_event_kind: Optional[str] = Field(default=None, max_length=50)
    affected_count: Optional[int] = Field(default=None)

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_org_action", "organization_id", "action"),
    )
