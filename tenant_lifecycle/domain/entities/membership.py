"""
Membership Entity

Links a user to an organization with a role.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_lifecycle.domain.base import utc_now

from .enums import MembershipRole


class Membership(SQLModel, table=True):
    """
    Membership entity - links a user to an organization with a role.

    Business Rules:
    - (user_id, organization_id) is unique
    - Created or updated when an invite is accepted
    - Owners are never demoted by accepting an invite
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)
    organization_id: UUID = Field(nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)

    role: MembershipRole = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_membership_user_org", "user_id", "organization_id", unique=True),
    )
