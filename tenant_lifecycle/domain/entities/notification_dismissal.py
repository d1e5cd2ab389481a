"""
NotificationDismissal Entity

Server-side copy of a user's dismissed trial banners.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import NotificationKind


class NotificationDismissal(SQLModel, table=True):
    """
    NotificationDismissal entity - keyed by (organization_id, notification_kind).

    Business Rules:
    - Overwritten on every dismissal
    - Treated as absent once older than the dismissal window (24h)
    - Never swept, stale rows are evicted lazily on read
    """

    __tablename__ = "notification_dismissals"

    organization_id: UUID = Field(primary_key=True)
    notification_kind: NotificationKind = Field(primary_key=True)

    dismissed_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
