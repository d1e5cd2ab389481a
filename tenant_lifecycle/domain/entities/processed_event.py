"""
ProcessedEvent Entity

Ledger of billing webhook events already handled.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from tenant_lifecycle.domain.base import utc_now

from .enums import EventOutcome


class ProcessedEvent(SQLModel, table=True):
    """
    ProcessedEvent entity - one row per provider event id.

    Business Rules:
    - Inserted in the same transaction as the subscription update
    - Primary key on event_id makes redelivery a no-op
    - Stores identifiers only, never the raw payload
    """

    __tablename__ = "processed_events"

    event_id: str = Field(primary_key=True, max_length=255)
    event_type: str = Field(max_length=100)
    organization_id: Optional[UUID] = Field(default=None, index=True)
    outcome: EventOutcome = Field(nullable=False)

    processed_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
