"""
Subscription Entity

Billing state of an organization, driven by payment-provider webhooks.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_lifecycle.domain.base import utc_now

from .enums import SubscriptionStatus


class Subscription(SQLModel, table=True):
    """
    Subscription entity - one per organization.

    Business Rules:
    - Created by the first trial.started (trialing) or checkout.completed event
    - has_payment_method only ever flips to True
    - Mutated only by the subscription state machine
    - Never deleted, canceled is terminal
    - last_applied_event_at orders applied events; anything not strictly
      newer is a no-op
    """

    __tablename__ = "subscriptions"

    organization_id: UUID = Field(primary_key=True)

    external_customer_ref: str = Field(max_length=255, nullable=False, index=True)
    external_subscription_ref: Optional[str] = Field(default=None, max_length=255)

    status: SubscriptionStatus = Field(default=SubscriptionStatus.trialing)

    trial_started_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    trial_ends_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    has_payment_method: bool = Field(default=False)

    last_applied_event_id: Optional[str] = Field(default=None, max_length=255)
    last_applied_event_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (Index("idx_subscription_status", "status"),)
