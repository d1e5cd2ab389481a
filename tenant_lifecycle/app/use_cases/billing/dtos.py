"""
Billing Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class TrialStatus(BaseModel):
    """Trial projection computed at query time, never stored"""

    is_in_trial: bool
    has_used_trial: bool
    days_remaining: int
    trial_ends_at: Optional[str] = None
    ends_soon: bool


class SubscriptionView(BaseModel):
    organization_id: str
    status: str
    external_customer_ref: str
    external_subscription_ref: Optional[str] = None
    trial_started_at: Optional[str] = None
    trial_ends_at: Optional[str] = None
    has_payment_method: bool = False
    updated_at: str


class GetSubscriptionResponse(BaseModel):
    """Response for get subscription use case"""

    subscription: SubscriptionView
    trial: TrialStatus


class WebhookReceipt(BaseModel):
    """Acknowledgement returned to the payment provider"""

    received: bool = True
    event_id: str
    event_type: str
    outcome: str
