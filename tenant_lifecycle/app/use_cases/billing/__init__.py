"""
Billing Use Cases

Webhook processing, subscription state machine and subscription queries.
"""

from .dtos import GetSubscriptionResponse, SubscriptionView, TrialStatus, WebhookReceipt
from .get_subscription_use_case import GetSubscriptionUseCase
from .subscription_state_machine import (
    TRANSITIONS,
    SubscriptionStateMachine,
    compute_trial_status,
)
from .webhook_processor import ProcessWebhookUseCase

__all__ = [
    "ProcessWebhookUseCase",
    "SubscriptionStateMachine",
    "GetSubscriptionUseCase",
    "compute_trial_status",
    "TRANSITIONS",
    "TrialStatus",
    "SubscriptionView",
    "GetSubscriptionResponse",
    "WebhookReceipt",
]
