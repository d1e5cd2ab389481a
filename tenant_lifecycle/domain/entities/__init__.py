"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AuditAction,
    EventOutcome,
    InviteRole,
    InviteStatus,
    MembershipRole,
    NotificationKind,
    SubscriptionStatus,
)

# Export all entities
from .invite import Invite, next_expiry, normalize_email
from .membership import Membership
from .subscription import Subscription
from .processed_event import ProcessedEvent
from .notification_dismissal import NotificationDismissal
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "AuditAction",
    "EventOutcome",
    "InviteRole",
    "InviteStatus",
    "MembershipRole",
    "NotificationKind",
    "SubscriptionStatus",
    # Entities
    "Invite",
    "Membership",
    "Subscription",
    "ProcessedEvent",
    "NotificationDismissal",
    "AuditEvent",
    # Helpers
    "next_expiry",
    "normalize_email",
]
