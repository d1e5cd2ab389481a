"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """Caller role within an organization"""

    owner = "owner"
    admin = "admin"
    member = "member"


class InviteRole(str, Enum):
    """Role granted by an invite"""

    admin = "admin"
    member = "member"


class InviteStatus(str, Enum):
    """Invite status - pending is the only non-terminal state"""

    pending = "pending"
    expired = "expired"
    accepted = "accepted"


class SubscriptionStatus(str, Enum):
    """Billing subscription status"""

    trialing = "trialing"
    active = "active"
    past_due = "past_due"
    canceled = "canceled"


class AuditAction(str, Enum):
    """State changes recorded in the audit trail"""

    invite_sent = "invite_sent"
    invite_resent = "invite_resent"
    invite_accepted = "invite_accepted"
    invite_deleted = "invite_deleted"
    invites_expired = "invites_expired"
    expired_invites_purged = "expired_invites_purged"
    subscription_event_applied = "subscription_event_applied"


class EventOutcome(str, Enum):
    """What the webhook processor did with a billing event"""

    applied = "applied"
    stale = "stale"
    ignored = "ignored"
    unknown = "unknown"
    duplicate = "duplicate"
    # No subscription to apply to yet; never recorded, the provider redelivers
    deferred = "deferred"


class NotificationKind(str, Enum):
    """Trial banners a user can dismiss"""

    trial_countdown = "trial_countdown"
    trial_expired = "trial_expired"
    conversion_success = "conversion_success"
