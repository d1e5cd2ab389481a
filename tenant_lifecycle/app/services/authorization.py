"""
Authorization policy

Single capability check consumed by every invite, subscription and
notification operation. The policy is a table keyed by action.
"""

from enum import Enum
from typing import Optional

from tenant_lifecycle.domain.entities import MembershipRole
from tenant_lifecycle.libs.result import Error


class Action(str, Enum):
    create_invite = "invite.create"
    resend_invite = "invite.resend"
    delete_invite = "invite.delete"
    list_organization_invites = "invite.list_organization"
    read_subscription = "subscription.read"
    manage_notifications = "notifications.manage"


_MANAGERS = frozenset({MembershipRole.owner, MembershipRole.admin})
_EVERYONE = frozenset(MembershipRole)

POLICY = {
    Action.create_invite: _MANAGERS,
    Action.resend_invite: _MANAGERS,
    Action.delete_invite: _MANAGERS,
    Action.list_organization_invites: _MANAGERS,
    Action.read_subscription: _EVERYONE,
    Action.manage_notifications: _EVERYONE,
}

_DENIED_MESSAGES = {
    Action.create_invite: "Only owners and admins can invite members",
    Action.resend_invite: "Only owners and admins can resend invites",
    Action.delete_invite: "Only owners and admins can delete invites",
    Action.list_organization_invites: "Only owners and admins can list invites",
}


def is_allowed(role: Optional[MembershipRole], action: Action) -> bool:
    return role is not None and role in POLICY[action]


def authorize(role: Optional[MembershipRole], action: Action) -> Optional[Error]:
    """
    Returns None when ``role`` may perform ``action``, otherwise the
    INSUFFICIENT_ROLE error to hand back to the caller.
    """
    if is_allowed(role, action):
        return None
    return Error(
        "INSUFFICIENT_ROLE",
        _DENIED_MESSAGES.get(action, "You do not have permission for this action"),
    )
