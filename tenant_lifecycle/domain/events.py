"""
Billing Events

Typed payment-provider events. Each event kind is its own class; the provider
type string (canonical or provider-native alias) selects the class through
EVENT_TYPES. Anything not listed parses into UnknownEvent.
"""

from datetime import UTC, datetime
from typing import Any, ClassVar, Dict, Optional, Type
from uuid import UUID

from pydantic import BaseModel

from tenant_lifecycle.domain.entities import SubscriptionStatus


class MalformedEventError(ValueError):
    """Verified body is not a usable billing event"""


class BillingEvent(BaseModel):
    """Common envelope of all billing events"""

    kind: ClassVar[str] = ""

    event_id: str
    event_type: str  # type string as received
    organization_external_ref: str
    occurred_at: datetime  # naive UTC
    payload: Dict[str, Any]

    @property
    def metadata_organization_id(self) -> Optional[UUID]:
        metadata = self.payload.get("metadata") or {}
        raw = metadata.get("organization_id") or metadata.get("organizationId")
        if not raw:
            return None
        try:
            return UUID(str(raw))
        except ValueError:
            return None

    @property
    def external_subscription_ref(self) -> Optional[str]:
        value = self.payload.get("subscription") or self.payload.get("id")
        return str(value) if value else None

    @property
    def trial_end(self) -> Optional[datetime]:
        raw = self.payload.get("trial_end")
        if raw is None:
            return None
        try:
            return datetime.fromtimestamp(int(raw), UTC).replace(tzinfo=None)
        except (TypeError, ValueError, OverflowError):
            return None


class TrialStarted(BillingEvent):
    kind: ClassVar[str] = "trial.started"


class TrialWillEnd(BillingEvent):
    kind: ClassVar[str] = "trial.will_end"


class TrialEnded(BillingEvent):
    kind: ClassVar[str] = "trial.ended"

    @property
    def has_payment_method(self) -> bool:
        return bool(self.payload.get("has_payment_method", False))


class PaymentSucceeded(BillingEvent):
    kind: ClassVar[str] = "payment.succeeded"


class PaymentFailed(BillingEvent):
    kind: ClassVar[str] = "payment.failed"


class SubscriptionCanceled(BillingEvent):
    kind: ClassVar[str] = "subscription.canceled"


class SubscriptionUpdated(BillingEvent):
    """Provider-side status change; the payload status is authoritative"""

    kind: ClassVar[str] = "subscription.updated"

    @property
    def provider_status(self) -> Optional[SubscriptionStatus]:
        return PROVIDER_STATUSES.get(str(self.payload.get("status") or ""))


class CheckoutCompleted(BillingEvent):
    """Hosted checkout finished; starts a trial or activates directly"""

    kind: ClassVar[str] = "checkout.completed"


class PaymentMethodAttached(BillingEvent):
    kind: ClassVar[str] = "payment_method.attached"


class UnknownEvent(BillingEvent):
    kind: ClassVar[str] = "unknown"


# Provider statuses without a local counterpart (incomplete, paused) map to nothing
PROVIDER_STATUSES: Dict[str, SubscriptionStatus] = {
    "trialing": SubscriptionStatus.trialing,
    "active": SubscriptionStatus.active,
    "past_due": SubscriptionStatus.past_due,
    "unpaid": SubscriptionStatus.past_due,
    "canceled": SubscriptionStatus.canceled,
    "incomplete_expired": SubscriptionStatus.canceled,
}

EVENT_TYPES: Dict[str, Type[BillingEvent]] = {
    # Canonical names
    TrialStarted.kind: TrialStarted,
    TrialWillEnd.kind: TrialWillEnd,
    TrialEnded.kind: TrialEnded,
    PaymentSucceeded.kind: PaymentSucceeded,
    PaymentFailed.kind: PaymentFailed,
    SubscriptionCanceled.kind: SubscriptionCanceled,
    SubscriptionUpdated.kind: SubscriptionUpdated,
    CheckoutCompleted.kind: CheckoutCompleted,
    PaymentMethodAttached.kind: PaymentMethodAttached,
    # Provider-native aliases
    "customer.subscription.created": TrialStarted,
    "customer.subscription.trial_will_end": TrialWillEnd,
    "invoice.payment_succeeded": PaymentSucceeded,
    "invoice.payment_failed": PaymentFailed,
    "customer.subscription.deleted": SubscriptionCanceled,
    "customer.subscription.updated": SubscriptionUpdated,
    "checkout.session.completed": CheckoutCompleted,
    "setup_intent.succeeded": PaymentMethodAttached,
}


def parse_event(data: Any) -> BillingEvent:
    """
    Build a typed event from a decoded webhook body.

    Expected shape::

        {"id": "evt_...", "type": "payment.failed", "created": 1700000000,
         "data": {"object": {"customer": "cus_...", ...}}}

    Raises:
        MalformedEventError: required fields missing or of the wrong type
    """
    if not isinstance(data, dict):
        raise MalformedEventError("Event body must be a JSON object")

    event_id = data.get("id")
    event_type = data.get("type")
    created = data.get("created")
    envelope = data.get("data")
    obj = envelope.get("object") if isinstance(envelope, dict) else None

    if not isinstance(event_id, str) or not event_id:
        raise MalformedEventError("Event id is missing")
    if not isinstance(event_type, str) or not event_type:
        raise MalformedEventError("Event type is missing")
    if isinstance(created, bool) or not isinstance(created, (int, float)):
        raise MalformedEventError("Event timestamp is missing")
    if not isinstance(obj, dict):
        raise MalformedEventError("Event data object is missing")

    customer = obj.get("customer")
    if not isinstance(customer, str) or not customer:
        raise MalformedEventError("Event customer reference is missing")

    try:
        occurred_at = datetime.fromtimestamp(created, UTC).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedEventError("Event timestamp is out of range") from exc

    event_cls = EVENT_TYPES.get(event_type, UnknownEvent)
    return event_cls(
        event_id=event_id,
        event_type=event_type,
        organization_external_ref=customer,
        occurred_at=occurred_at,
        payload=obj,
    )
