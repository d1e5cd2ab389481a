"""
Subscription State Machine

Owns subscription and trial state. Events are applied through a transition
table keyed by (current status, event class); each entry returns the column
changes for the new state, or None when the event changes nothing.

    trialing --trial.will_end / payment.succeeded--> active
    trialing --trial.ended--> active (payment method on file) | canceled
    trialing --payment.failed--> past_due
    trialing | active | past_due --subscription.canceled--> canceled
    trialing | active | past_due --subscription.updated--> payload status
    trialing | past_due --checkout.completed--> active
    active --payment.failed--> past_due
    active --payment.succeeded--> active (renewal)
    past_due --payment.succeeded--> active

payment_method.attached records a payment method without moving the status.
Anything else leaves the status alone but still advances the event markers.
Events that are duplicates or not strictly newer than the last applied one
change nothing.

Only trial.started and checkout.completed create a subscription. Any other
event for an organization without one is deferred: nothing is written and
the provider is asked to deliver it again.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple, Type, Union
from uuid import UUID

from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.notification_dismissal_store import (
    NotificationDismissalStore,
)
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.domain.entities import EventOutcome, Subscription, SubscriptionStatus
from tenant_lifecycle.domain.events import (
    BillingEvent,
    CheckoutCompleted,
    PaymentFailed,
    PaymentMethodAttached,
    PaymentSucceeded,
    SubscriptionCanceled,
    SubscriptionUpdated,
    TrialEnded,
    TrialStarted,
    TrialWillEnd,
    UnknownEvent,
)

from .dtos import TrialStatus

logger = logging.getLogger(__name__)

DEFAULT_TRIAL_LENGTH = timedelta(days=14)
DEFAULT_ENDING_WARNING_DAYS = 2

Transition = Callable[[Subscription, BillingEvent], Optional[Dict[str, Any]]]


def _move_to(status: SubscriptionStatus, clear_trial: bool = False) -> Transition:
    def transition(subscription: Subscription, event: BillingEvent) -> Dict[str, Any]:
        changes: Dict[str, Any] = {"status": status}
        if clear_trial:
            changes["trial_ends_at"] = None
        return changes

    return transition


def _trial_ended(subscription: Subscription, event: TrialEnded) -> Dict[str, Any]:
    if event.has_payment_method or subscription.has_payment_method:
        return {"status": SubscriptionStatus.active}
    return {"status": SubscriptionStatus.canceled}


def _sync_status(
    subscription: Subscription, event: SubscriptionUpdated
) -> Optional[Dict[str, Any]]:
    target = event.provider_status
    if target is None:
        return None

    changes: Dict[str, Any] = {"status": target}
    if target == SubscriptionStatus.trialing:
        if event.trial_end is not None:
            changes["trial_ends_at"] = event.trial_end
    elif subscription.status == SubscriptionStatus.trialing:
        changes["trial_ends_at"] = None
    return changes


def _record_payment_method(subscription: Subscription, event: BillingEvent) -> Dict[str, Any]:
    return {"has_payment_method": True}


TRANSITIONS: Dict[Tuple[SubscriptionStatus, Type[BillingEvent]], Transition] = {
    (SubscriptionStatus.trialing, TrialWillEnd): _move_to(
        SubscriptionStatus.active, clear_trial=True
    ),
    (SubscriptionStatus.trialing, PaymentSucceeded): _move_to(
        SubscriptionStatus.active, clear_trial=True
    ),
    (SubscriptionStatus.trialing, TrialEnded): _trial_ended,
    (SubscriptionStatus.trialing, PaymentFailed): _move_to(SubscriptionStatus.past_due),
    (SubscriptionStatus.trialing, SubscriptionCanceled): _move_to(SubscriptionStatus.canceled),
    (SubscriptionStatus.trialing, SubscriptionUpdated): _sync_status,
    (SubscriptionStatus.trialing, CheckoutCompleted): _move_to(
        SubscriptionStatus.active, clear_trial=True
    ),
    (SubscriptionStatus.trialing, PaymentMethodAttached): _record_payment_method,
    (SubscriptionStatus.active, PaymentFailed): _move_to(SubscriptionStatus.past_due),
    (SubscriptionStatus.active, PaymentSucceeded): _move_to(SubscriptionStatus.active),
    (SubscriptionStatus.active, SubscriptionCanceled): _move_to(SubscriptionStatus.canceled),
    (SubscriptionStatus.active, SubscriptionUpdated): _sync_status,
    (SubscriptionStatus.active, PaymentMethodAttached): _record_payment_method,
    (SubscriptionStatus.past_due, PaymentSucceeded): _move_to(SubscriptionStatus.active),
    (SubscriptionStatus.past_due, SubscriptionCanceled): _move_to(SubscriptionStatus.canceled),
    (SubscriptionStatus.past_due, SubscriptionUpdated): _sync_status,
    (SubscriptionStatus.past_due, CheckoutCompleted): _move_to(SubscriptionStatus.active),
    (SubscriptionStatus.past_due, PaymentMethodAttached): _record_payment_method,
}


# Events that may create the first subscription row
STARTERS = (TrialStarted, CheckoutCompleted)


def compute_trial_status(
    subscription: Optional[Subscription],
    now: datetime,
    ending_warning_days: int = DEFAULT_ENDING_WARNING_DAYS,
) -> TrialStatus:
    if subscription is None:
        return TrialStatus(
            is_in_trial=False, has_used_trial=False, days_remaining=0, ends_soon=False
        )

    trial_ends_at = subscription.trial_ends_at
    is_in_trial = (
        subscription.status == SubscriptionStatus.trialing
        and trial_ends_at is not None
        and now <= trial_ends_at
    )

    days_remaining = 0
    if is_in_trial:
        days_remaining = max(0, math.ceil((trial_ends_at - now).total_seconds() / 86400))

    return TrialStatus(
        is_in_trial=is_in_trial,
        has_used_trial=subscription.trial_started_at is not None,
        days_remaining=days_remaining,
        trial_ends_at=trial_ends_at.isoformat() if trial_ends_at else None,
        ends_soon=is_in_trial and days_remaining <= ending_warning_days,
    )


class SubscriptionStateMachine:
    """
    Applies billing events to subscriptions inside the caller's open unit of
    work. The caller commits, together with its ledger row.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        trial_length: timedelta = DEFAULT_TRIAL_LENGTH,
    ):
        self.uow = uow
        self.clock = clock
        self.trial_length = trial_length

    async def apply(self, event: BillingEvent) -> Tuple[EventOutcome, Optional[UUID]]:
        """Returns the outcome and the organization the event resolved to"""
        if isinstance(event, UnknownEvent):
            logger.info(f"Acknowledging unhandled event type {event.event_type} ({event.event_id})")
            return EventOutcome.unknown, None

        subscription = await self._resolve(event)
        if subscription is None:
            if isinstance(event, STARTERS):
                return await self._create(event)
            logger.warning(
                f"Deferring event {event.event_id} ({event.kind}): no subscription for "
                f"customer {event.organization_external_ref} yet"
            )
            return EventOutcome.deferred, None

        organization_id = subscription.organization_id
        applied = {"transition": False, "from": None}

        def mutator(current: Subscription) -> Optional[Dict[str, Any]]:
            transition = TRANSITIONS.get((current.status, type(event)))
            changes = transition(current, event) if transition is not None else None
            applied["transition"] = changes is not None
            applied["from"] = current.status
            return changes

        updated = await self.uow.subscriptions.conditional_apply_event(
            organization_id, event.event_id, event.occurred_at, mutator, self.clock.now()
        )
        if updated is None:
            logger.info(
                f"Stale event {event.event_id} ({event.kind}) for organization {organization_id}"
            )
            return EventOutcome.stale, organization_id

        if not applied["transition"]:
            logger.info(
                f"Event {event.kind} has no transition from {applied['from'].value} "
                f"for organization {organization_id}"
            )
            return EventOutcome.ignored, organization_id

        logger.info(
            f"Subscription {organization_id}: {applied['from'].value} -> {updated.status.value} "
            f"on {event.kind}"
        )
        if (
            applied["from"] == SubscriptionStatus.trialing
            and updated.status == SubscriptionStatus.active
        ):
            await NotificationDismissalStore(
                self.uow.notification_dismissals, self.clock
            ).show_conversion_success(organization_id)

        return EventOutcome.applied, organization_id

    async def _resolve(self, event: BillingEvent) -> Optional[Subscription]:
        subscription = await self.uow.subscriptions.get_by_external_customer_ref(
            event.organization_external_ref
        )
        if subscription is None and event.metadata_organization_id is not None:
            subscription = await self.uow.subscriptions.get_by_organization_id(
                event.metadata_organization_id
            )
        return subscription

    async def _create(
        self, event: Union[TrialStarted, CheckoutCompleted]
    ) -> Tuple[EventOutcome, Optional[UUID]]:
        """
        First subscription row for an organization.

        trial.started always opens a trial, ending at the payload's trial_end
        or after the configured trial length. checkout.completed opens a trial
        only when the payload carries trial_end, and is active otherwise.
        """
        organization_id = event.metadata_organization_id
        if organization_id is None:
            # Redelivery cannot fix a payload without the organization
            logger.warning(f"{event.kind} {event.event_id} carries no organization id")
            return EventOutcome.ignored, None

        now = self.clock.now()
        if isinstance(event, TrialStarted) or event.trial_end is not None:
            status = SubscriptionStatus.trialing
            trial_started_at = now
            trial_ends_at = event.trial_end or now + self.trial_length
        else:
            status = SubscriptionStatus.active
            trial_started_at = None
            trial_ends_at = None

        await self.uow.subscriptions.create(
            Subscription(
                organization_id=organization_id,
                external_customer_ref=event.organization_external_ref,
                external_subscription_ref=event.external_subscription_ref,
                status=status,
                trial_started_at=trial_started_at,
                trial_ends_at=trial_ends_at,
                last_applied_event_id=event.event_id,
                last_applied_event_at=event.occurred_at,
                created_at=now,
                updated_at=now,
            )
        )
        if trial_ends_at is not None:
            logger.info(
                f"Trial started for organization {organization_id}, "
                f"ends {trial_ends_at.isoformat()}"
            )
        else:
            logger.info(f"Subscription for organization {organization_id} started active")
        return EventOutcome.applied, organization_id
