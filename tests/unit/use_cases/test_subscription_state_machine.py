from datetime import timedelta
from uuid import uuid4

import pytest

from tenant_lifecycle.app.use_cases.billing import SubscriptionStateMachine, compute_trial_status
from tenant_lifecycle.domain.entities import (
    EventOutcome,
    NotificationKind,
    Subscription,
    SubscriptionStatus,
)
from tenant_lifecycle.domain.events import parse_event
from tests.utils.billing_events import event_body


@pytest.fixture
def subscription(organization_id, clock):
    return Subscription(
        organization_id=organization_id,
        external_customer_ref="cus_acme",
        status=SubscriptionStatus.trialing,
        trial_started_at=clock.now() - timedelta(days=1),
        trial_ends_at=clock.now() + timedelta(days=13),
        last_applied_event_id="evt_0",
        last_applied_event_at=clock.now() - timedelta(days=1),
    )


@pytest.fixture
def store_with(mock_uow):
    """Wire the mocked subscription repository to one in-memory row"""

    def _wire(subscription):
        mock_uow.subscriptions.get_by_external_customer_ref.return_value = subscription

        async def conditional_apply_event(organization_id, event_id, event_at, mutator, now):
            if subscription.last_applied_event_id == event_id:
                return None
            if event_at <= subscription.last_applied_event_at:
                return None
            for key, value in (mutator(subscription) or {}).items():
                setattr(subscription, key, value)
            subscription.last_applied_event_id = event_id
            subscription.last_applied_event_at = event_at
            return subscription

        mock_uow.subscriptions.conditional_apply_event.side_effect = conditional_apply_event
        return subscription

    return _wire


def event(clock, event_id, event_type, offset_minutes=1, **fields):
    created = clock.epoch() + offset_minutes * 60
    return parse_event(event_body(event_id, event_type, created, **fields))


@pytest.mark.asyncio
async def test_trial_started_creates_trialing_subscription(mock_uow, clock, organization_id):
    machine = SubscriptionStateMachine(mock_uow, clock)

    outcome, resolved = await machine.apply(
        event(clock, "evt_1", "trial.started", organization_id=organization_id)
    )

    assert outcome == EventOutcome.applied
    assert resolved == organization_id
    created = mock_uow.subscriptions.create.call_args.args[0]
    assert created.status == SubscriptionStatus.trialing
    assert created.trial_started_at == clock.now()
    assert created.trial_ends_at == clock.now() + timedelta(days=14)
    assert created.last_applied_event_id == "evt_1"


@pytest.mark.asyncio
async def test_trial_started_uses_payload_trial_end(mock_uow, clock, organization_id):
    trial_end = clock.epoch() + 3 * 86400
    machine = SubscriptionStateMachine(mock_uow, clock)

    await machine.apply(
        event(
            clock,
            "evt_1",
            "customer.subscription.created",
            organization_id=organization_id,
            trial_end=trial_end,
        )
    )

    created = mock_uow.subscriptions.create.call_args.args[0]
    assert created.trial_ends_at == clock.now() + timedelta(days=3)


@pytest.mark.asyncio
async def test_trial_started_without_organization_is_ignored(mock_uow, clock):
    outcome, resolved = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "trial.started")
    )

    assert outcome == EventOutcome.ignored
    assert resolved is None
    mock_uow.subscriptions.create.assert_not_called()


@pytest.mark.asyncio
async def test_event_before_subscription_exists_is_deferred(mock_uow, clock):
    outcome, resolved = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "payment.succeeded")
    )

    assert outcome == EventOutcome.deferred
    assert resolved is None
    mock_uow.subscriptions.create.assert_not_called()
    mock_uow.subscriptions.conditional_apply_event.assert_not_called()


@pytest.mark.asyncio
async def test_event_for_organization_without_subscription_is_deferred(
    mock_uow, clock, organization_id
):
    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "payment.failed", organization_id=organization_id)
    )

    assert outcome == EventOutcome.deferred
    mock_uow.subscriptions.get_by_organization_id.assert_awaited_once_with(organization_id)
    mock_uow.subscriptions.create.assert_not_called()


@pytest.mark.asyncio
async def test_checkout_without_trial_creates_active_subscription(
    mock_uow, clock, organization_id
):
    outcome, resolved = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "checkout.session.completed", organization_id=organization_id)
    )

    assert outcome == EventOutcome.applied
    assert resolved == organization_id
    created = mock_uow.subscriptions.create.call_args.args[0]
    assert created.status == SubscriptionStatus.active
    assert created.trial_started_at is None
    assert created.trial_ends_at is None
    assert created.external_subscription_ref == "sub_acme"


@pytest.mark.asyncio
async def test_checkout_with_trial_creates_trialing_subscription(
    mock_uow, clock, organization_id
):
    await SubscriptionStateMachine(mock_uow, clock).apply(
        event(
            clock,
            "evt_1",
            "checkout.session.completed",
            organization_id=organization_id,
            trial_end=clock.epoch() + 7 * 86400,
        )
    )

    created = mock_uow.subscriptions.create.call_args.args[0]
    assert created.status == SubscriptionStatus.trialing
    assert created.trial_started_at == clock.now()
    assert created.trial_ends_at == clock.now() + timedelta(days=7)


@pytest.mark.asyncio
async def test_checkout_without_organization_is_ignored(mock_uow, clock):
    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "checkout.session.completed")
    )

    assert outcome == EventOutcome.ignored
    mock_uow.subscriptions.create.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_event_type_is_acknowledged(mock_uow, clock):
    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "customer.updated")
    )

    assert outcome == EventOutcome.unknown
    mock_uow.subscriptions.get_by_external_customer_ref.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start, event_type, fields, expected",
    [
        (SubscriptionStatus.trialing, "trial.will_end", {}, SubscriptionStatus.active),
        (SubscriptionStatus.trialing, "payment.succeeded", {}, SubscriptionStatus.active),
        (SubscriptionStatus.trialing, "trial.ended", {}, SubscriptionStatus.canceled),
        (
            SubscriptionStatus.trialing,
            "trial.ended",
            {"has_payment_method": True},
            SubscriptionStatus.active,
        ),
        (SubscriptionStatus.trialing, "payment.failed", {}, SubscriptionStatus.past_due),
        (SubscriptionStatus.trialing, "subscription.canceled", {}, SubscriptionStatus.canceled),
        (SubscriptionStatus.active, "invoice.payment_failed", {}, SubscriptionStatus.past_due),
        (SubscriptionStatus.active, "payment.succeeded", {}, SubscriptionStatus.active),
        (SubscriptionStatus.active, "subscription.canceled", {}, SubscriptionStatus.canceled),
        (SubscriptionStatus.past_due, "payment.succeeded", {}, SubscriptionStatus.active),
        (
            SubscriptionStatus.past_due,
            "customer.subscription.deleted",
            {},
            SubscriptionStatus.canceled,
        ),
        (SubscriptionStatus.trialing, "checkout.session.completed", {}, SubscriptionStatus.active),
        (SubscriptionStatus.past_due, "checkout.session.completed", {}, SubscriptionStatus.active),
        (
            SubscriptionStatus.trialing,
            "customer.subscription.updated",
            {"status": "active"},
            SubscriptionStatus.active,
        ),
        (
            SubscriptionStatus.active,
            "customer.subscription.updated",
            {"status": "past_due"},
            SubscriptionStatus.past_due,
        ),
        (
            SubscriptionStatus.active,
            "customer.subscription.updated",
            {"status": "unpaid"},
            SubscriptionStatus.past_due,
        ),
        (
            SubscriptionStatus.past_due,
            "customer.subscription.updated",
            {"status": "active"},
            SubscriptionStatus.active,
        ),
        (
            SubscriptionStatus.active,
            "customer.subscription.updated",
            {"status": "canceled"},
            SubscriptionStatus.canceled,
        ),
    ],
)
async def test_transitions(
    mock_uow, clock, store_with, subscription, start, event_type, fields, expected
):
    subscription.status = start
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", event_type, **fields)
    )

    assert outcome == EventOutcome.applied
    assert subscription.status == expected
    assert subscription.last_applied_event_id == "evt_1"


@pytest.mark.asyncio
async def test_conversion_clears_trial_and_raises_banner(
    mock_uow, clock, store_with, subscription, organization_id
):
    store_with(subscription)

    await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "payment.succeeded")
    )

    assert subscription.trial_ends_at is None
    mock_uow.notification_dismissals.set.assert_awaited_once_with(
        organization_id, NotificationKind.conversion_success, clock.now()
    )


@pytest.mark.asyncio
async def test_subscription_updated_with_unmapped_status_is_ignored(
    mock_uow, clock, store_with, subscription
):
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "customer.subscription.updated", status="incomplete")
    )

    assert outcome == EventOutcome.ignored
    assert subscription.status == SubscriptionStatus.trialing
    assert subscription.last_applied_event_id == "evt_1"


@pytest.mark.asyncio
async def test_subscription_updated_moves_trial_end(mock_uow, clock, store_with, subscription):
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(
            clock,
            "evt_1",
            "customer.subscription.updated",
            status="trialing",
            trial_end=clock.epoch() + 30 * 86400,
        )
    )

    assert outcome == EventOutcome.applied
    assert subscription.status == SubscriptionStatus.trialing
    assert subscription.trial_ends_at == clock.now() + timedelta(days=30)


@pytest.mark.asyncio
async def test_subscription_updated_to_active_converts_trial(
    mock_uow, clock, store_with, subscription, organization_id
):
    store_with(subscription)

    await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", "customer.subscription.updated", status="active")
    )

    assert subscription.status == SubscriptionStatus.active
    assert subscription.trial_ends_at is None
    mock_uow.notification_dismissals.set.assert_awaited_once_with(
        organization_id, NotificationKind.conversion_success, clock.now()
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ["payment_method.attached", "setup_intent.succeeded"])
async def test_payment_method_is_recorded_without_status_change(
    mock_uow, clock, store_with, subscription, event_type
):
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_1", event_type)
    )

    assert outcome == EventOutcome.applied
    assert subscription.has_payment_method is True
    assert subscription.status == SubscriptionStatus.trialing


@pytest.mark.asyncio
async def test_trial_end_uses_payment_method_on_file(mock_uow, clock, store_with, subscription):
    subscription.has_payment_method = True
    store_with(subscription)

    await SubscriptionStateMachine(mock_uow, clock).apply(event(clock, "evt_1", "trial.ended"))

    assert subscription.status == SubscriptionStatus.active


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start, event_type",
    [
        (SubscriptionStatus.canceled, "payment.succeeded"),
        (SubscriptionStatus.canceled, "trial.started"),
        (SubscriptionStatus.past_due, "payment.failed"),
        (SubscriptionStatus.active, "trial.will_end"),
        (SubscriptionStatus.active, "checkout.session.completed"),
        (SubscriptionStatus.canceled, "customer.subscription.updated"),
        (SubscriptionStatus.canceled, "payment_method.attached"),
    ],
)
async def test_invalid_transition_is_ignored_but_markers_advance(
    mock_uow, clock, store_with, subscription, start, event_type
):
    subscription.status = start
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_9", event_type)
    )

    assert outcome == EventOutcome.ignored
    assert subscription.status == start
    assert subscription.last_applied_event_id == "evt_9"


@pytest.mark.asyncio
async def test_older_event_is_stale(mock_uow, clock, store_with, subscription):
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_old", "payment.failed", offset_minutes=-3 * 24 * 60)
    )

    assert outcome == EventOutcome.stale
    assert subscription.status == SubscriptionStatus.trialing
    assert subscription.last_applied_event_id == "evt_0"


@pytest.mark.asyncio
async def test_equal_timestamp_is_stale(mock_uow, clock, store_with, subscription):
    store_with(subscription)

    outcome, _ = await SubscriptionStateMachine(mock_uow, clock).apply(
        event(clock, "evt_same", "payment.failed", offset_minutes=-24 * 60)
    )

    assert outcome == EventOutcome.stale


# ============================================================================
# Trial status projection
# ============================================================================


def test_trial_status_without_subscription(clock):
    status = compute_trial_status(None, clock.now())

    assert status.is_in_trial is False
    assert status.has_used_trial is False
    assert status.days_remaining == 0


def test_trial_status_rounds_days_up(clock, subscription):
    subscription.trial_ends_at = clock.now() + timedelta(days=3, hours=1)

    status = compute_trial_status(subscription, clock.now())

    assert status.is_in_trial is True
    assert status.days_remaining == 4
    assert status.ends_soon is False


def test_trial_status_ends_soon(clock, subscription):
    subscription.trial_ends_at = clock.now() + timedelta(days=1, hours=12)

    status = compute_trial_status(subscription, clock.now(), ending_warning_days=2)

    assert status.days_remaining == 2
    assert status.ends_soon is True


def test_trial_status_after_trial_end(clock, subscription):
    subscription.trial_ends_at = clock.now() - timedelta(seconds=1)

    status = compute_trial_status(subscription, clock.now())

    assert status.is_in_trial is False
    assert status.has_used_trial is True
    assert status.days_remaining == 0
    assert status.ends_soon is False


def test_trial_status_for_paid_subscription(clock, subscription):
    subscription.status = SubscriptionStatus.active
    subscription.trial_ends_at = None

    status = compute_trial_status(subscription, clock.now())

    assert status.is_in_trial is False
    assert status.has_used_trial is True
    assert status.trial_ends_at is None


def test_subscription_never_started_trial(clock):
    subscription = Subscription(
        organization_id=uuid4(),
        external_customer_ref="cus_x",
        status=SubscriptionStatus.active,
    )

    assert compute_trial_status(subscription, clock.now()).has_used_trial is False
