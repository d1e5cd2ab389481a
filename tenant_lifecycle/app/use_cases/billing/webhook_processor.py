"""
Webhook Event Processor

Two stages:

1. verify_and_parse - authenticate the raw body against the signature header
   and turn it into a typed billing event. Nothing is read or written before
   the signature checks out.
2. dispatch - inside one transaction: consult the processed-events ledger,
   apply the event through the subscription state machine and record the
   ledger row. Replays of an event id are acknowledged without effect. An
   event that arrives before its subscription exists leaves no trace, so the
   provider's redelivery is processed normally.
"""

import json
import logging
from datetime import timedelta

import stripe

from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import (
    StoreConflictError,
    UnitOfWork,
    store_errors_as_results,
)
from tenant_lifecycle.app.services.webhook_signature import (
    WebhookConfigurationError,
    verify_signature,
)
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent, EventOutcome, ProcessedEvent
from tenant_lifecycle.domain.events import BillingEvent, MalformedEventError, parse_event
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import WebhookReceipt
from .subscription_state_machine import DEFAULT_TRIAL_LENGTH, SubscriptionStateMachine

logger = logging.getLogger(__name__)


class ProcessWebhookUseCase:
    """
    Use case for inbound payment-provider webhooks.

    Business Rules:
    - Missing or blank secret -> WEBHOOK_SECRET_NOT_CONFIGURED (server error)
    - Bad, stale or missing signature -> SIGNATURE_INVALID
    - Undecodable body or missing fields -> MALFORMED_EVENT
    - Each event id is applied at most once
    - Unknown event types are acknowledged and recorded as unknown
    - Events for a customer with no subscription yet (other than the ones
      that create it) are not recorded -> SUBSCRIPTION_NOT_READY, retried
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        secret: str,
        tolerance_seconds: int = 300,
        trial_length: timedelta = DEFAULT_TRIAL_LENGTH,
    ):
        self.uow = uow
        self.clock = clock
        self.secret = secret
        self.tolerance_seconds = tolerance_seconds
        self.trial_length = trial_length

    async def execute(self, raw_body: bytes, signature_header: str) -> Result[WebhookReceipt]:
        parsed = self.verify_and_parse(raw_body, signature_header)
        if parsed.is_err():
            return parsed
        return await self.dispatch(parsed.value)

    def verify_and_parse(self, raw_body: bytes, signature_header: str) -> Result[BillingEvent]:
        try:
            verify_signature(raw_body, signature_header, self.secret, self.tolerance_seconds)
        except WebhookConfigurationError as exc:
            logger.error(f"Webhook rejected: {exc}")
            return Return.err(Error("WEBHOOK_SECRET_NOT_CONFIGURED", str(exc)))
        except stripe.SignatureVerificationError as exc:
            logger.warning(f"Webhook signature rejected: {exc.user_message or exc}")
            return Return.err(
                Error(
                    "SIGNATURE_INVALID",
                    "Invalid webhook signature",
                    {"reason": exc.user_message or str(exc)},
                )
            )

        try:
            event = parse_event(json.loads(raw_body))
        except (ValueError, UnicodeDecodeError) as exc:
            # MalformedEventError and json.JSONDecodeError are both ValueErrors
            reason = str(exc) if isinstance(exc, MalformedEventError) else "Body is not valid JSON"
            logger.warning(f"Malformed webhook event: {reason}")
            return Return.err(
                Error("MALFORMED_EVENT", "Malformed webhook event", {"reason": reason})
            )

        return Return.ok(event)

    @store_errors_as_results
    async def dispatch(self, event: BillingEvent) -> Result[WebhookReceipt]:
        try:
            outcome = await self._apply_once(event)
        except StoreConflictError:
            # A concurrent delivery of the same id may have won the ledger insert
            if not await self._already_processed(event):
                raise
            outcome = EventOutcome.duplicate

        if outcome == EventOutcome.deferred:
            return Return.err(
                Error(
                    "SUBSCRIPTION_NOT_READY",
                    "No subscription for this customer yet, deliver again later",
                    {"event_id": event.event_id, "customer": event.organization_external_ref},
                )
            )

        if outcome == EventOutcome.duplicate:
            logger.info(f"Duplicate event {event.event_id} acknowledged")

        return Return.ok(
            WebhookReceipt(
                event_id=event.event_id,
                event_type=event.event_type,
                outcome=outcome.value,
            )
        )

    async def _apply_once(self, event: BillingEvent) -> EventOutcome:
        async with self.uow:
            if await self.uow.processed_events.get_by_event_id(event.event_id) is not None:
                return EventOutcome.duplicate

            state_machine = SubscriptionStateMachine(self.uow, self.clock, self.trial_length)
            outcome, organization_id = await state_machine.apply(event)
            if outcome == EventOutcome.deferred:
                return outcome
            now = self.clock.now()

            await self.uow.processed_events.create(
                ProcessedEvent(
                    event_id=event.event_id,
                    event_type=event.event_type,
                    organization_id=organization_id,
                    outcome=outcome,
                    processed_at=now,
                )
            )

            if outcome == EventOutcome.applied:
                await self.uow.audit_events.create(
                    AuditEvent(
                        organization_id=organization_id,
                        action=AuditAction.subscription_event_applied,
                        billing_event_id=event.event_id,
                        billing_event_kind=event.kind,
                        created_at=now,
                    )
                )

            await self.uow.commit()
            return outcome

    async def _already_processed(self, event: BillingEvent) -> bool:
        async with self.uow:
            return await self.uow.processed_events.get_by_event_id(event.event_id) is not None
