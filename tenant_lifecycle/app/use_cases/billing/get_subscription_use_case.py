"""
Get Subscription Use Case

Subscription state plus the trial projection for any member of the
organization.
"""

from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.domain.entities import Subscription
from tenant_lifecycle.libs.result import Error, Result, Return

from .dtos import GetSubscriptionResponse, SubscriptionView
from .subscription_state_machine import DEFAULT_ENDING_WARNING_DAYS, compute_trial_status


def _isoformat(value):
    return value.isoformat() if value else None


def subscription_view(subscription: Subscription) -> SubscriptionView:
    return SubscriptionView(
        organization_id=str(subscription.organization_id),
        status=subscription.status.value,
        external_customer_ref=subscription.external_customer_ref,
        external_subscription_ref=subscription.external_subscription_ref,
        trial_started_at=_isoformat(subscription.trial_started_at),
        trial_ends_at=_isoformat(subscription.trial_ends_at),
        has_payment_method=subscription.has_payment_method,
        updated_at=subscription.updated_at.isoformat(),
    )


class GetSubscriptionUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        ending_warning_days: int = DEFAULT_ENDING_WARNING_DAYS,
    ):
        self.uow = uow
        self.clock = clock
        self.ending_warning_days = ending_warning_days

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID
    ) -> Result[GetSubscriptionResponse]:
        denied = authorize(caller.role_in(organization_id), Action.read_subscription)
        if denied:
            return Return.err(denied)

        async with self.uow:
            subscription = await self.uow.subscriptions.get_by_organization_id(organization_id)

        if subscription is None:
            return Return.err(
                Error("SUBSCRIPTION_NOT_FOUND", "No subscription exists for this organization")
            )

        return Return.ok(
            GetSubscriptionResponse(
                subscription=subscription_view(subscription),
                trial=compute_trial_status(
                    subscription, self.clock.now(), self.ending_warning_days
                ),
            )
        )
