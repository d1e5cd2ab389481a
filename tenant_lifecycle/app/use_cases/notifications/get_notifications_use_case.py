"""
Get Notifications Use Case

Combines the trial projection with the organization's dismissals.
"""

from datetime import timedelta
from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.notification_dismissal_store import (
    DEFAULT_DISMISS_WINDOW,
    NotificationDismissalStore,
)
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.app.use_cases.billing.subscription_state_machine import (
    DEFAULT_ENDING_WARNING_DAYS,
    compute_trial_status,
)
from tenant_lifecycle.domain.entities import SubscriptionStatus
from tenant_lifecycle.libs.result import Result, Return

from .dtos import NotificationsResponse


class GetNotificationsUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        dismiss_window: timedelta = DEFAULT_DISMISS_WINDOW,
        ending_warning_days: int = DEFAULT_ENDING_WARNING_DAYS,
    ):
        self.uow = uow
        self.clock = clock
        self.dismiss_window = dismiss_window
        self.ending_warning_days = ending_warning_days

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID
    ) -> Result[NotificationsResponse]:
        denied = authorize(caller.role_in(organization_id), Action.manage_notifications)
        if denied:
            return Return.err(denied)

        async with self.uow:
            subscription = await self.uow.subscriptions.get_by_organization_id(organization_id)
            trial = compute_trial_status(
                subscription, self.clock.now(), self.ending_warning_days
            )

            store = NotificationDismissalStore(
                self.uow.notification_dismissals, self.clock, self.dismiss_window
            )
            # Paying customers never see the lapsed-trial banner
            is_paid = (
                subscription is not None and subscription.status == SubscriptionStatus.active
            )
            visible = await store.visible(
                organization_id, trial.is_in_trial, trial.has_used_trial and not is_paid
            )
            # Persist evictions of stale dismissals
            await self.uow.commit()

        return Return.ok(NotificationsResponse(**visible.model_dump(), trial=trial))
