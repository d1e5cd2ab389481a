"""
Conversion Success Use Cases

Raise and lower the one-shot "welcome to the paid plan" banner. Raising it
clears both trial dismissals.
"""

from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.notification_dismissal_store import (
    NotificationDismissalStore,
)
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.libs.result import Result, Return

from .dtos import ConversionSuccessResponse


class ShowConversionSuccessUseCase:
    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID
    ) -> Result[ConversionSuccessResponse]:
        denied = authorize(caller.role_in(organization_id), Action.manage_notifications)
        if denied:
            return Return.err(denied)

        async with self.uow:
            store = NotificationDismissalStore(self.uow.notification_dismissals, self.clock)
            await store.show_conversion_success(organization_id)
            await self.uow.commit()

        return Return.ok(ConversionSuccessResponse(show_conversion_success=True))


class DismissConversionSuccessUseCase:
    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID
    ) -> Result[ConversionSuccessResponse]:
        denied = authorize(caller.role_in(organization_id), Action.manage_notifications)
        if denied:
            return Return.err(denied)

        async with self.uow:
            store = NotificationDismissalStore(self.uow.notification_dismissals, self.clock)
            await store.dismiss_conversion_success(organization_id)
            await self.uow.commit()

        return Return.ok(ConversionSuccessResponse(show_conversion_success=False))
