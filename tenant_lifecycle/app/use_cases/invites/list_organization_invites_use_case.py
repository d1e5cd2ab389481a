"""
List Organization Invites Use Case

Owner/admin view of every invite of the organization (members page).
"""

from uuid import UUID

from tenant_lifecycle.app.services.authorization import Action, authorize
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork, store_errors_as_results
from tenant_lifecycle.libs.result import Result, Return

from .dtos import InviteView, OrganizationInvitesResponse


class ListOrganizationInvitesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @store_errors_as_results
    async def execute(
        self, caller: Caller, organization_id: UUID
    ) -> Result[OrganizationInvitesResponse]:
        denied = authorize(caller.role_in(organization_id), Action.list_organization_invites)
        if denied:
            return Return.err(denied)

        async with self.uow:
            invites = await self.uow.invites.list_by_organization(organization_id)

        return Return.ok(
            OrganizationInvitesResponse(
                invites=[InviteView.from_entity(invite) for invite in invites]
            )
        )
