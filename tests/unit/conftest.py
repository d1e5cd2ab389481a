from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.domain.entities import MembershipRole
from tests.utils.clock import FakeClock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    async def run_in_transaction(fn):
        return await UnitOfWork.run_in_transaction(uow, fn)

    uow.run_in_transaction = AsyncMock(side_effect=run_in_transaction)

    uow.invites = MagicMock()
    uow.invites.get_by_id = AsyncMock(return_value=None)
    uow.invites.get_pending_by_organization_and_email = AsyncMock(return_value=None)
    uow.invites.list_pending_for_email = AsyncMock(return_value=[])
    uow.invites.list_by_organization = AsyncMock(return_value=[])
    uow.invites.upsert_pending = AsyncMock(side_effect=lambda invite, now: (invite, True))
    uow.invites.extend_expiry_if_pending = AsyncMock(return_value=True)
    uow.invites.update_status_if = AsyncMock(return_value=True)
    uow.invites.delete_if_status_in = AsyncMock(return_value=True)
    uow.invites.expire_overdue = AsyncMock(return_value=0)
    uow.invites.delete_expired_before = AsyncMock(return_value=0)
    uow.invites.count_by_status = AsyncMock(return_value=0)
    uow.invites.count_overdue_pending = AsyncMock(return_value=0)

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_organization = AsyncMock(return_value=None)
    uow.memberships.get_by_email_and_organization = AsyncMock(return_value=None)
    uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    uow.memberships.update = AsyncMock(side_effect=lambda membership: membership)

    uow.subscriptions = MagicMock()
    uow.subscriptions.get_by_organization_id = AsyncMock(return_value=None)
    uow.subscriptions.get_by_external_customer_ref = AsyncMock(return_value=None)
    uow.subscriptions.create = AsyncMock(side_effect=lambda subscription: subscription)
    uow.subscriptions.conditional_apply_event = AsyncMock(return_value=None)

    uow.processed_events = MagicMock()
    uow.processed_events.get_by_event_id = AsyncMock(return_value=None)
    uow.processed_events.create = AsyncMock(side_effect=lambda processed: processed)

    uow.notification_dismissals = MagicMock()
    uow.notification_dismissals.get = AsyncMock(return_value=None)
    uow.notification_dismissals.set = AsyncMock()
    uow.notification_dismissals.delete = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def make_caller(organization_id):
    def _make(role=MembershipRole.admin, email="admin@acme.io", org=None):
        return Caller(
            user_id=uuid4(),
            email=email,
            organization_id=org or organization_id,
            role=role,
        )

    return _make
