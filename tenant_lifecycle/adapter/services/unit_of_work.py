from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.adapter.repositories.audit_event_repository import AuditEventRepository
from tenant_lifecycle.adapter.repositories.invite_repository import InviteRepository
from tenant_lifecycle.adapter.repositories.membership_repository import MembershipRepository
from tenant_lifecycle.adapter.repositories.notification_dismissal_repository import (
    NotificationDismissalRepository,
)
from tenant_lifecycle.adapter.repositories.processed_event_repository import (
    ProcessedEventRepository,
)
from tenant_lifecycle.adapter.repositories.subscription_repository import SubscriptionRepository
from tenant_lifecycle.app.services.unit_of_work import (
    StoreConflictError,
    TransientStoreError,
    UnitOfWork,
)


def _translate(exc: BaseException) -> BaseException:
    """Map driver-level failures onto the store error types use cases understand"""
    if isinstance(exc, IntegrityError):
        return StoreConflictError(str(exc.orig))
    if isinstance(exc, DBAPIError):
        return TransientStoreError(str(exc.orig))
    return exc


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.invites = InviteRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.subscriptions = SubscriptionRepository(self.session)
        self.processed_events = ProcessedEventRepository(self.session)
        self.notification_dismissals = NotificationDismissalRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        # No-op after a successful commit; discards everything otherwise
        await self.rollback()
        if exc is not None:
            translated = _translate(exc)
            if translated is not exc:
                raise translated from exc

    async def commit(self):
        try:
            await self.session.commit()
        except DBAPIError as exc:
            raise _translate(exc) from exc

    async def rollback(self):
        await self.session.rollback()
