import functools
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

from tenant_lifecycle.libs.result import Error, Return
from tenant_lifecycle.app.repositories.audit_event_repository import IAuditEventRepository
from tenant_lifecycle.app.repositories.invite_repository import IInviteRepository
from tenant_lifecycle.app.repositories.membership_repository import IMembershipRepository
from tenant_lifecycle.app.repositories.notification_dismissal_repository import (
    IDismissalBackend,
)
from tenant_lifecycle.app.repositories.processed_event_repository import (
    IProcessedEventRepository,
)
from tenant_lifecycle.app.repositories.subscription_repository import ISubscriptionRepository

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for data store failures surfaced by a UnitOfWork"""


class TransientStoreError(StoreError):
    """Store I/O failure - safe to retry, never swallowed"""


class StoreConflictError(StoreError):
    """A unique constraint or optimistic guard was violated by a concurrent writer"""


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    invites: IInviteRepository
    memberships: IMembershipRepository
    subscriptions: ISubscriptionRepository
    processed_events: IProcessedEventRepository
    notification_dismissals: IDismissalBackend
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    async def run_in_transaction(self, fn: Callable[["UnitOfWork"], Awaitable[T]]) -> T:
        """
        Run ``fn`` inside one transaction: commit when it returns, roll back
        when it raises. Nothing ``fn`` wrote is visible unless it returns.
        """
        async with self:
            result = await fn(self)
            await self.commit()
            return result


def store_errors_as_results(fn):
    """
    Decorator for use case ``execute`` methods: store exceptions become
    error results so failures never cross the use case boundary as exceptions.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except StoreConflictError as exc:
            logger.warning(f"{fn.__qualname__}: concurrent update rejected ({exc})")
            return Return.err(
                Error("CONCURRENT_UPDATE", "The record was changed concurrently, please retry")
            )
        except TransientStoreError as exc:
            logger.error(f"{fn.__qualname__}: data store unavailable ({exc})")
            return Return.err(
                Error("STORE_UNAVAILABLE", "Service temporarily unavailable, please retry")
            )

    return wrapper
