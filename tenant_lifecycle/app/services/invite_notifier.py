import logging
from abc import ABC, abstractmethod

from tenant_lifecycle.domain.entities import Invite

logger = logging.getLogger(__name__)


class IInviteNotifier(ABC):
    """Outbound invite delivery (email) - external collaborator"""

    @abstractmethod
    async def invite_sent(self, invite: Invite, resent: bool) -> None:
        """Deliver or re-deliver the invitation for ``invite``"""
        pass


async def notify_invite_sent(notifier: IInviteNotifier, invite: Invite, resent: bool) -> None:
    """Delivery runs after commit; a failed delivery never undoes the invite"""
    try:
        await notifier.invite_sent(invite, resent=resent)
    except Exception:
        logger.exception(f"Invite notification failed for invite {invite.id}")
