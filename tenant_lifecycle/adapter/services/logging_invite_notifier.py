import logging

from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier
from tenant_lifecycle.domain.entities import Invite

logger = logging.getLogger(__name__)


class LoggingInviteNotifier(IInviteNotifier):
    """
    Stand-in for the email sender: records the delivery request in the log.
    Only identifiers are logged, never the invitee address.
    """

    async def invite_sent(self, invite: Invite, resent: bool) -> None:
        logger.info(
            f"Invite {'re-delivery' if resent else 'delivery'} requested: invite={invite.id} "
            f"organization={invite.organization_id} expires_at={invite.expires_at.isoformat()}"
        )
