from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from tenant_lifecycle.domain.entities import MembershipRole, normalize_email


class Caller(BaseModel):
    """
    Authenticated principal of a request.

    Built by the API layer from a verified bearer token. ``role`` is the
    caller's role in ``organization_id``.
    """

    user_id: UUID
    email: str
    organization_id: Optional[UUID] = None
    role: Optional[MembershipRole] = None

    def role_in(self, organization_id: UUID) -> Optional[MembershipRole]:
        """Role within ``organization_id``; None when the token is scoped elsewhere"""
        if self.organization_id != organization_id:
            return None
        return self.role

    def owns_email(self, email: str) -> bool:
        return normalize_email(self.email) == normalize_email(email)
