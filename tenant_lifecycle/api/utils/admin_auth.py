"""
Admin API Key Authentication

Validates admin API keys for the maintenance endpoints (expiry sweep, purge,
stats), which are called by schedulers rather than users.
"""

import hmac

from fastapi import Depends, Header, status

from tenant_lifecycle.api.error import ClientError
from tenant_lifecycle.depends import get_config
from tenant_lifecycle.libs.result import Error


async def verify_admin_api_key(
    x_admin_api_key: str = Header(None),
    config=Depends(get_config),
):
    """
    Verify admin API key from X-Admin-API-Key header.

    Raises:
        ClientError: 401 if key is missing or invalid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not hmac.compare_digest(x_admin_api_key, config.ADMIN_API_KEY):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
