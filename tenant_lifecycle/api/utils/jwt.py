from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"


def verify_jwt(token: str, secret: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Tokens are minted by the identity service; this service only verifies.

    Args:
        token: JWT token string
        secret: Shared HS256 secret

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
