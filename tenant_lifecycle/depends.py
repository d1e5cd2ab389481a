from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from tenant_lifecycle.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_lifecycle.api.utils.jwt import verify_jwt
from tenant_lifecycle.app.services.caller import Caller
from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.invite_notifier import IInviteNotifier

security = HTTPBearer()


def get_config(request: Request):
    return request.app.state.config


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_invite_notifier(request: Request) -> IInviteNotifier:
    return request.app.state.invite_notifier


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    config=Depends(get_config),
) -> Caller:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        Caller built from the user_id, email, organization_id and role claims

    Raises:
        HTTPException: 401 if token is invalid, expired or lacks identity claims
    """
    payload = verify_jwt(credentials.credentials, config.JWT_SECRET)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        return Caller(
            user_id=UUID(str(payload.get("user_id"))),
            email=payload["email"],
            organization_id=payload.get("organization_id"),
            role=payload.get("role"),
        )
    except (KeyError, ValueError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is missing identity claims",
        )
