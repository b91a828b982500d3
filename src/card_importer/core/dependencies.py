"""FastAPI dependency injection for database sessions and authentication."""

import uuid
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from card_importer.core.config import Settings, get_settings
from card_importer.core.database import get_session_factory
from card_importer.core.security import decode_token, user_id_from_payload

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller, as identified by their access token."""

    id: uuid.UUID
    access_token: str


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthenticatedUser:
    """Validate the bearer token and return the caller.

    Args:
        credentials: The Authorization header contents.
        settings: Application settings.

    Returns:
        The authenticated user's id and raw token.

    Raises:
        HTTPException: 401 if the token is missing or invalid.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        payload = decode_token(
            credentials.credentials,
            settings.jwt_secret_key,
            settings.jwt_algorithm,
            audience=settings.jwt_audience or None,
        )
        user_id = user_id_from_payload(payload)
    except jwt.InvalidTokenError as exc:
        raise credentials_exception from exc

    return AuthenticatedUser(id=user_id, access_token=credentials.credentials)
