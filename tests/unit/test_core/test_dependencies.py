"""Tests for FastAPI dependency injection module."""

import uuid
from collections.abc import Callable

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from card_importer.core.config import Settings
from card_importer.core.dependencies import AuthenticatedUser, get_current_user


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    """Tests for get_current_user."""

    @pytest.mark.asyncio
    async def test_valid_token(self, settings: Settings, make_token: Callable[..., str]) -> None:
        user_id = uuid.uuid4()
        token = make_token(user_id)

        user = await get_current_user(credentials=_credentials(token), settings=settings)

        assert user == AuthenticatedUser(id=user_id, access_token=token)

    @pytest.mark.asyncio
    async def test_missing_credentials(self, settings: Settings) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=None, settings=settings)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_expired_token(self, settings: Settings, make_token: Callable[..., str]) -> None:
        token = make_token(uuid.uuid4(), expires_minutes=-1)
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=_credentials(token), settings=settings)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_audience(self, settings: Settings, make_token: Callable[..., str]) -> None:
        token = make_token(uuid.uuid4(), audience="anon")
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=_credentials(token), settings=settings)
        assert exc_info.value.detail == "Could not validate credentials"

    @pytest.mark.asyncio
    async def test_empty_audience_setting_skips_check(
        self, settings: Settings, make_token: Callable[..., str]
    ) -> None:
        settings.jwt_audience = ""
        user_id = uuid.uuid4()
        user = await get_current_user(credentials=_credentials(make_token(user_id, audience="anon")), settings=settings)
        assert user.id == user_id

    @pytest.mark.asyncio
    async def test_non_uuid_subject(self, settings: Settings, make_token: Callable[..., str]) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=_credentials(make_token("service-role")), settings=settings)
        assert exc_info.value.status_code == 401
