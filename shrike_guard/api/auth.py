"""Authentication API client."""

from __future__ import annotations

from typing import Any, Union

from shrike_guard.api.base import BaseClient, dump_request, parse_model
from shrike_guard.api.models import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserProfile,
    as_request,
)

AUTH_PATH = "/api/v1/auth"


class AuthClient(BaseClient):
    """Customer account registration, login and session management."""

    async def register(self, request: Union[RegisterRequest, dict[str, Any]]) -> AuthResponse:
        """Register a new customer account."""
        body = dump_request(as_request(RegisterRequest, request))
        return parse_model(AuthResponse, await self.post(f"{AUTH_PATH}/register", body))

    async def login(self, request: Union[LoginRequest, dict[str, Any]]) -> AuthResponse:
        body = dump_request(as_request(LoginRequest, request))
        return parse_model(AuthResponse, await self.post(f"{AUTH_PATH}/login", body))

    async def refresh(self, refresh_token: str) -> AuthResponse:
        """Exchange a refresh token for a new access token."""
        data = await self.post(f"{AUTH_PATH}/refresh", {"refresh_token": refresh_token})
        return parse_model(AuthResponse, data)

    async def logout(self) -> None:
        """Invalidate the current session."""
        await self.post(f"{AUTH_PATH}/logout")

    async def me(self) -> UserProfile:
        return parse_model(UserProfile, await self.get(f"{AUTH_PATH}/me"))
