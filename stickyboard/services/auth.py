"""Login, registration, session identity and logout."""

from __future__ import annotations

import logging

from stickyboard.auth import AuthManager
from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.errors import APIError
from stickyboard.models import (
    AuthLoginRequest,
    AuthLoginResponse,
    RegisterRequestDto,
    RegisterResponseDto,
    SuccessResponse,
    UserSelfDto,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, api: APIClient, auth: AuthManager) -> None:
        self.api = api
        self.auth = auth

    async def login(self, email: str, password: str) -> AuthLoginResponse:
        """Authenticate and store the returned token pair.

        Any previous session's tokens are dropped first so two sessions
        never mix.
        """
        self.auth.clear()

        endpoint = (
            Endpoint(HTTPMethod.POST, "Auth/login")
            .with_body(AuthLoginRequest(email=email, password=password))
            .auth(False)
        )
        res: AuthLoginResponse = await self.api.request(endpoint, AuthLoginResponse)
        self.auth.update_tokens(res.access_token, res.refresh_token)
        logger.info("Logged in as %s", res.user.email)
        return res

    async def register(
        self,
        email: str,
        password: str,
        display_name: str,
        invite_token: str | None = None,
    ) -> RegisterResponseDto:
        body = RegisterRequestDto(
            email=email,
            password=password,
            display_name=display_name,
            invite_token=invite_token,
        )
        endpoint = Endpoint(HTTPMethod.POST, "Auth/register").with_body(body).auth(False)
        res: RegisterResponseDto = await self.api.request(endpoint, RegisterResponseDto)
        self.auth.update_tokens(res.access_token, res.refresh_token)
        logger.info("Registered %s", res.user.email)
        return res

    async def me(self) -> UserSelfDto:
        return await self.api.request(Endpoint(HTTPMethod.GET, "Auth/me"), UserSelfDto)

    async def refresh(self) -> None:
        await self.auth.refresh_if_possible()

    async def logout(self) -> None:
        """Invalidate the session server-side (best effort), then clear local tokens.

        Never raises for API failures: logging out must always succeed locally.
        """
        try:
            endpoint = Endpoint(HTTPMethod.POST, "Auth/logout").auth(True)
            await self.api.request(endpoint, SuccessResponse)
        except APIError as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self.auth.clear()
