"""Explicitly wired client context.

``Session.create()`` builds the whole stack once (config → token store →
auth manager → API client → services) and hands it to whoever needs it;
nothing here is a module-level singleton.  It also tracks who is signed
in, for front ends that want a single object to hold on to.
"""

from __future__ import annotations

import logging

import httpx

from stickyboard.auth import AuthManager
from stickyboard.client import APIClient, with_timeout
from stickyboard.config import APIConfig, StickyBoardSettings
from stickyboard.errors import APIError
from stickyboard.models import UserSelfDto
from stickyboard.services import (
    AuthService,
    BoardService,
    CardService,
    SectionService,
    TabService,
    UserService,
)
from stickyboard.tokens import TokenStore, get_token_store

logger = logging.getLogger(__name__)


class Session:
    """Owns the client stack and the signed-in user, if any."""

    def __init__(
        self,
        settings: StickyBoardSettings,
        token_store: TokenStore,
        auth_manager: AuthManager,
        api: APIClient,
    ) -> None:
        self.settings = settings
        self.token_store = token_store
        self.auth_manager = auth_manager
        self.api = api

        self.auth = AuthService(api, auth_manager)
        self.users = UserService(api)
        self.boards = BoardService(api)
        self.tabs = TabService(api)
        self.sections = SectionService(api)
        self.cards = CardService(api)

        self.current_user: UserSelfDto | None = None
        self.last_error: APIError | None = None

    @classmethod
    def create(
        cls,
        settings: StickyBoardSettings,
        *,
        token_store: TokenStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Session:
        config = APIConfig.from_settings(settings)
        if token_store is None:
            token_store = get_token_store(settings.token_namespace, settings.token_backend)
        auth_manager = AuthManager(token_store, config)
        api = APIClient(config, auth_manager, http_client=http_client)
        return cls(settings, token_store, auth_manager, api)

    async def __aenter__(self) -> Session:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    async def bootstrap(self) -> bool:
        """Restore a session from stored tokens.

        Refreshes the token pair and loads the current user, each under its
        own deadline.  Any failure clears the stored tokens and leaves the
        session signed out; the error is kept in ``last_error``.

        Returns:
            True if a user is now signed in.
        """
        if not self.auth_manager.has_refresh_token():
            logger.info("No refresh token stored; starting signed out")
            self.auth_manager.clear()
            self.current_user = None
            return False

        try:
            await with_timeout(self.settings.refresh_timeout, self.auth.refresh())
            self.current_user = await with_timeout(self.settings.me_timeout, self.auth.me())
        except APIError as exc:
            logger.warning("Session restore failed: %s", exc)
            self.auth_manager.clear()
            self.current_user = None
            self.last_error = exc
            return False

        self.last_error = None
        logger.info("Session restored for %s", self.current_user.email)
        return True

    async def login(self, email: str, password: str) -> UserSelfDto:
        res = await self.auth.login(email, password)
        self.current_user = res.user
        self.last_error = None
        return res.user

    async def reload_me(self) -> UserSelfDto | None:
        try:
            self.current_user = await self.auth.me()
        except APIError as exc:
            self.current_user = None
            self.last_error = exc
            return None
        self.last_error = None
        return self.current_user

    async def logout(self) -> None:
        await self.auth.logout()
        self.current_user = None
