"""Tests for Session: wiring, bootstrap and sign-in state."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from stickyboard.credentials import MemoryCredentialStore
from stickyboard.errors import AuthInvalidError, TransportError
from stickyboard.session import Session
from stickyboard.tokens import CredentialTokenStore, TokenPair

from conftest import Recorder, envelope, user_json


def _refresh_ok(request: httpx.Request) -> httpx.Response | None:
    if request.url.path.endswith("/Auth/refresh"):
        return httpx.Response(
            200, json=envelope({"accessToken": "new-access", "refreshToken": "new-refresh"})
        )
    return None


def _session(settings, token_store, handler) -> tuple[Session, Recorder]:
    recorder = Recorder(handler)
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return Session.create(settings, token_store=token_store, http_client=http), recorder


class TestCreate:
    def test_wires_services_to_one_client(self, settings, token_store) -> None:
        session = Session.create(settings, token_store=token_store)
        assert session.boards.api is session.api
        assert session.cards.api is session.api
        assert session.auth.auth is session.auth_manager
        assert session.api.config.base_url == settings.base_url
        assert session.auth_manager.tokens == TokenPair("old-access", "old-refresh")

    def test_memory_backend_from_settings(self, settings) -> None:
        session = Session.create(settings)
        assert session.auth_manager.tokens.is_empty
        assert not session.is_authenticated


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_without_refresh_token_starts_signed_out(self, settings) -> None:
        store = CredentialTokenStore(MemoryCredentialStore())
        store.save("stale-access", None)
        session, recorder = _session(settings, store, lambda r: httpx.Response(500))

        assert await session.bootstrap() is False

        assert recorder.requests == []
        assert store.load().is_empty
        assert session.current_user is None

    @pytest.mark.asyncio
    async def test_restores_user(self, settings, token_store) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return _refresh_ok(request) or httpx.Response(200, json=envelope(user_json()))

        session, recorder = _session(settings, token_store, handler)

        assert await session.bootstrap() is True

        assert session.is_authenticated
        assert session.current_user.email == "ada@example.com"
        assert session.last_error is None
        assert recorder.paths() == ["/api/Auth/refresh", "/api/Auth/me"]
        assert recorder.requests[1].headers["Authorization"] == "Bearer new-access"
        assert token_store.load() == TokenPair("new-access", "new-refresh")

    @pytest.mark.asyncio
    async def test_refresh_rejected_clears_tokens(self, settings, token_store) -> None:
        session, _ = _session(
            settings,
            token_store,
            lambda r: httpx.Response(401, json={"code": 2, "message": "expired"}),
        )

        assert await session.bootstrap() is False

        assert token_store.load().is_empty
        assert session.current_user is None
        assert session.last_error is not None

    @pytest.mark.asyncio
    async def test_me_failure_clears_tokens(self, settings, token_store) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return _refresh_ok(request) or httpx.Response(
                403, json={"code": 4, "message": "suspended"}
            )

        session, _ = _session(settings, token_store, handler)

        assert await session.bootstrap() is False
        assert token_store.load().is_empty
        assert "suspended" in str(session.last_error)

    @pytest.mark.asyncio
    async def test_slow_me_times_out(self, settings, token_store) -> None:
        settings = settings.model_copy(update={"me_timeout": 0.05})

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/Auth/refresh"):
                return _refresh_ok(request)
            await asyncio.sleep(1)
            return httpx.Response(200, json=envelope(user_json()))

        session, _ = _session(settings, token_store, handler)

        assert await session.bootstrap() is False
        assert isinstance(session.last_error, TransportError)
        assert isinstance(session.last_error.underlying, TimeoutError)
        assert token_store.load().is_empty


class TestSignInState:
    @pytest.mark.asyncio
    async def test_login_sets_current_user(self, settings, token_store) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=envelope(
                    {"accessToken": "a", "refreshToken": "r", "user": user_json("grace@example.com")}
                ),
            )

        session, _ = _session(settings, token_store, handler)
        user = await session.login("grace@example.com", "pw")

        assert user.email == "grace@example.com"
        assert session.current_user is user
        assert session.auth_manager.tokens == TokenPair("a", "r")

    @pytest.mark.asyncio
    async def test_logout_signs_out(self, settings, token_store) -> None:
        session, _ = _session(
            settings, token_store, lambda r: httpx.Response(200, json=envelope({"success": True}))
        )
        await session.logout()
        assert session.current_user is None
        assert token_store.load().is_empty

    @pytest.mark.asyncio
    async def test_reload_me_failure_records_error(self, settings) -> None:
        store = CredentialTokenStore(MemoryCredentialStore())
        store.save("access", None)
        session, _ = _session(
            settings, store, lambda r: httpx.Response(401, json={"code": 1, "message": "no"})
        )

        assert await session.reload_me() is None
        assert isinstance(session.last_error, AuthInvalidError)
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self, settings, token_store) -> None:
        async with Session.create(settings, token_store=token_store) as session:
            http = session.api._http
        assert http.is_closed
