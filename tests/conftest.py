"""Shared test fixtures for StickyBoard tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from stickyboard.auth import AuthManager
from stickyboard.client import APIClient
from stickyboard.config import APIConfig, StickyBoardSettings
from stickyboard.credentials import MemoryCredentialStore
from stickyboard.tokens import CredentialTokenStore

BASE_URL = "https://api.test/api"

BOARD_ID = "6f1c2b8e-3d4a-4b5c-9d8e-7f6a5b4c3d2e"
USER_ID = "0b7e2f4a-1c3d-4e5f-8a9b-0c1d2e3f4a5b"


def envelope(data: Any = None, *, success: bool = True, message: str | None = None) -> dict:
    """Build a ``{success, message, data}`` response body."""
    return {"success": success, "message": message, "data": data}


def user_json(email: str = "ada@example.com") -> dict:
    return {
        "id": USER_ID,
        "email": email,
        "displayName": "Ada",
        "avatarUrl": None,
        "prefs": {"theme": "dark"},
        "createdAt": "2024-01-15T10:30:00.000Z",
    }


def board_json(title: str = "Roadmap") -> dict:
    return {
        "id": BOARD_ID,
        "title": title,
        "visibility": 1,
        "ownerId": USER_ID,
        "orgId": None,
        "folderId": None,
        "theme": None,
        "meta": {"pinned": True},
        "createdAt": "2024-01-15 10:30:00",
        "updatedAt": "2024-02-01T08:00:00.1234567Z",
    }


class Recorder:
    """httpx handler wrapper that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def count(self, path_suffix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(path_suffix))

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture
def token_store() -> CredentialTokenStore:
    """An in-memory token store holding a stale access token and a live refresh token."""
    store = CredentialTokenStore(MemoryCredentialStore())
    store.save("old-access", "old-refresh")
    return store


@pytest.fixture
def api_config() -> APIConfig:
    return APIConfig(base_url=BASE_URL, refresh_path="Auth/refresh")


@pytest.fixture
def settings() -> StickyBoardSettings:
    return StickyBoardSettings(
        base_url=BASE_URL,
        token_backend="memory",
        refresh_timeout=1.0,
        me_timeout=1.0,
    )


@pytest.fixture
def make_api(
    token_store: CredentialTokenStore, api_config: APIConfig
) -> Callable[[Callable[[httpx.Request], Any]], tuple[APIClient, Recorder]]:
    """Factory: build an APIClient whose transport is the given handler."""

    def _make(handler: Callable[[httpx.Request], Any]) -> tuple[APIClient, Recorder]:
        recorder = Recorder(handler)
        auth = AuthManager(token_store, api_config)
        http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        return APIClient(api_config, auth, http_client=http), recorder

    return _make
