"""Single authority over the access/refresh token pair.

``AuthManager`` is the only component that writes tokens.  Every in-memory
change is followed immediately by a write to the ``TokenStore`` under the
same lock, so memory and storage never disagree.

Refresh coordination: when many requests hit 401 at once, they all await
one shared refresh task instead of each firing its own.  The task runs
under ``asyncio.shield`` so a caller giving up (timeout, cancellation)
never interrupts a refresh that is already committing new tokens.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable

from stickyboard.config import APIConfig
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.errors import TokenStorageError
from stickyboard.models import AuthRefreshRequest, AuthRefreshResponse
from stickyboard.tokens import TokenPair, TokenStore

logger = logging.getLogger(__name__)

# (endpoint, response_type) -> decoded payload
Requester = Callable[[Endpoint, Any], Awaitable[Any]]


class AuthManager:
    """Owns the current token pair and runs the refresh protocol."""

    def __init__(self, store: TokenStore, config: APIConfig) -> None:
        self.store = store
        self.config = config
        self._lock = threading.RLock()
        self._refresh_lock = asyncio.Lock()
        self._refresh_task: asyncio.Task[None] | None = None
        self._requester: Requester | None = None
        self._tokens = store.load()

    def bind(self, requester: Requester) -> None:
        """Give the manager a way to issue the refresh call.

        The API client binds its own ``request`` method here at construction.
        """
        self._requester = requester

    # ── Accessors ──────────────────────────────────────────────────

    @property
    def tokens(self) -> TokenPair:
        return self._tokens

    def current_access_token(self) -> str | None:
        return self._tokens.access

    def has_refresh_token(self) -> bool:
        return bool(self._tokens.refresh)

    # ── Mutation ───────────────────────────────────────────────────

    def update_tokens(self, access: str | None, refresh: str | None) -> None:
        """Persist a new token pair, then make it current.

        If the store rejects the write (``TokenStorageError``), no pair is
        kept in memory and the store is wiped on a best-effort basis, so a
        half-written pair is never used.
        """
        pair = TokenPair(access=access or None, refresh=refresh or None)
        with self._lock:
            try:
                self.store.save(pair.access, pair.refresh)
            except TokenStorageError:
                self._forget()
                raise
            self._tokens = pair

    def clear(self) -> None:
        """Forget both tokens, in memory and in storage.

        Memory is emptied even when the store fails; the storage error is
        then re-raised.
        """
        with self._lock:
            self._tokens = TokenPair()
            self.store.clear()

    def _forget(self) -> None:
        """Empty memory and wipe the store, logging rather than raising a storage failure."""
        with self._lock:
            self._tokens = TokenPair()
            try:
                self.store.clear()
            except TokenStorageError as exc:
                logger.error("Could not wipe stored tokens: %s", exc)

    # ── Refresh ────────────────────────────────────────────────────

    async def refresh_if_possible(self) -> None:
        """Exchange the refresh token for a new pair.

        A no-op when no refresh token is held.  If the refresh call fails,
        both tokens are cleared and the error is re-raised.  Concurrent
        callers share the refresh already in flight.
        """
        task = self._refresh_task
        if task is None or task.done():
            if not self._tokens.refresh:
                logger.debug("No refresh token held; skipping refresh")
                return
            if self._requester is None:
                logger.warning("No API client bound; cannot refresh tokens")
                return
            task = asyncio.ensure_future(self._run_refresh(self._requester))
            task.add_done_callback(self._refresh_finished)
            self._refresh_task = task
        else:
            logger.debug("Joining refresh already in flight")

        await asyncio.shield(task)

    async def _run_refresh(self, requester: Requester) -> None:
        async with self._refresh_lock:
            refresh_token = self._tokens.refresh
            if not refresh_token:
                return

            endpoint = (
                Endpoint(HTTPMethod.POST, self.config.refresh_path)
                .with_body(AuthRefreshRequest(refresh_token=refresh_token))
                .auth(False)
            )

            logger.debug("Refreshing access token")
            try:
                result: AuthRefreshResponse = await requester(endpoint, AuthRefreshResponse)
            except Exception as exc:
                logger.warning("Token refresh failed: %s", exc)
                self._forget()
                raise

            self.update_tokens(result.access_token, result.refresh_token)
            logger.info("Access token refreshed")

    def _refresh_finished(self, task: asyncio.Task[None]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Retrieve the outcome so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()
