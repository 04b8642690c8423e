"""Durable storage for the access/refresh token pair.

Two secret entries, ``accessToken`` and ``refreshToken``, live under an
application namespace in the system credential store.  An absent slot is
deleted, never written as an empty string.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from stickyboard.credentials import (
    CredentialStore,
    MemoryCredentialStore,
    get_credential_store,
)
from stickyboard.errors import TokenStorageError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"

# What the keychain CLIs raise when a read or write does not go through
_BACKEND_ERRORS = (subprocess.SubprocessError, OSError, ValueError)


@dataclass(frozen=True)
class TokenPair:
    """An access/refresh token pair.  Either slot may be absent."""

    access: str | None = None
    refresh: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.access is None and self.refresh is None

    def __repr__(self) -> str:
        # Never print the secrets themselves
        return (
            f"TokenPair(access={'<set>' if self.access else None}, "
            f"refresh={'<set>' if self.refresh else None})"
        )


class TokenStore(ABC):
    """Abstract token persistence."""

    @abstractmethod
    def load(self) -> TokenPair: ...

    @abstractmethod
    def save(self, access: str | None, refresh: str | None) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class CredentialTokenStore(TokenStore):
    """Token store backed by a ``CredentialStore``.

    The subprocess-backed keychains are not safe to drive from several
    threads at once, so every operation runs under one lock.  A save is
    a delete-then-write per slot; holding the lock across both slots keeps
    ``load`` from observing half of an update.
    """

    def __init__(self, credentials: CredentialStore) -> None:
        self.credentials = credentials
        self._lock = threading.Lock()

    def load(self) -> TokenPair:
        with self._lock:
            try:
                return TokenPair(
                    access=self.credentials.get(ACCESS_TOKEN_KEY) or None,
                    refresh=self.credentials.get(REFRESH_TOKEN_KEY) or None,
                )
            except _BACKEND_ERRORS as exc:
                raise TokenStorageError(f"Could not read tokens: {exc}") from exc

    def save(self, access: str | None, refresh: str | None) -> None:
        with self._lock:
            self._write(ACCESS_TOKEN_KEY, access)
            self._write(REFRESH_TOKEN_KEY, refresh)

    def clear(self) -> None:
        with self._lock:
            self._write(ACCESS_TOKEN_KEY, None)
            self._write(REFRESH_TOKEN_KEY, None)

    def _write(self, key: str, value: str | None) -> None:
        try:
            self.credentials.delete(key)
            if value:
                self.credentials.set(key, value)
        except _BACKEND_ERRORS as exc:
            logger.error("Credential store rejected %s: %s", key, type(exc).__name__)
            raise TokenStorageError(f"Could not store {key}: {exc}") from exc


def get_token_store(namespace: str, backend: str = "auto") -> TokenStore:
    """Build the token store for a backend name ("auto", "keychain" or "memory").

    "auto" and "keychain" both use the platform credential store, which
    degrades to memory when no secret service is reachable.
    """
    if backend == "memory":
        return CredentialTokenStore(MemoryCredentialStore())

    credentials = get_credential_store(namespace)
    if not credentials.persistent:
        if backend == "keychain":
            raise RuntimeError("No system credential store is available on this machine")
        logger.warning("Tokens will not persist across restarts")
    return CredentialTokenStore(credentials)
