"""Credential storage abstraction.

Secrets live in the native system keychain where one is available:

1. macOS Keychain (``security`` CLI)
2. Linux Secret Service (``secret-tool`` CLI, GNOME Keyring / KDE Wallet)
3. Process memory, when neither is present (tokens do not survive a restart)
"""

from __future__ import annotations

import logging
import sys
import threading
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "pro.aedev.stickyboard"


class CredentialStore(ABC):
    """A key/value secret store. Keys are slot names such as ``accessToken``."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """The stored value, or None when the slot is empty."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any existing one."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Empty the slot; an already empty slot is fine."""
        ...

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    @property
    def persistent(self) -> bool:
        """Whether stored values survive a process restart."""
        return True


class MemoryCredentialStore(CredentialStore):
    """Credentials held in a dict for the life of the process.

    Used in tests and on platforms with no secret service.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    @property
    def persistent(self) -> bool:
        return False


def get_credential_store(namespace: str = DEFAULT_NAMESPACE) -> CredentialStore:
    """Pick the backend for this platform: Keychain, Secret Service, or memory."""
    if sys.platform == "darwin":
        from stickyboard.credentials_macos import MacOSCredentialStore

        return MacOSCredentialStore(namespace)
    elif sys.platform.startswith("linux"):
        from stickyboard.credentials_linux import get_linux_store

        return get_linux_store(namespace)
    else:
        # No secret service integration on other platforms
        logger.warning("No system credential store on %s; tokens kept in memory", sys.platform)
        return MemoryCredentialStore()


def get_credential_store_label(store: CredentialStore) -> str:
    """Return a user-facing label for a credential store.

    macOS → "Keychain" (matches Keychain Access app)
    Linux → "Secret Service" (matches GNOME Keyring / KDE Wallet)
    Other → "memory"
    """
    if isinstance(store, MemoryCredentialStore):
        return "memory"
    if sys.platform == "darwin":
        return "Keychain"
    return "Secret Service"
