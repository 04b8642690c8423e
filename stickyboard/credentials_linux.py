"""Token storage in the freedesktop Secret Service via ``secret-tool``.

Each entry is addressed by two attributes, ``application=<namespace>`` and
``key=<slot>``.  Without a responsive Secret Service daemon (headless
boxes, CI containers) tokens live in process memory instead.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from stickyboard.credentials import CredentialStore, MemoryCredentialStore

logger = logging.getLogger(__name__)

_TOOL = "secret-tool"

# Seconds to wait for the daemon before declaring D-Bus broken
_PROBE_TIMEOUT = 2


class LinuxCredentialStore(CredentialStore):
    """Secret Service entries scoped to one application namespace."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    def _attributes(self, key: str) -> list[str]:
        return ["application", self.namespace, "key", key]

    def get(self, key: str) -> str | None:
        try:
            result = subprocess.run(
                [_TOOL, "lookup", *self._attributes(key)],
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError:
            return None
        return result.stdout.strip() or None

    def set(self, key: str, value: str) -> None:
        """Write ``value`` to the keyring; the secret travels on stdin, never argv."""
        subprocess.run(
            [_TOOL, "store", "--label", f"StickyBoard {key}", *self._attributes(key)],
            input=value,
            capture_output=True,
            text=True,
            check=True,
        )

    def delete(self, key: str) -> None:
        # secret-tool exits non-zero when nothing matched
        subprocess.run(
            [_TOOL, "clear", *self._attributes(key)],
            capture_output=True,
            check=False,
        )


def _is_secret_service_available() -> bool:
    """True when ``secret-tool`` is installed and the daemon answers a probe."""
    if shutil.which(_TOOL) is None:
        return False
    try:
        subprocess.run(
            [_TOOL, "lookup", "application", "stickyboard-probe"],
            capture_output=True,
            timeout=_PROBE_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False
    return True


def get_linux_store(namespace: str) -> CredentialStore:
    if _is_secret_service_available():
        return LinuxCredentialStore(namespace)

    logger.warning("Secret Service unavailable; tokens kept in memory only")
    return MemoryCredentialStore()
