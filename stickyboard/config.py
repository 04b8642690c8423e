"""Client settings loaded from environment variables or .env."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_files(start: Path | None = None) -> list[Path]:
    """Return the nearest .env at or above ``start`` (default CWD), if any."""
    here = (start or Path.cwd()).resolve()
    for parent in [here, *here.parents]:
        env_path = parent / ".env"
        if env_path.is_file():
            return [env_path]
    return []


class StickyBoardSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STICKYBOARD_",
        env_file=_find_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    base_url: str = "https://stickyboard.aedev.pro/api"
    refresh_path: str = "Auth/refresh"
    access_header_name: str = "Authorization"
    access_header_prefix: str = "Bearer "

    # Timeouts (seconds)
    request_timeout: float = 30.0
    refresh_timeout: float = 8.0
    me_timeout: float = 5.0

    # Token storage
    token_namespace: str = "pro.aedev.stickyboard"
    token_backend: str = "auto"  # "auto", "keychain", or "memory"


@dataclass(frozen=True)
class APIConfig:
    """The slice of settings the API client and auth manager need."""

    base_url: str
    refresh_path: str = "Auth/refresh"
    access_header_name: str = "Authorization"
    access_header_prefix: str = "Bearer "
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: StickyBoardSettings) -> APIConfig:
        return cls(
            base_url=settings.base_url,
            refresh_path=settings.refresh_path,
            access_header_name=settings.access_header_name,
            access_header_prefix=settings.access_header_prefix,
            timeout=settings.request_timeout,
        )


def load_settings(**overrides: object) -> StickyBoardSettings:
    """Load settings with optional CLI overrides.

    ``None`` overrides are dropped so unset CLI options fall through to the
    environment.  Trailing slashes are trimmed from ``base_url``.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    settings = StickyBoardSettings(**overrides)  # type: ignore[arg-type]

    normalised = settings.base_url.rstrip("/")
    if normalised != settings.base_url:
        settings = settings.model_copy(update={"base_url": normalised})

    token_backend = settings.token_backend.lower()
    if token_backend not in ("auto", "keychain", "memory"):
        raise ValueError(
            f"Unknown token backend: {settings.token_backend!r} "
            "(expected auto, keychain, or memory)"
        )
    if token_backend != settings.token_backend:
        settings = settings.model_copy(update={"token_backend": token_backend})

    return settings
