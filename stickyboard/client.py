"""HTTP client for the StickyBoard REST API.

Turns an ``Endpoint`` into an httpx request, unwraps the
``{success, message, data}`` envelope, and runs the 401 protocol: refresh
the token pair once, then re-issue the same request exactly once more.

Every failure leaves this module as an ``APIError`` subclass.
"""

from __future__ import annotations

import asyncio
import json
import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from stickyboard.auth import AuthManager
from stickyboard.config import APIConfig
from stickyboard.endpoint import Endpoint
from stickyboard.errors import (
    APIError,
    AuthInvalidError,
    DecodingError,
    RequestCancelledError,
    ServerError,
    TransportError,
    UnknownAPIError,
    map_error_payload,
)
from stickyboard.models import ApiResponse, ErrorPayload

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def _normalise_path(path: str) -> str:
    return path.strip("/").lower()


def paths_equal(a: str, b: str) -> bool:
    """Compare two API paths ignoring case and surrounding slashes."""
    return _normalise_path(a) == _normalise_path(b)


class APIClient:
    """Executes endpoints against the API with token auth and 401 retry.

    Args:
        config: Base URL, refresh path and auth header settings.
        auth: The token authority; the client binds itself as its requester.
        http_client: Optional pre-built ``httpx.AsyncClient`` (e.g. with a
            ``MockTransport`` in tests).  A client passed in is not closed
            by ``aclose()``.
    """

    def __init__(
        self,
        config: APIConfig,
        auth: AuthManager,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.auth = auth
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)
        auth.bind(self.request)

    async def __aenter__(self) -> APIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ── Public ─────────────────────────────────────────────────────

    async def request(self, endpoint: Endpoint, response_type: Any = None) -> Any:
        """Execute ``endpoint`` and return the envelope's ``data`` as ``response_type``.

        Pass ``response_type=None`` for calls that carry no payload; the
        envelope is still checked for ``success``.
        """
        return await self._send(
            endpoint,
            lambda content: self._decode_envelope(content, response_type),
            allow_retry=True,
        )

    async def request_raw(self, endpoint: Endpoint, response_type: Any) -> Any:
        """Execute ``endpoint`` and decode the body directly, with no envelope."""
        return await self._send(
            endpoint,
            lambda content: self._decode(content, response_type),
            allow_retry=True,
        )

    def build_request(self, endpoint: Endpoint) -> httpx.Request:
        """Build the httpx request for an endpoint, attaching auth if required."""
        base = self.config.base_url.strip("/")
        path = endpoint.path.strip("/")

        headers: dict[str, str] = {"Accept": "application/json"}
        headers.update(endpoint.headers)

        content: bytes | None = None
        if endpoint.body is not None:
            headers["Content-Type"] = "application/json"
            content = self._encode_body(endpoint.body)

        if endpoint.requires_auth:
            token = self.auth.current_access_token()
            if token:
                headers[self.config.access_header_name] = self.config.access_header_prefix + token

        try:
            return self._http.build_request(
                endpoint.method.value,
                f"{base}/{path}",
                params=endpoint.present_query(),
                headers=headers,
                content=content,
            )
        except httpx.InvalidURL as exc:
            raise UnknownAPIError(None, f"Invalid URL: {exc}") from exc

    # ── Pipeline ───────────────────────────────────────────────────

    async def _send(
        self,
        endpoint: Endpoint,
        decode: Callable[[bytes], Any],
        *,
        allow_retry: bool,
    ) -> Any:
        request = self.build_request(endpoint)
        response = await self._execute(request)
        status = response.status_code
        logger.debug("%s %s -> %d", request.method, endpoint.path, status)

        if 200 <= status < 300:
            return decode(response.content)

        if status == 401:
            # Never refresh in response to the refresh call itself
            if allow_retry and not paths_equal(endpoint.path, self.config.refresh_path):
                await self.auth.refresh_if_possible()
                return await self._send(endpoint, decode, allow_retry=False)
            raise self._error_from_body(response) or AuthInvalidError("Unauthorized after retry")

        logger.debug("API non-2xx (%d) body: %s", status, response.text)
        raise self._error_from_body(response) or UnknownAPIError(status, response.text)

    async def _execute(self, request: httpx.Request) -> httpx.Response:
        if self._http.is_closed:
            raise RequestCancelledError("client is closed")
        try:
            return await self._http.send(request)
        except httpx.HTTPError as exc:
            logger.debug("Transport failure for %s %s: %s", request.method, request.url, exc)
            raise TransportError(exc) from exc

    # ── Encoding / decoding ────────────────────────────────────────

    @staticmethod
    def _encode_body(body: Any) -> bytes:
        try:
            payload = to_jsonable_python(body, by_alias=True, exclude_none=True)
        except PydanticSerializationError as exc:
            raise TransportError(exc) from exc
        return json.dumps(payload).encode("utf-8")

    @staticmethod
    def _decode(content: bytes, response_type: Any) -> Any:
        try:
            return _adapter(response_type).validate_json(content)
        except ValidationError as exc:
            raise DecodingError(str(exc)) from exc

    def _decode_envelope(self, content: bytes, response_type: Any) -> Any:
        if response_type is None and not content.strip():
            return None

        payload_type = Any if response_type is None else response_type
        envelope: ApiResponse[Any] = self._decode(content, ApiResponse[payload_type])

        if not envelope.success:
            raise ServerError(envelope.message or "Unknown server error")
        if response_type is None:
            return None
        if envelope.data is None:
            raise DecodingError("Response envelope reported success but carried no data")
        return envelope.data

    @staticmethod
    def _error_from_body(response: httpx.Response) -> APIError | None:
        """Map a structured ``{code, message, details}`` body, if there is one."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict) or "code" not in body:
            return None
        try:
            payload = ErrorPayload.model_validate(body)
        except ValidationError as exc:
            return DecodingError(f"Unrecognized error payload: {exc}")
        return map_error_payload(payload)


async def with_timeout(seconds: float, awaitable: Awaitable[T]) -> T:
    """Await with a deadline; on expiry the wait is cancelled and a
    ``TransportError`` wrapping a ``TimeoutError`` is raised.

    Token mutations already in flight are shielded and still complete.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise TransportError(TimeoutError(f"Timed out after {seconds:g}s")) from exc
