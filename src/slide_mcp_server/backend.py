"""Async HTTP client for the Slide REST API.

Every call returns a tagged :data:`BackendResult` instead of raising, so tool
handlers can decide how a failure is reported to the protocol layer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import httpx

from slide_mcp.tools import ToolFailure
from slide_mcp_server.config import DEFAULT_BASE_URL

_LOGGER = logging.getLogger(__name__)


class FailureKind(str, Enum):
    """Why a backend call did not produce a usable response."""

    STATUS = "status"
    NO_RESPONSE = "no_response"
    SETUP = "setup"


@dataclass(frozen=True)
class BackendSuccess:
    """A 2xx response with its decoded body (``None`` when empty)."""

    status_code: int
    body: Any


@dataclass(frozen=True)
class BackendFailure(ToolFailure):
    """A failed backend call.

    Attributes:
        kind: Failure category.
        status_code: HTTP status for ``STATUS`` failures.
        details: Decoded error body returned by the API, if any.
    """

    kind: FailureKind = FailureKind.SETUP
    status_code: int | None = None
    details: Any = None

    def error_data(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "status_code": self.status_code}


BackendResult = Union[BackendSuccess, BackendFailure]

# Errors raised before anything reached the network.
_SETUP_ERRORS = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.InvalidURL,
    TypeError,
    ValueError,
)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _stringify_query(query: Mapping[str, Any] | None) -> dict[str, str] | None:
    if not query:
        return None
    return {key: str(value) for key, value in query.items()}


class BackendClient:
    """Thin wrapper around :class:`httpx.AsyncClient` for the Slide API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create the client.

        Args:
            api_key: Bearer token sent with every request.
            base_url: API root, e.g. ``https://api.slide.tech``.
            transport: Optional transport override, used by tests.
            logger: Diagnostics sink; defaults to the module logger.
        """
        self._logger = logger or _LOGGER
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        """True when no pooled HTTP client is open."""
        return self._client is None

    def _http(self) -> httpx.AsyncClient:
        # created on first use so the pool belongs to the running event loop
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Release pooled connections; a later request opens a new pool."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> BackendResult:
        """Issue one API call and classify its outcome.

        Args:
            method: HTTP verb.
            path: Path below the base URL, e.g. ``/v1/device``.
            query: Query parameters; values are sent as strings.
            body: JSON body, omitted when ``None``.

        Returns:
            BackendSuccess for 2xx responses, BackendFailure otherwise.
        """
        self._logger.debug("%s %s query=%s", method, path, query)
        try:
            response = await self._http().request(
                method,
                path,
                params=_stringify_query(query),
                json=body,
            )
        except _SETUP_ERRORS as exc:
            self._logger.error("Could not send %s %s: %s", method, path, exc)
            return BackendFailure(message=f"Error: {exc}", kind=FailureKind.SETUP)
        except httpx.RequestError as exc:
            reason = str(exc) or type(exc).__name__
            self._logger.error("No response for %s %s: %s", method, path, reason)
            return BackendFailure(
                message=f"Network Error: {reason}", kind=FailureKind.NO_RESPONSE
            )

        payload = _decode_body(response)
        if response.is_success:
            return BackendSuccess(status_code=response.status_code, body=payload)

        api_message = None
        if isinstance(payload, dict):
            api_message = payload.get("message")
        message = (
            f"API Error ({response.status_code}): {api_message or 'Unknown error'}"
        )
        self._logger.warning("%s %s failed: %s", method, path, message)
        return BackendFailure(
            message=message,
            kind=FailureKind.STATUS,
            status_code=response.status_code,
            details=payload,
        )

    async def get(
        self, path: str, query: Mapping[str, Any] | None = None
    ) -> BackendResult:
        return await self.request("GET", path, query=query)

    async def post(self, path: str, body: Any = None) -> BackendResult:
        return await self.request("POST", path, body=body)

    async def patch(self, path: str, body: Any = None) -> BackendResult:
        return await self.request("PATCH", path, body=body)

    async def delete(self, path: str, body: Any = None) -> BackendResult:
        return await self.request("DELETE", path, body=body)
