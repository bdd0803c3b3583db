"""Async HTTP client for the build orchestrator.

Endpoints (handles always travel as their hex text form):

    GET /parents?handle=<hex>           -> {"parents": null | [task, ...]}
    GET /dependees?handle=<hex>         -> {"dependees": [task, ...]}
    GET /child?handle=<hex>&op=<digit>  -> {"child": null | "<hex>"}

where ``task`` is ``{"handle": "<hex>", "operation": "0" | "1" | "2"}``.
Every failure is raised as a TransportError carrying its classification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ancestry.foundation.errors import TransportError, transport_error
from ancestry.handle import Handle, Operation
from ancestry.transport.models import (
    Child,
    ChildPayload,
    Dependees,
    DependeesPayload,
    Parents,
    ParentsPayload,
    parse_child,
    parse_dependees,
    parse_parents,
)

logger = logging.getLogger(__name__)

DEFAULT_URL = "127.0.0.1:9090"

P = TypeVar("P", bound=BaseModel)
R = TypeVar("R")


def normalize_base_url(url: str) -> str:
    """Accept bare ``host:port`` the way the server address is usually typed."""
    url = url.strip().rstrip("/")
    if "://" not in url:
        url = f"http://{url}"
    return url


def from_httpx_error(exc: Exception, url: str) -> TransportError:
    """Classify an httpx exception."""
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        kind = "builder"
    elif isinstance(exc, httpx.TimeoutException):
        kind = "timeout"
    elif isinstance(exc, httpx.TooManyRedirects):
        kind = "redirect"
    elif isinstance(exc, httpx.HTTPStatusError):
        return transport_error(
            "status", url, detail=str(exc), cause=exc, status=exc.response.status_code
        )
    elif isinstance(exc, httpx.DecodingError):
        kind = "decode"
    elif isinstance(exc, (httpx.ReadError, httpx.StreamError)):
        kind = "body"
    elif isinstance(exc, httpx.RequestError):
        kind = "request"
    else:
        kind = "unknown"
    return transport_error(kind, url, detail=str(exc), cause=exc)


class OrchestratorClient:
    """Fetches provenance for handles from a running orchestrator.

    Example:
        >>> async with OrchestratorClient("127.0.0.1:9090") as client:
        ...     parents = await client.get_parents(handle)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        *,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Orchestrator address, with or without scheme.
            timeout: Overall request timeout in seconds.
            connect_timeout: Connection timeout in seconds.
            transport: Custom httpx transport (tests pass httpx.MockTransport).
        """
        self.base_url = normalize_base_url(base_url)
        self._timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> OrchestratorClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def get_parents(self, handle: Handle) -> Parents:
        return await self._get(
            "/parents", {"handle": handle.to_hex()}, ParentsPayload, parse_parents
        )

    async def get_dependees(self, handle: Handle) -> Dependees:
        return await self._get(
            "/dependees", {"handle": handle.to_hex()}, DependeesPayload, parse_dependees
        )

    async def get_child(self, handle: Handle, operation: Operation) -> Child:
        return await self._get(
            "/child",
            {"handle": handle.to_hex(), "op": str(int(operation))},
            ChildPayload,
            parse_child,
        )

    async def _get(
        self,
        path: str,
        params: dict[str, str],
        payload_type: type[P],
        convert: Callable[[P], R],
    ) -> R:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s %s", url, params)
        try:
            client = await self._get_client()
            response = await client.get(path, params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise from_httpx_error(e, url) from e
        except httpx.InvalidURL as e:
            raise from_httpx_error(e, url) from e
        except ValueError as e:
            raise transport_error("decode", url, detail=f"parsing json: {e}", cause=e) from e

        try:
            return convert(payload_type.model_validate(body))
        except ValidationError as e:
            raise transport_error("decode", url, detail=f"unexpected payload: {e}", cause=e) from e
        except ValueError as e:
            # Malformed handle or operation inside an otherwise valid payload
            raise transport_error("decode", url, detail=str(e), cause=e) from e
