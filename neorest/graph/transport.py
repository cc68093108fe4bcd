"""
Transport layer between the Client and the Neo4j REST API.

This module provides:
- TransportResult: decoded outcome of a single HTTP exchange
- Transport: Protocol the Client depends on (duck typing)
- HttpTransport: httpx-backed implementation with connection reuse

The Client only ever hands relative paths (``/node/123``) to a transport;
joining them onto the data root is the transport's job.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

import httpx

from neorest.core.logging import get_correlation_id, get_logger
from neorest.graph.exceptions import Neo4jConnectionError, Neo4jResponseError

if TYPE_CHECKING:
    from neorest.core.config import Settings

logger = get_logger(__name__)


@dataclass
class TransportResult:
    """Outcome of one request.

    Attributes:
        code: HTTP status code
        headers: Response headers (lookups are case-insensitive)
        data: Decoded JSON body, or None when the body was empty
    """

    code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Any = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@runtime_checkable
class Transport(Protocol):
    """Protocol defining the transport interface used by Client."""

    @property
    def endpoint(self) -> str:
        """Absolute URL of the data root, without trailing slash."""
        ...

    def get(self, path: str) -> TransportResult:
        """Issue a GET request."""
        ...

    def post(self, path: str, data: Any = None) -> TransportResult:
        """Issue a POST request with an optional JSON body."""
        ...

    def put(self, path: str, data: Any = None) -> TransportResult:
        """Issue a PUT request with an optional JSON body."""
        ...

    def delete(self, path: str) -> TransportResult:
        """Issue a DELETE request."""
        ...


class HttpTransport:
    """Synchronous HTTP transport backed by a single httpx.Client.

    Usage:
        with HttpTransport("http://localhost:7474/db/data") as transport:
            client = Client(transport)
            node = client.get_node(0)

        transport = HttpTransport.from_settings(get_settings())
    """

    def __init__(
        self,
        endpoint: str,
        auth: tuple[str, str] | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            endpoint: Absolute URL of the REST data root
            auth: Optional (user, password) for HTTP basic auth
            timeout: Request timeout in seconds
            client: Pre-built httpx.Client (tests inject one with
                    an httpx.MockTransport)
        """
        self._endpoint = endpoint.rstrip("/")
        self._client = client or httpx.Client(auth=auth, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpTransport:
        """Build a transport from Settings."""
        auth = None
        if settings.neo4j_user is not None:
            auth = (settings.neo4j_user, settings.neo4j_password or "")
        return cls(
            settings.neo4j_rest_url,
            auth=auth,
            timeout=settings.neo4j_timeout,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def get(self, path: str) -> TransportResult:
        return self._request("GET", path)

    def post(self, path: str, data: Any = None) -> TransportResult:
        return self._request("POST", path, data)

    def put(self, path: str, data: Any = None) -> TransportResult:
        return self._request("PUT", path, data)

    def delete(self, path: str) -> TransportResult:
        return self._request("DELETE", path)

    def close(self) -> None:
        """Close the underlying HTTP client. Safe to call twice."""
        if not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, data: Any = None) -> TransportResult:
        """Send one request and decode the response.

        Raises:
            Neo4jConnectionError: If the request could not be completed
            Neo4jResponseError: If a non-empty body is not valid JSON
        """
        url = self._endpoint + path
        headers = {"Accept": "application/json"}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Request-ID"] = correlation_id

        started = time.perf_counter()
        try:
            if data is None:
                response = self._client.request(method, url, headers=headers)
            else:
                response = self._client.request(method, url, headers=headers, json=data)
        except httpx.HTTPError as e:
            raise Neo4jConnectionError(
                f"{method} {url} failed: {e}",
                cause=e,
            ) from e

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug(
            "%s %s -> %d",
            method,
            url,
            response.status_code,
            extra={
                "method": method,
                "path": path,
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return TransportResult(
            code=response.status_code,
            headers=response.headers,
            data=self._decode(response),
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise Neo4jResponseError(
                f"Invalid JSON in response from {response.request.url}",
                body=response.text,
            ) from e
