"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

HTTP transport adapters (default).

``HttpAdapter`` is the blocking transport backed by a pooled
``requests.Session``. ``AsyncHttpAdapter`` is the asyncio transport backed
by ``httpx.AsyncClient``. Neither retries: retries are driven by callers
through ``RetryPolicy``.
"""

from __future__ import annotations

import time
from typing import Dict, Optional

import httpx
import requests
from requests.adapters import HTTPAdapter as _RequestsHTTPAdapter
from urllib3.util.retry import Retry

from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.exceptions import NetworkError, NetworkErrorKind
from pksnetwork.logging_config import get_logger
from pksnetwork.sdk.adapters.base import AsyncBaseAdapter, BaseAdapter

logger = get_logger(__name__)


def map_requests_error(error: requests.exceptions.RequestException) -> NetworkError:
    """Map a ``requests`` exception to exactly one ``NetworkError`` kind."""
    # ConnectTimeout is both a Timeout and a ConnectionError; timeout wins
    if isinstance(error, requests.exceptions.Timeout):
        kind = NetworkErrorKind.TIMEOUT
    elif isinstance(error, (
        requests.exceptions.InvalidURL,
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
    )):
        kind = NetworkErrorKind.INVALID_URL
    elif isinstance(error, requests.exceptions.ConnectionError):
        kind = NetworkErrorKind.NO_NETWORK
    else:
        kind = NetworkErrorKind.UNKNOWN
    return NetworkError(kind, f"{type(error).__name__}: {error}")


def map_httpx_error(error: Exception) -> NetworkError:
    """Map an ``httpx`` exception to exactly one ``NetworkError`` kind."""
    if isinstance(error, httpx.TimeoutException):
        kind = NetworkErrorKind.TIMEOUT
    elif isinstance(error, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        kind = NetworkErrorKind.INVALID_URL
    elif isinstance(error, httpx.NetworkError):
        kind = NetworkErrorKind.NO_NETWORK
    else:
        kind = NetworkErrorKind.UNKNOWN
    return NetworkError(kind, f"{type(error).__name__}: {error}")


class HttpAdapter(BaseAdapter):
    """Blocking HTTP transport using a pooled ``requests.Session``.

    Args:
        pool_connections: Number of connection pools to cache.
        pool_maxsize: Maximum connections kept per pool.
        default_headers: Headers sent with every request (e.g. User-Agent).
        transport: httpx transport override, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        pool_connections: int = 10,
        pool_maxsize: int = 20,
        default_headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._session: Optional[requests.Session] = requests.Session()

        adapter = _RequestsHTTPAdapter(
            max_retries=Retry(total=0, read=False),
            pool_connections=pool_connections,
            pool_maxsize=pool_maxsize,
        )
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

        if default_headers:
            self._session.headers.update(default_headers)

    def send(self, request: TransportRequest) -> TransportResponse:
        if self._session is None:
            raise NetworkError(NetworkErrorKind.UNKNOWN, "HttpAdapter is closed")

        start = time.monotonic()
        try:
            resp = self._session.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                data=request.body,
                timeout=request.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Transport failure: {request.method} {request.url}: {e}")
            raise map_requests_error(e) from e
        elapsed = (time.monotonic() - start) * 1000

        return TransportResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.content or b"",
            elapsed_ms=round(elapsed, 2),
        )

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None


class AsyncHttpAdapter(AsyncBaseAdapter):
    """Asyncio HTTP transport using ``httpx.AsyncClient``.

    The underlying client is created lazily on first use so the adapter can
    be constructed outside a running event loop. Redirects are followed, as
    they are by the blocking ``HttpAdapter``.

    Args:
        max_connections: Maximum concurrent connections in the pool.
        max_keepalive_connections: Maximum idle connections kept alive.
        default_headers: Headers sent with every request (e.g. User-Agent).
        transport: httpx transport override, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._default_headers = dict(default_headers or {})
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._closed = False

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self._default_headers,
                limits=self._limits,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def send(self, request: TransportRequest) -> TransportResponse:
        if self._closed:
            raise NetworkError(NetworkErrorKind.UNKNOWN, "AsyncHttpAdapter is closed")

        client = self._ensure_client()
        start = time.monotonic()
        try:
            resp = await client.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                content=request.body,
                timeout=request.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Transport failure: {request.method} {request.url}: {e}")
            raise map_httpx_error(e) from e
        elapsed = (time.monotonic() - start) * 1000

        return TransportResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.content or b"",
            elapsed_ms=round(elapsed, 2),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._closed = True

    @property
    def is_connected(self) -> bool:
        return not self._closed
