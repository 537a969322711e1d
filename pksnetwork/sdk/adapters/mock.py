"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Mock transport adapters for local testing.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.sdk.adapters.base import AsyncBaseAdapter, BaseAdapter

MockResult = Union[
    TransportResponse,
    BaseException,
    Callable[[TransportRequest], TransportResponse],
]

_NOT_MOCKED = TransportResponse(
    status_code=404,
    headers={"Content-Type": "application/json"},
    body=b'{"error": "not mocked"}',
)


class _MockResponses:
    """Shared lookup and bookkeeping for the mock adapters."""

    def __init__(self, responses: Optional[Dict[Tuple[str, str], MockResult]] = None) -> None:
        self._responses: Dict[Tuple[str, str], MockResult] = dict(responses or {})
        self._sent: list[TransportRequest] = []

    def add(self, method: str, path: str, result: MockResult) -> None:
        """Register (or replace) the result for ``(method, path)``."""
        self._responses[(method.upper(), path)] = result

    def _resolve(self, request: TransportRequest) -> TransportResponse:
        self._sent.append(request)
        key = (request.method.upper(), urlsplit(request.url).path)
        result = self._responses.get(key, _NOT_MOCKED)
        if isinstance(result, BaseException):
            raise result
        if callable(result) and not isinstance(result, TransportResponse):
            return result(request)
        return result

    @property
    def sent_requests(self) -> list[TransportRequest]:
        """All requests that have been sent through this adapter."""
        return list(self._sent)


class MockAdapter(_MockResponses, BaseAdapter):
    """In-memory blocking adapter for unit tests.

    Args:
        responses: Mapping from ``(method, url_path)`` tuples to a
            ``TransportResponse``, an exception to raise, or a callable
            producing the response from the request.

    Example::

        adapter = MockAdapter({
            ("GET", "/todos/1"): TransportResponse(status_code=200, body=b'{"id": 1}'),
        })
    """

    def send(self, request: TransportRequest) -> TransportResponse:
        return self._resolve(request)

    def close(self) -> None:
        self._responses.clear()
        self._sent.clear()

    @property
    def is_connected(self) -> bool:
        return True


class AsyncMockAdapter(_MockResponses, AsyncBaseAdapter):
    """In-memory asyncio adapter for unit tests. Same lookup rules as ``MockAdapter``."""

    async def send(self, request: TransportRequest) -> TransportResponse:
        return self._resolve(request)

    async def aclose(self) -> None:
        self._responses.clear()
        self._sent.clear()

    @property
    def is_connected(self) -> bool:
        return True
