"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Transport adapter base classes.

Adapters execute a ``TransportRequest`` and return a ``TransportResponse``.
Transport-native failures are mapped to ``NetworkError`` inside the adapter,
so clients never see ``requests`` or ``httpx`` exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pksnetwork.core.transport import TransportRequest, TransportResponse


class BaseAdapter(ABC):
    """Abstract base for blocking transport adapters."""

    @abstractmethod
    def send(self, request: TransportRequest) -> TransportResponse:
        """Send a request and return the response."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release adapter resources."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the adapter is in a usable state."""
        ...


class AsyncBaseAdapter(ABC):
    """Abstract base for asyncio transport adapters."""

    @abstractmethod
    async def send(self, request: TransportRequest) -> TransportResponse:
        """Send a request and return the response."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release adapter resources."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the adapter is in a usable state."""
        ...
