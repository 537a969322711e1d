"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Token providers supplying bearer credentials to the network clients.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenProvider(ABC):
    """Supplies bearer tokens to ``NetworkClient``.

    Any exception raised by ``get_token`` fails the call with
    ``NetworkErrorKind.AUTHENTICATION_FAILED``.
    """

    @abstractmethod
    def get_token(self) -> str:
        """Return the bearer token for the next request."""
        ...


class AsyncTokenProvider(ABC):
    """Supplies bearer tokens to ``AsyncNetworkClient`` without blocking the loop."""

    @abstractmethod
    async def get_token(self) -> str:
        """Return the bearer token for the next request."""
        ...


class StaticTokenProvider(TokenProvider):
    """Returns a fixed token. Usable by both the blocking and the async client.

    Args:
        token: Token returned on every call.
    """

    def __init__(self, token: str) -> None:
        self._token = token

    def get_token(self) -> str:
        return self._token
