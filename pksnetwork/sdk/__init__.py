"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

PKSNetwork clients: public API surface.

Quick start::

    from pksnetwork.sdk import NetworkClient
    client = NetworkClient("https://jsonplaceholder.typicode.com")

Async::

    from pksnetwork.sdk import AsyncNetworkClient
    async with AsyncNetworkClient("https://api.example.com", token_provider=provider) as client:
        task = client.submit(request, Todo)
"""

from pksnetwork.sdk.adapters import (
    AsyncBaseAdapter,
    AsyncHttpAdapter,
    AsyncMockAdapter,
    BaseAdapter,
    HttpAdapter,
    MockAdapter,
)
from pksnetwork.sdk.async_client import AsyncNetworkClient
from pksnetwork.sdk.client import NetworkClient
from pksnetwork.sdk.hooks import HookRegistry

__all__ = [
    "AsyncBaseAdapter",
    "AsyncHttpAdapter",
    "AsyncMockAdapter",
    "AsyncNetworkClient",
    "BaseAdapter",
    "HookRegistry",
    "HttpAdapter",
    "MockAdapter",
    "NetworkClient",
]
