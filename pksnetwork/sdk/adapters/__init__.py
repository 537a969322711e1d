"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Transport Adapters.
"""

from pksnetwork.sdk.adapters.base import AsyncBaseAdapter, BaseAdapter
from pksnetwork.sdk.adapters.http import AsyncHttpAdapter, HttpAdapter
from pksnetwork.sdk.adapters.mock import AsyncMockAdapter, MockAdapter

__all__ = [
    "AsyncBaseAdapter",
    "AsyncHttpAdapter",
    "AsyncMockAdapter",
    "BaseAdapter",
    "HttpAdapter",
    "MockAdapter",
]
