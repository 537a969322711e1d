"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

PKSNetwork - typed HTTP request layer

Immutable request descriptors, parameter encoding, bearer-token
authentication, a closed error taxonomy and caller-driven retries with
exponential backoff.
"""

from pksnetwork._version import __version__
from pksnetwork.core import (
    AsyncTokenProvider,
    CachePolicy,
    HTTPMethod,
    ParameterEncoder,
    ParametersEncoding,
    Request,
    RetryPolicy,
    StaticTokenProvider,
    TokenProvider,
    async_send_with_retry,
    send_with_retry,
)
from pksnetwork.exceptions import NetworkError, NetworkErrorKind, PKSError
from pksnetwork.sdk import AsyncNetworkClient, HookRegistry, NetworkClient

__all__ = [
    "__version__",
    "AsyncNetworkClient",
    "AsyncTokenProvider",
    "CachePolicy",
    "HTTPMethod",
    "HookRegistry",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorKind",
    "PKSError",
    "ParameterEncoder",
    "ParametersEncoding",
    "Request",
    "RetryPolicy",
    "StaticTokenProvider",
    "TokenProvider",
    "async_send_with_retry",
    "send_with_retry",
]
