"""
Core request model for PKSNetwork.

Request descriptor, parameter encoding, token providers and retry policy.
"""

from pksnetwork.core.auth import AsyncTokenProvider, StaticTokenProvider, TokenProvider
from pksnetwork.core.encoder import ParameterEncoder
from pksnetwork.core.request import CachePolicy, HTTPMethod, ParametersEncoding, Request
from pksnetwork.core.retry import (
    DEFAULT_RETRYABLE_KINDS,
    RetryPolicy,
    async_send_with_retry,
    send_with_retry,
)
from pksnetwork.core.transport import TransportRequest, TransportResponse

__all__ = [
    "AsyncTokenProvider",
    "CachePolicy",
    "DEFAULT_RETRYABLE_KINDS",
    "HTTPMethod",
    "ParameterEncoder",
    "ParametersEncoding",
    "Request",
    "RetryPolicy",
    "StaticTokenProvider",
    "TokenProvider",
    "TransportRequest",
    "TransportResponse",
    "async_send_with_retry",
    "send_with_retry",
]
