"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Request descriptor and its enumerations.

A ``Request`` is an immutable description of one HTTP call. Modifier
methods (``with_parameters``, ``with_authentication``, ...) return new
copies and never touch the original instance.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from pksnetwork.core.retry import RetryPolicy


class HTTPMethod(str, Enum):
    """HTTP methods supported by the request descriptor."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class ParametersEncoding(str, Enum):
    """Where request parameters are written."""

    URL_ENCODED = "url_encoded"    # query string, typically GET
    JSON_ENCODED = "json_encoded"  # JSON body, typically POST / PUT / PATCH


# Native counterpart of each policy: the Cache-Control directive sent with
# the request. The empty string means "send no directive".
_CACHE_CONTROL_DIRECTIVES = {
    "use_protocol_cache_policy": "",
    "reload_ignoring_local_cache_data": "no-cache",
    "reload_ignoring_local_and_remote_cache_data": "no-cache, no-store",
    "return_cache_data_else_load": "max-stale",
    "return_cache_data_dont_load": "only-if-cached, max-stale",
    "reload_revalidating_cache_data": "max-age=0, must-revalidate",
}


class CachePolicy(str, Enum):
    """Caching policies for a request, mapped 1:1 onto HTTP cache directives."""

    USE_PROTOCOL_CACHE_POLICY = "use_protocol_cache_policy"
    RELOAD_IGNORING_LOCAL_CACHE_DATA = "reload_ignoring_local_cache_data"
    RELOAD_IGNORING_LOCAL_AND_REMOTE_CACHE_DATA = "reload_ignoring_local_and_remote_cache_data"
    RETURN_CACHE_DATA_ELSE_LOAD = "return_cache_data_else_load"
    RETURN_CACHE_DATA_DONT_LOAD = "return_cache_data_dont_load"
    RELOAD_REVALIDATING_CACHE_DATA = "reload_revalidating_cache_data"

    def to_cache_control(self) -> str:
        """Return the Cache-Control directive for this policy ("" for none)."""
        return _CACHE_CONTROL_DIRECTIVES[self.value]


@dataclass(frozen=True)
class Request:
    """
    Immutable description of one HTTP call.

    Attributes:
        path: Path resolved against the client's base URL
        method: HTTP method
        parameters: Optional parameters (dataclass, pydantic model or mapping)
        parameters_encoding: How ``parameters`` are written to the request
        requires_authentication: Attach ``Authorization: Bearer <token>``
        timeout_interval: Timeout in seconds
        cache_policy: Cache policy handed to the transport
        retry_policy: Optional backoff schedule for caller-driven retries
    """

    path: str
    method: HTTPMethod
    parameters: Optional[Any] = None
    parameters_encoding: ParametersEncoding = ParametersEncoding.URL_ENCODED
    requires_authentication: bool = False
    timeout_interval: float = 30.0
    cache_policy: CachePolicy = CachePolicy.RELOAD_IGNORING_LOCAL_AND_REMOTE_CACHE_DATA
    retry_policy: Optional[RetryPolicy] = None

    def __post_init__(self) -> None:
        if not self.path or not self.path.strip("/"):
            raise ValueError("path cannot be empty")
        if self.timeout_interval <= 0:
            raise ValueError(f"timeout_interval must be positive, got {self.timeout_interval}")
        if not isinstance(self.method, str):
            raise ValueError(f"method must be a string or HTTPMethod, got {type(self.method).__name__}")
        # Accept plain strings ("GET", "json_encoded") for the enum fields
        object.__setattr__(self, "method", HTTPMethod(self.method.upper()))
        object.__setattr__(self, "parameters_encoding", ParametersEncoding(self.parameters_encoding))
        object.__setattr__(self, "cache_policy", CachePolicy(self.cache_policy))

    def with_parameters(
        self,
        parameters: Any,
        encoding: ParametersEncoding = ParametersEncoding.JSON_ENCODED,
    ) -> "Request":
        return replace(self, parameters=parameters, parameters_encoding=encoding)

    def with_authentication(self, requires_authentication: bool = True) -> "Request":
        return replace(self, requires_authentication=requires_authentication)

    def with_timeout(self, timeout_interval: float) -> "Request":
        return replace(self, timeout_interval=timeout_interval)

    def with_cache_policy(self, cache_policy: CachePolicy) -> "Request":
        return replace(self, cache_policy=cache_policy)

    def with_retry_policy(self, retry_policy: Optional[RetryPolicy]) -> "Request":
        return replace(self, retry_policy=retry_policy)
