"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Blocking network client.

``NetworkClient.send`` turns a ``Request`` into a transport call, applies
authentication, and either returns the decoded response or raises a
``NetworkError``. Every failure path resolves to exactly one
``NetworkErrorKind``; transport and serialization exceptions never escape.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional, Type, TypeVar, TYPE_CHECKING
from urllib.parse import urlsplit

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from pksnetwork.core.auth import TokenProvider
from pksnetwork.core.encoder import ParameterEncoder
from pksnetwork.core.request import Request
from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.exceptions import InvalidConfigurationError, NetworkError, NetworkErrorKind
from pksnetwork.logging_config import (
    get_logger,
    log_authentication_failure,
    log_http_request,
    log_http_response,
)
from pksnetwork.sdk.adapters.base import BaseAdapter
from pksnetwork.sdk.adapters.http import HttpAdapter
from pksnetwork.sdk.hooks import HookRegistry

if TYPE_CHECKING:
    from pksnetwork.config.settings import PKSNetworkConfig

logger = get_logger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Helpers shared by the blocking and async clients
# ---------------------------------------------------------------------------

def validate_base_url(base_url: str) -> str:
    """Return ``base_url`` without trailing slashes, or raise if it is unusable."""
    if not base_url:
        raise InvalidConfigurationError("base_url is required")
    return base_url.rstrip("/")


def build_transport_request(base_url: str, request: Request) -> TransportRequest:
    """
    Build the transport request for ``request`` (steps before authentication).

    Resolves the path against ``base_url``, applies method, timeout and the
    cache directive, then encodes parameters.

    Raises:
        NetworkError: INVALID_URL or ENCODING_FAILED
    """
    try:
        parts = urlsplit(base_url)
    except ValueError as e:
        raise NetworkError(NetworkErrorKind.INVALID_URL, f"Invalid base URL '{base_url}': {e}") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise NetworkError(NetworkErrorKind.INVALID_URL, f"Invalid base URL '{base_url}'")

    transport_request = TransportRequest(
        method=request.method.value,
        url=f"{base_url}/{request.path.lstrip('/')}",
        timeout=request.timeout_interval,
    )

    cache_control = request.cache_policy.to_cache_control()
    if cache_control:
        transport_request.set_header("Cache-Control", cache_control)

    if request.parameters is not None:
        ParameterEncoder.encode(transport_request, request.parameters, request.parameters_encoding)

    return transport_request


def decode_response(response: Any, response_type: Optional[Any]) -> Any:
    """
    Classify a transport response and decode its body.

    A 2xx response with an empty or whitespace-only body is NO_DATA when a
    ``response_type`` is given, never DECODING_FAILED.

    Args:
        response: Whatever the adapter returned
        response_type: Type to decode into, or None to skip decoding

    Returns:
        Decoded value, or None when ``response_type`` is None

    Raises:
        NetworkError: INVALID_RESPONSE, NO_DATA, DECODING_FAILED,
            AUTHENTICATION_FAILED or REQUEST_FAILED
    """
    if not isinstance(response, TransportResponse) or not 100 <= response.status_code <= 599:
        raise NetworkError(NetworkErrorKind.INVALID_RESPONSE)

    status_code = response.status_code
    if 200 <= status_code <= 299:
        if response_type is None:
            return None
        if not response.body or not response.body.strip():
            raise NetworkError(NetworkErrorKind.NO_DATA, status_code=status_code)
        try:
            return TypeAdapter(response_type).validate_json(response.body)
        except (ValidationError, PydanticUserError, TypeError, ValueError) as e:
            logger.error(f"Failed to decode response into {response_type!r}: {e}")
            raise NetworkError(
                NetworkErrorKind.DECODING_FAILED,
                f"Failed to decode response: {e}",
                status_code=status_code,
            ) from e

    if status_code == 401:
        raise NetworkError(NetworkErrorKind.AUTHENTICATION_FAILED, status_code=status_code)

    raise NetworkError(
        NetworkErrorKind.REQUEST_FAILED,
        f"Request failed with status {status_code}",
        status_code=status_code,
    )


def apply_token(transport_request: TransportRequest, token: Any) -> None:
    if not isinstance(token, str):
        raise NetworkError(
            NetworkErrorKind.AUTHENTICATION_FAILED,
            f"Token provider returned {type(token).__name__}, expected str",
        )
    transport_request.set_header("Authorization", f"Bearer {token}")


# ---------------------------------------------------------------------------
# NetworkClient
# ---------------------------------------------------------------------------

class NetworkClient:
    """Blocking HTTP client for ``Request`` descriptors.

    Quick start::

        client = NetworkClient("https://jsonplaceholder.typicode.com")
        todo = client.send(Request("todos/1", HTTPMethod.GET), Todo)

    The client holds only immutable configuration plus the adapter's
    connection pool, so one instance can serve many threads.

    Args:
        base_url: Base URL every request path is resolved against.
        token_provider: Supplies bearer tokens for authenticated requests.
        adapter: Transport adapter (defaults to a pooled ``HttpAdapter``).
        hooks: Optional hook registry.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        adapter: Optional[BaseAdapter] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self._base_url = validate_base_url(base_url)
        self._token_provider = token_provider
        self._adapter = adapter or HttpAdapter()
        self._hooks = hooks or HookRegistry()
        logger.info(f"NetworkClient initialized for {self._base_url}")

    @classmethod
    def from_config(
        cls,
        config: "PKSNetworkConfig",
        token_provider: Optional[TokenProvider] = None,
        adapter: Optional[BaseAdapter] = None,
    ) -> "NetworkClient":
        """Create a client from loaded configuration."""
        if adapter is None:
            adapter = HttpAdapter(
                pool_connections=config.network.pool_connections,
                pool_maxsize=config.network.pool_maxsize,
                default_headers={"User-Agent": config.network.user_agent},
            )
        return cls(
            base_url=config.network.base_url,
            token_provider=token_provider,
            adapter=adapter,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    def send(self, request: Request, response_type: Optional[Type[T]] = None) -> Optional[T]:
        """
        Send a request and return the decoded response.

        Args:
            request: Request descriptor
            response_type: Type to decode a 2xx body into. Pass None for calls
                without an expected body (e.g. DELETE); None is then returned.

        Returns:
            Decoded response value, or None

        Raises:
            NetworkError: On any failure, with exactly one ``kind``
        """
        try:
            transport_request = build_transport_request(self._base_url, request)

            if request.requires_authentication:
                self._authorize(transport_request)

            transport_request = self._hooks.fire_before_request(transport_request)
            log_http_request(
                logger,
                method=transport_request.method,
                url=transport_request.url,
                requires_authentication=request.requires_authentication,
            )

            response = self._execute(transport_request)
            if isinstance(response, TransportResponse):
                log_http_response(
                    logger,
                    method=transport_request.method,
                    url=transport_request.url,
                    status_code=response.status_code,
                    duration_ms=response.elapsed_ms,
                )
                if response.status_code == 401:
                    log_authentication_failure(logger, url=transport_request.url, reason="status_401")
                self._hooks.fire_after_response(response, transport_request)

            return decode_response(response, response_type)

        except NetworkError as e:
            self._hooks.fire_error(e)
            raise

    def _authorize(self, transport_request: TransportRequest) -> None:
        if self._token_provider is None:
            log_authentication_failure(logger, url=transport_request.url, reason="no_token_provider")
            raise NetworkError(NetworkErrorKind.AUTHENTICATION_FAILED, "No token provider configured")

        try:
            token = self._token_provider.get_token()
        except Exception as e:
            log_authentication_failure(
                logger, url=transport_request.url, reason="token_provider_error", error=str(e)
            )
            raise NetworkError(NetworkErrorKind.AUTHENTICATION_FAILED, f"Token provider failed: {e}") from e

        if inspect.isawaitable(token):
            # An async provider cannot be driven from the blocking client
            if inspect.iscoroutine(token):
                token.close()
            log_authentication_failure(logger, url=transport_request.url, reason="async_token_provider")
            raise NetworkError(
                NetworkErrorKind.AUTHENTICATION_FAILED,
                "Async token providers require AsyncNetworkClient",
            )

        apply_token(transport_request, token)

    def _execute(self, transport_request: TransportRequest) -> Any:
        try:
            return self._adapter.send(transport_request)
        except NetworkError:
            raise
        except Exception as e:
            logger.error(f"Unexpected transport failure: {type(e).__name__}: {e}", exc_info=True)
            raise NetworkError(NetworkErrorKind.UNKNOWN, f"{type(e).__name__}: {e}") from e

    # -- Lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Release all resources."""
        self._adapter.close()
        logger.info("NetworkClient closed")

    def __enter__(self) -> "NetworkClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
