"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Asyncio network client.

Same semantics as ``NetworkClient`` with three call styles:

- ``await client.send(...)``: suspending call
- ``client.submit(...)``: cancellable ``asyncio.Task`` resolving to the value
- ``client.publish(...)``: task delivering one completion event to callbacks

Cancelling a task cancels both the token fetch and the transport call;
``asyncio.CancelledError`` is never converted into a ``NetworkError``.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Optional, Type, TypeVar, Union, TYPE_CHECKING

from pksnetwork.core.auth import AsyncTokenProvider, TokenProvider
from pksnetwork.core.request import Request
from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.exceptions import NetworkError, NetworkErrorKind
from pksnetwork.logging_config import (
    get_logger,
    log_authentication_failure,
    log_http_request,
    log_http_response,
)
from pksnetwork.sdk.adapters.base import AsyncBaseAdapter
from pksnetwork.sdk.adapters.http import AsyncHttpAdapter
from pksnetwork.sdk.client import (
    apply_token,
    build_transport_request,
    decode_response,
    validate_base_url,
)
from pksnetwork.sdk.hooks import HookRegistry

if TYPE_CHECKING:
    from pksnetwork.config.settings import PKSNetworkConfig

logger = get_logger(__name__)

T = TypeVar("T")

AnyTokenProvider = Union[TokenProvider, AsyncTokenProvider]


class AsyncNetworkClient:
    """Asyncio HTTP client for ``Request`` descriptors.

    Quick start::

        async with AsyncNetworkClient("https://jsonplaceholder.typicode.com") as client:
            todo = await client.send(Request("todos/1", HTTPMethod.GET), Todo)

    Args:
        base_url: Base URL every request path is resolved against.
        token_provider: Sync or async token provider for authenticated requests.
        adapter: Transport adapter (defaults to ``AsyncHttpAdapter``).
        hooks: Optional hook registry.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[AnyTokenProvider] = None,
        adapter: Optional[AsyncBaseAdapter] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self._base_url = validate_base_url(base_url)
        self._token_provider = token_provider
        self._adapter = adapter or AsyncHttpAdapter()
        self._hooks = hooks or HookRegistry()
        logger.info(f"AsyncNetworkClient initialized for {self._base_url}")

    @classmethod
    def from_config(
        cls,
        config: "PKSNetworkConfig",
        token_provider: Optional[AnyTokenProvider] = None,
        adapter: Optional[AsyncBaseAdapter] = None,
    ) -> "AsyncNetworkClient":
        """Create a client from loaded configuration."""
        if adapter is None:
            adapter = AsyncHttpAdapter(
                max_connections=config.network.pool_maxsize,
                max_keepalive_connections=config.network.pool_connections,
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

    async def send(self, request: Request, response_type: Optional[Type[T]] = None) -> Optional[T]:
        """
        Send a request and return the decoded response.

        Args:
            request: Request descriptor
            response_type: Type to decode a 2xx body into, or None for no body

        Returns:
            Decoded response value, or None

        Raises:
            NetworkError: On any failure, with exactly one ``kind``
        """
        try:
            transport_request = build_transport_request(self._base_url, request)

            if request.requires_authentication:
                await self._authorize(transport_request)

            transport_request = self._hooks.fire_before_request(transport_request)
            log_http_request(
                logger,
                method=transport_request.method,
                url=transport_request.url,
                requires_authentication=request.requires_authentication,
            )

            response = await self._execute(transport_request)
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

    def submit(self, request: Request, response_type: Optional[Type[T]] = None) -> "asyncio.Task[Optional[T]]":
        """Schedule ``send`` on the running loop and return the cancellable task."""
        return asyncio.get_running_loop().create_task(self.send(request, response_type))

    def publish(
        self,
        request: Request,
        response_type: Optional[Type[T]],
        on_value: Callable[[Optional[T]], None],
        on_error: Callable[[NetworkError], None],
    ) -> "asyncio.Task[None]":
        """
        Event-stream form of ``send``.

        Exactly one of ``on_value`` / ``on_error`` is called when the call
        completes. Cancelling the returned task calls neither.
        """
        async def _run() -> None:
            try:
                value = await self.send(request, response_type)
            except NetworkError as e:
                on_error(e)
                return
            on_value(value)

        return asyncio.get_running_loop().create_task(_run())

    async def _authorize(self, transport_request: TransportRequest) -> None:
        if self._token_provider is None:
            log_authentication_failure(logger, url=transport_request.url, reason="no_token_provider")
            raise NetworkError(NetworkErrorKind.AUTHENTICATION_FAILED, "No token provider configured")

        try:
            token = self._token_provider.get_token()
            if inspect.isawaitable(token):
                token = await token
        except Exception as e:
            log_authentication_failure(
                logger, url=transport_request.url, reason="token_provider_error", error=str(e)
            )
            raise NetworkError(NetworkErrorKind.AUTHENTICATION_FAILED, f"Token provider failed: {e}") from e

        apply_token(transport_request, token)

    async def _execute(self, transport_request: TransportRequest) -> Any:
        try:
            return await self._adapter.send(transport_request)
        except NetworkError:
            raise
        except Exception as e:
            logger.error(f"Unexpected transport failure: {type(e).__name__}: {e}", exc_info=True)
            raise NetworkError(NetworkErrorKind.UNKNOWN, f"{type(e).__name__}: {e}") from e

    # -- Lifecycle ---------------------------------------------------------

    async def aclose(self) -> None:
        """Release all resources."""
        await self._adapter.aclose()
        logger.info("AsyncNetworkClient closed")

    async def __aenter__(self) -> "AsyncNetworkClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
