"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Client lifecycle hook registry.

Lets callers observe and augment traffic without subclassing the clients.

Hook points:
- before_request: outbound ``TransportRequest``; a callback may return a replacement
- after_response: every ``TransportResponse`` together with its request
- error: every ``NetworkError`` raised by ``send``
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.exceptions import NetworkError
from pksnetwork.logging_config import get_logger

logger = get_logger(__name__)


BeforeRequestCallback = Callable[[TransportRequest], TransportRequest]
AfterResponseCallback = Callable[[TransportResponse, TransportRequest], None]
ErrorCallback = Callable[[NetworkError], None]

BEFORE_REQUEST = "before_request"
AFTER_RESPONSE = "after_response"
ERROR = "error"


class HookRegistry:
    """
    Callbacks attached to a client, run in registration order.

    A callback that raises is logged and skipped; it never fails the call
    it is observing.
    """

    def __init__(self) -> None:
        self._hooks: Dict[str, List[Callable[..., Any]]] = {
            BEFORE_REQUEST: [],
            AFTER_RESPONSE: [],
            ERROR: [],
        }

    def _register(self, hook: str, callback: Callable[..., Any]) -> None:
        self._hooks[hook].append(callback)
        logger.debug(f"Hook registered: {hook}")

    def _call(self, hook: str, callback: Callable[..., Any], *args: Any) -> Any:
        try:
            return callback(*args)
        except Exception as exc:
            logger.error(f"{hook} hook {getattr(callback, '__name__', callback)!r} failed: {exc}", exc_info=True)
            return None

    def on_before_request(self, callback: BeforeRequestCallback) -> None:
        """Run ``callback`` on each outbound request.

        Returning a ``TransportRequest`` replaces the request for the callbacks
        that follow and for the transport; any other return value is ignored.
        """
        self._register(BEFORE_REQUEST, callback)

    def on_after_response(self, callback: AfterResponseCallback) -> None:
        self._register(AFTER_RESPONSE, callback)

    def on_error(self, callback: ErrorCallback) -> None:
        self._register(ERROR, callback)

    def fire_before_request(self, request: TransportRequest) -> TransportRequest:
        for callback in self._hooks[BEFORE_REQUEST]:
            replacement = self._call(BEFORE_REQUEST, callback, request)
            if isinstance(replacement, TransportRequest):
                request = replacement
        return request

    def fire_after_response(self, response: TransportResponse, request: TransportRequest) -> None:
        for callback in self._hooks[AFTER_RESPONSE]:
            self._call(AFTER_RESPONSE, callback, response, request)

    def fire_error(self, error: NetworkError) -> None:
        for callback in self._hooks[ERROR]:
            self._call(ERROR, callback, error)
