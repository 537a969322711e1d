"""
Logging configuration for PKSNetwork.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs for
tracing a logical call across retries and hooks.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional

import structlog
from structlog.types import EventDict


_correlation_id: ContextVar[Optional[str]] = ContextVar("pksnetwork_correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor stamping the active correlation ID onto each event."""
    active = _correlation_id.get()
    if active is not None:
        event_dict.setdefault("correlation_id", active)
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Make ``correlation_id`` (or a fresh UUID4 hex string) active in this context.

    Returns:
        The active correlation ID
    """
    active = correlation_id or uuid.uuid4().hex
    _correlation_id.set(active)
    return active


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """
    Tag every log event inside the block with one correlation ID.

    An ID already active in the context is reused, so nested scopes (a retry
    loop around a hook that opens its own scope) share the outer ID. The
    previous state is restored on exit.
    """
    active = _correlation_id.get()
    if active is not None and correlation_id is None:
        yield active
        return

    token = _correlation_id.set(correlation_id or uuid.uuid4().hex)
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


_SHARED_PROCESSORS = (
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    add_correlation_id,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def _build_handler(log_file: Optional[Path], numeric_level: int) -> logging.Handler:
    handler: logging.Handler
    if log_file is None:
        handler = logging.StreamHandler(sys.stderr)
    else:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Route PKSNetwork's structlog events through a single root handler.

    Calling it again replaces the previous handler, so the CLI can reconfigure
    after loading the config file.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO
        log_file: Write to this file instead of stderr
        json_format: One JSON object per line when True, console layout otherwise
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(log_file, numeric_level))

    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=log_file is None)
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a logger namespaced under ``pksnetwork.``."""
    if not name.startswith("pksnetwork"):
        name = f"pksnetwork.{name}"
    return structlog.get_logger(name)


# HTTP event helpers. Each emits one event whose name matches ``event_type``.

def _emit(logger: structlog.stdlib.BoundLogger, level: str, event_type: str, **fields: Any) -> None:
    getattr(logger, level)(event_type, event_type=event_type, **fields)


def log_http_request(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    requires_authentication: bool = False,
    **kwargs: Any,
) -> None:
    """Log an outbound request at debug level. The bearer token itself is never logged."""
    _emit(
        logger, "debug", "http_request",
        method=method, url=url, requires_authentication=requires_authentication, **kwargs,
    )


def log_http_response(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a transport response.

    2xx responses are logged at debug level, everything else at warning.

    Args:
        logger: Logger instance
        method: HTTP method
        url: Request URL
        status_code: HTTP status code received
        duration_ms: Round-trip time in milliseconds
        **kwargs: Additional context to log
    """
    level = "debug" if 200 <= status_code < 300 else "warning"
    _emit(
        logger, level, "http_response",
        method=method, url=url, status_code=status_code, duration_ms=round(duration_ms, 2), **kwargs,
    )


def log_authentication_failure(
    logger: structlog.stdlib.BoundLogger,
    url: str,
    reason: str = "unknown",
    **kwargs: Any,
) -> None:
    """
    Log why a request could not be authenticated.

    ``reason`` is one of ``no_token_provider``, ``token_provider_error``,
    ``async_token_provider`` or ``status_401``.
    """
    _emit(logger, "warning", "authentication_failure", url=url, reason=reason, **kwargs)


def log_retry_attempt(
    logger: structlog.stdlib.BoundLogger,
    path: str,
    attempt: int,
    max_retries: int,
    delay_seconds: float,
    error_kind: str,
    **kwargs: Any,
) -> None:
    _emit(
        logger, "warning", "retry_attempt",
        path=path,
        attempt=attempt,
        max_retries=max_retries,
        delay_seconds=delay_seconds,
        error_kind=error_kind,
        **kwargs,
    )
