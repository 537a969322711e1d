"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Retry policy and caller-driven retry loops for PKSNetwork.

The network clients never retry on their own. A ``RetryPolicy`` attached to
a request only describes the backoff schedule; ``send_with_retry`` and
``async_send_with_retry`` are the orchestrators that apply it.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, Optional, TYPE_CHECKING

from pksnetwork.exceptions import NetworkError, NetworkErrorKind
from pksnetwork.logging_config import correlation_scope, get_logger, log_retry_attempt

if TYPE_CHECKING:
    from pksnetwork.core.request import Request

logger = get_logger(__name__)


DEFAULT_RETRYABLE_KINDS: FrozenSet[NetworkErrorKind] = frozenset({
    NetworkErrorKind.NO_NETWORK,
    NetworkErrorKind.TIMEOUT,
    NetworkErrorKind.REQUEST_FAILED,
})


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff schedule for a request.

    Attributes:
        max_retry_count: Maximum number of retries after the initial attempt
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any single delay, in seconds
        scale_factor: Multiplier applied per attempt
    """

    max_retry_count: int
    base_delay: float
    max_delay: float
    scale_factor: float

    def __post_init__(self) -> None:
        if self.max_retry_count < 0:
            raise ValueError(f"max_retry_count must be >= 0, got {self.max_retry_count}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.max_delay < 0:
            raise ValueError(f"max_delay must be >= 0, got {self.max_delay}")

    def delay(self, attempt: int) -> float:
        """
        Calculate the delay for a given retry attempt.

        ``delay(attempt) = min(base_delay * scale_factor ** (attempt - 1), max_delay)``

        Args:
            attempt: Retry attempt number, starting at 1

        Returns:
            Delay in seconds

        Raises:
            ValueError: If attempt is lower than 1
        """
        if attempt < 1:
            raise ValueError(f"attempt must be >= 1, got {attempt}")
        try:
            exponential_delay = self.base_delay * (self.scale_factor ** (attempt - 1))
        except OverflowError:
            return self.max_delay
        return min(exponential_delay, self.max_delay)


def _should_retry(
    error: NetworkError,
    attempt: int,
    policy: Optional[RetryPolicy],
    retry_on: FrozenSet[NetworkErrorKind],
) -> bool:
    return policy is not None and attempt <= policy.max_retry_count and error.kind in retry_on


def send_with_retry(
    client: Any,
    request: "Request",
    response_type: Any = None,
    retry_on: Iterable[NetworkErrorKind] = DEFAULT_RETRYABLE_KINDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """
    Send a request through a blocking client, retrying per ``request.retry_policy``.

    Args:
        client: ``NetworkClient`` (anything with a matching ``send``)
        request: Request to send
        response_type: Type to decode the response into, or None for no body
        retry_on: Error kinds that qualify for a retry
        sleep: Sleep function, injectable for tests

    Returns:
        Decoded response value (or None)

    Raises:
        NetworkError: The last error once retries are exhausted or the error
            does not qualify for a retry

    Example:
        policy = RetryPolicy(max_retry_count=3, base_delay=1, max_delay=30, scale_factor=2)
        request = Request("todos/1", HTTPMethod.GET, retry_policy=policy)
        todo = send_with_retry(client, request, Todo)
    """
    retry_on = frozenset(retry_on)
    policy = request.retry_policy
    attempt = 0

    with correlation_scope():
        while True:
            try:
                return client.send(request, response_type)
            except NetworkError as e:
                attempt += 1
                if not _should_retry(e, attempt, policy, retry_on):
                    if policy is not None and attempt > policy.max_retry_count:
                        logger.error(
                            f"Permanent failure for {request.path} after {attempt} attempts: {e.kind.value}"
                        )
                    raise

                delay = policy.delay(attempt)
                log_retry_attempt(
                    logger,
                    path=request.path,
                    attempt=attempt,
                    max_retries=policy.max_retry_count,
                    delay_seconds=delay,
                    error_kind=e.kind.value,
                )
                sleep(delay)


async def async_send_with_retry(
    client: Any,
    request: "Request",
    response_type: Any = None,
    retry_on: Iterable[NetworkErrorKind] = DEFAULT_RETRYABLE_KINDS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """
    Async counterpart of ``send_with_retry`` for ``AsyncNetworkClient``.

    Cancellation during the backoff sleep or the call itself propagates
    to the caller unchanged.
    """
    retry_on = frozenset(retry_on)
    policy = request.retry_policy
    attempt = 0

    with correlation_scope():
        while True:
            try:
                return await client.send(request, response_type)
            except NetworkError as e:
                attempt += 1
                if not _should_retry(e, attempt, policy, retry_on):
                    if policy is not None and attempt > policy.max_retry_count:
                        logger.error(
                            f"Permanent failure for {request.path} after {attempt} attempts: {e.kind.value}"
                        )
                    raise

                delay = policy.delay(attempt)
                log_retry_attempt(
                    logger,
                    path=request.path,
                    attempt=attempt,
                    max_retries=policy.max_retry_count,
                    delay_seconds=delay,
                    error_kind=e.kind.value,
                )
                await sleep(delay)
