"""
Exception hierarchy for PKSNetwork.

All custom exceptions inherit from PKSError base class.
"""

from enum import Enum
from typing import Optional


class PKSError(Exception):
    """Base exception for all PKSNetwork errors."""
    pass


# Network Errors
class NetworkErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the network clients."""

    INVALID_URL = "invalid_url"
    REQUEST_FAILED = "request_failed"
    NO_DATA = "no_data"
    INVALID_RESPONSE = "invalid_response"
    DECODING_FAILED = "decoding_failed"
    ENCODING_FAILED = "encoding_failed"
    NO_NETWORK = "no_network"
    TIMEOUT = "timeout"
    AUTHENTICATION_FAILED = "authentication_failed"
    UNKNOWN = "unknown"


_DEFAULT_MESSAGES = {
    NetworkErrorKind.INVALID_URL: "The URL is invalid.",
    NetworkErrorKind.REQUEST_FAILED: "The network request failed.",
    NetworkErrorKind.NO_DATA: "No data was received from the server.",
    NetworkErrorKind.INVALID_RESPONSE: "The server response was invalid.",
    NetworkErrorKind.DECODING_FAILED: "The data decoding process failed.",
    NetworkErrorKind.ENCODING_FAILED: "The data encoding process failed.",
    NetworkErrorKind.NO_NETWORK: "The network is not reachable.",
    NetworkErrorKind.TIMEOUT: "The request timed out.",
    NetworkErrorKind.AUTHENTICATION_FAILED: "The authentication failed.",
    NetworkErrorKind.UNKNOWN: "An unknown error occurred.",
}


class NetworkError(PKSError):
    """
    Raised by the network clients for every failed call.

    Every failure is mapped to exactly one ``NetworkErrorKind`` before it
    leaves the client, so callers only ever need to inspect ``kind``.

    Args:
        kind: Failure kind
        message: Optional human-readable detail (defaults per kind)
        status_code: HTTP status code when a response was received
    """

    def __init__(
        self,
        kind: NetworkErrorKind,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = NetworkErrorKind(kind)
        self.status_code = status_code
        super().__init__(message or _DEFAULT_MESSAGES[self.kind])

    def __repr__(self) -> str:
        return (
            f"NetworkError(kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, message={str(self)!r})"
        )


# Configuration Errors
class ConfigurationError(PKSError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
