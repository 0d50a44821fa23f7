"""Exception type for the Hashub Vector client."""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Fixed taxonomy of failures surfaced by the client."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    QUOTA_EXCEEDED = "quota_exceeded"
    VALIDATION = "validation"
    SERVER = "server"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNCLASSIFIED = "unclassified"


# Stable code strings, one per kind
ERROR_CODES: dict[ErrorKind, str] = {
    ErrorKind.AUTHENTICATION: "AUTHENTICATION_ERROR",
    ErrorKind.RATE_LIMIT: "RATE_LIMIT_ERROR",
    ErrorKind.QUOTA_EXCEEDED: "QUOTA_EXCEEDED_ERROR",
    ErrorKind.VALIDATION: "VALIDATION_ERROR",
    ErrorKind.SERVER: "SERVER_ERROR",
    ErrorKind.NETWORK: "NETWORK_ERROR",
    ErrorKind.TIMEOUT: "TIMEOUT_ERROR",
    ErrorKind.UNCLASSIFIED: "API_ERROR",
}

# Client-side conditions that cannot resolve themselves on a re-attempt
NON_RETRYABLE_KINDS = frozenset(
    {ErrorKind.AUTHENTICATION, ErrorKind.QUOTA_EXCEEDED, ErrorKind.VALIDATION}
)


class HashubVectorError(Exception):
    """Error raised by every client operation.

    A single exception type tagged with an ``ErrorKind`` so callers can
    match on ``err.kind`` instead of walking a class hierarchy.

    Attributes:
        kind: Which bucket of the taxonomy the failure belongs to.
        message: Human-readable message, taken from the response when possible.
        status: HTTP status code, if a response was received.
        retry_after: Seconds the server asked us to wait (rate limits only).
        details: Decoded response body for unclassified API errors.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        retry_after: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.retry_after = retry_after
        self.details = details

    @property
    def code(self) -> str:
        """Stable machine-readable code for this error's kind."""
        return ERROR_CODES[self.kind]

    @property
    def retryable(self) -> bool:
        """Whether the request executor may re-attempt after this error."""
        return self.kind not in NON_RETRYABLE_KINDS

    def __repr__(self) -> str:
        return (
            f"HashubVectorError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status={self.status!r}, retry_after={self.retry_after!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashubVectorError):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.message == other.message
            and self.status == other.status
            and self.retry_after == other.retry_after
            and self.details == other.details
        )

    __hash__ = Exception.__hash__
