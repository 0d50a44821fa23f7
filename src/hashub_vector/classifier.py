"""Translation of HTTP and transport failures into ``HashubVectorError``."""

from typing import Any, Optional, Union

import httpx

from .errors import ErrorKind, HashubVectorError

UNKNOWN_ERROR_MESSAGE = "Unknown error"

_STATUS_KINDS: dict[int, ErrorKind] = {
    401: ErrorKind.AUTHENTICATION,
    402: ErrorKind.QUOTA_EXCEEDED,
    400: ErrorKind.VALIDATION,
    429: ErrorKind.RATE_LIMIT,
    500: ErrorKind.SERVER,
    502: ErrorKind.SERVER,
    503: ErrorKind.SERVER,
    504: ErrorKind.SERVER,
}


def classify(failure: Union[httpx.Response, BaseException]) -> HashubVectorError:
    """
    Classify a failed attempt into exactly one error kind.

    Never raises: anything that is not a response is treated as a failure
    where no response was received.

    Args:
        failure: A non-2xx ``httpx.Response`` or the exception raised while
            sending the request.

    Returns:
        The classified error (not raised).
    """
    if isinstance(failure, httpx.Response):
        return classify_response(failure)
    return classify_transport_error(failure)


def classify_transport_error(exc: BaseException) -> HashubVectorError:
    """Classify a failure where no HTTP response was received."""
    if isinstance(exc, httpx.TimeoutException):
        return HashubVectorError(ErrorKind.TIMEOUT, "Request timeout")
    if isinstance(exc, httpx.ConnectError):
        return HashubVectorError(ErrorKind.NETWORK, "Network connection error")
    return HashubVectorError(ErrorKind.NETWORK, str(exc) or "Network error")


def classify_response(response: httpx.Response) -> HashubVectorError:
    """Classify an HTTP error response by status code."""
    status = response.status_code
    body = _decode_body(response)
    message = extract_message(body)
    kind = _STATUS_KINDS.get(status)

    if kind is None:
        details = body if isinstance(body, dict) else {"body": _safe_text(response)}
        return HashubVectorError(
            ErrorKind.UNCLASSIFIED, message, status=status, details=details
        )
    if kind is ErrorKind.RATE_LIMIT:
        return HashubVectorError(
            kind,
            message,
            status=status,
            retry_after=parse_retry_after(response.headers.get("retry-after")),
        )
    return HashubVectorError(kind, message, status=status)


def extract_message(body: Any) -> str:
    """Prefer ``message``, then ``error``, then a fixed fallback."""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return UNKNOWN_ERROR_MESSAGE


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parse a ``retry-after`` header given in seconds, truncating fractions.

    HTTP-date values, negative numbers and garbage are ignored rather than
    guessed at.
    """
    if value is None:
        return None
    try:
        seconds = int(float(value.strip()))
    except (ValueError, OverflowError):
        return None
    return seconds if seconds >= 0 else None


def _safe_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (ValueError, httpx.ResponseNotRead):
        return ""


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, httpx.ResponseNotRead):
        return None
