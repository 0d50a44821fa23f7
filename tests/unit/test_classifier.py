"""Unit tests for HTTP and transport failure classification."""

import httpx
import pytest

from hashub_vector.classifier import (
    UNKNOWN_ERROR_MESSAGE,
    classify,
    extract_message,
    parse_retry_after,
)
from hashub_vector.errors import ErrorKind, HashubVectorError


class TestTransportFailures:
    def test_timeout(self):
        err = classify(httpx.ReadTimeout("timed out"))

        assert err.kind is ErrorKind.TIMEOUT
        assert err.message == "Request timeout"
        assert err.code == "TIMEOUT_ERROR"
        assert err.status is None
        assert err.retryable

    def test_connect_timeout_is_a_timeout(self):
        assert classify(httpx.ConnectTimeout("slow")).kind is ErrorKind.TIMEOUT

    def test_connection_refused(self):
        err = classify(httpx.ConnectError("[Errno 111] Connection refused"))

        assert err.kind is ErrorKind.NETWORK
        assert err.message == "Network connection error"
        assert err.code == "NETWORK_ERROR"

    def test_other_request_error_keeps_message(self):
        err = classify(httpx.RemoteProtocolError("server disconnected"))

        assert err.kind is ErrorKind.NETWORK
        assert err.message == "server disconnected"

    def test_arbitrary_exception_without_message(self):
        err = classify(RuntimeError())

        assert err.kind is ErrorKind.NETWORK
        assert err.message == "Network error"


class TestStatusMapping:
    @pytest.mark.parametrize(
        "status,kind,code",
        [
            (401, ErrorKind.AUTHENTICATION, "AUTHENTICATION_ERROR"),
            (402, ErrorKind.QUOTA_EXCEEDED, "QUOTA_EXCEEDED_ERROR"),
            (400, ErrorKind.VALIDATION, "VALIDATION_ERROR"),
            (429, ErrorKind.RATE_LIMIT, "RATE_LIMIT_ERROR"),
            (500, ErrorKind.SERVER, "SERVER_ERROR"),
            (502, ErrorKind.SERVER, "SERVER_ERROR"),
            (503, ErrorKind.SERVER, "SERVER_ERROR"),
            (504, ErrorKind.SERVER, "SERVER_ERROR"),
        ],
    )
    def test_known_statuses(self, status, kind, code):
        err = classify(httpx.Response(status, json={"message": "boom"}))

        assert err.kind is kind
        assert err.code == code
        assert err.status == status
        assert err.message == "boom"

    def test_bad_key_message(self):
        err = classify(httpx.Response(401, json={"message": "bad key"}))

        assert err.kind is ErrorKind.AUTHENTICATION
        assert err.message == "bad key"
        assert not err.retryable

    def test_unlisted_status_is_unclassified_with_details(self):
        body = {"error": "teapot", "hint": "short and stout"}
        err = classify(httpx.Response(418, json=body))

        assert err.kind is ErrorKind.UNCLASSIFIED
        assert err.code == "API_ERROR"
        assert err.status == 418
        assert err.message == "teapot"
        assert err.details == body
        assert err.retryable

    def test_unlisted_status_with_text_body(self):
        err = classify(httpx.Response(403, text="forbidden"))

        assert err.kind is ErrorKind.UNCLASSIFIED
        assert err.message == UNKNOWN_ERROR_MESSAGE
        assert err.details == {"body": "forbidden"}

    def test_client_errors_are_not_retryable(self):
        for status in (400, 401, 402):
            assert not classify(httpx.Response(status)).retryable


class TestRateLimit:
    def test_retry_after_header(self):
        err = classify(
            httpx.Response(429, json={"message": "slow down"}, headers={"retry-after": "30"})
        )

        assert err.kind is ErrorKind.RATE_LIMIT
        assert err.retry_after == 30
        assert err.message == "slow down"

    def test_missing_retry_after(self):
        assert classify(httpx.Response(429)).retry_after is None

    def test_http_date_retry_after_is_ignored(self):
        err = classify(
            httpx.Response(429, headers={"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"})
        )

        assert err.retry_after is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("0", 0),
            (" 12 ", 12),
            ("30.5", 30),
            ("-5", None),
            ("inf", None),
            ("nan", None),
            ("abc", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_retry_after(self, value, expected):
        assert parse_retry_after(value) == expected


class TestMessageExtraction:
    def test_prefers_message_over_error(self):
        assert extract_message({"message": "m", "error": "e"}) == "m"

    def test_falls_back_to_error(self):
        assert extract_message({"error": "e"}) == "e"

    def test_empty_message_falls_through(self):
        assert extract_message({"message": "", "error": "e"}) == "e"

    @pytest.mark.parametrize("body", [None, {}, [], "text", 42])
    def test_unknown_error(self, body):
        assert extract_message(body) == UNKNOWN_ERROR_MESSAGE

    def test_non_json_body(self):
        err = classify(httpx.Response(500, text="<html>Bad Gateway</html>"))

        assert err.kind is ErrorKind.SERVER
        assert err.message == UNKNOWN_ERROR_MESSAGE


def test_classification_returns_error_without_raising():
    result = classify(httpx.Response(401, json={"message": "bad key"}))

    assert isinstance(result, HashubVectorError)
    assert str(result) == "bad key"
