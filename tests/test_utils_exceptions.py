"""Tests for gatewayplay.utils.exceptions module."""

from __future__ import annotations

import asyncio
import json

import httpx

from gatewayplay.utils.exceptions import (
    ErrorCategory,
    GatewayPlayError,
    TransportError,
    UpstreamError,
    ValidationError,
    classify_exception,
    classify_http_status,
    sanitize_error_message,
)


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_gatewayplay_error_to_dict(self) -> None:
        exc = GatewayPlayError("test message", code="TEST_CODE")
        assert exc.to_dict() == {
            "error": "TEST_CODE",
            "message": "test message",
            "category": ErrorCategory.FATAL.value,
            "details": {},
        }
        assert str(exc) == "[TEST_CODE] test message"

    def test_validation_error_with_field(self) -> None:
        exc = ValidationError("Invalid input", field="method")
        assert exc.code == "VALIDATION_ERROR"
        assert exc.category == ErrorCategory.VALIDATION
        assert exc.details == {"field": "method"}

    def test_upstream_error_timeout_flag(self) -> None:
        plain = UpstreamError("GET", "/", "refused")
        timed_out = UpstreamError("GET", "/", "read timed out", is_timeout=True)
        assert plain.code == "UPSTREAM_ERROR"
        assert plain.category == ErrorCategory.UPSTREAM
        assert plain.reason == "refused"
        assert timed_out.code == "UPSTREAM_TIMEOUT"
        assert timed_out.category == ErrorCategory.TIMEOUT

    def test_transport_error_keeps_status_text(self) -> None:
        exc = TransportError("parsererror", "not json")
        assert exc.status_text == "parsererror"
        assert exc.details == {"status_text": "parsererror"}
        assert TransportError("timeout", "slow").category == ErrorCategory.TIMEOUT


class TestSanitize:
    def test_redacts_tokens(self) -> None:
        out = sanitize_error_message("failed with token=abc123 and Bearer xyz.def")
        assert "abc123" not in out
        assert "xyz.def" not in out
        assert "[REDACTED]" in out

    def test_plain_message_untouched(self) -> None:
        assert sanitize_error_message("connection refused") == "connection refused"


class TestClassify:
    def test_timeouts(self) -> None:
        assert classify_exception(asyncio.TimeoutError())[1] == ErrorCategory.TIMEOUT
        assert classify_exception(httpx.ReadTimeout("slow"))[0] == "TIMEOUT"

    def test_connection_errors_are_retryable(self) -> None:
        code, category, retry = classify_exception(httpx.ConnectError("refused"))
        assert code == "CONNECTION_ERROR"
        assert category == ErrorCategory.RETRYABLE
        assert retry is True

    def test_json_and_value_errors(self) -> None:
        try:
            json.loads("{")
        except json.JSONDecodeError as exc:
            assert classify_exception(exc)[0] == "JSON_PARSE_ERROR"
        assert classify_exception(ValueError("bad"))[1] == ErrorCategory.VALIDATION

    def test_unknown_is_fatal(self) -> None:
        assert classify_exception(RuntimeError("boom")) == ("INTERNAL_ERROR", ErrorCategory.FATAL, False)

    def test_http_status_mapping(self) -> None:
        assert classify_http_status(ValidationError("x")) == 400
        assert classify_http_status(UpstreamError("GET", "/", "x")) == 502
        assert classify_http_status(UpstreamError("GET", "/", "x", is_timeout=True)) == 504
        assert classify_http_status(RuntimeError("boom")) == 500

    def test_categories_are_the_ones_the_gateway_maps(self) -> None:
        assert {c.value for c in ErrorCategory} == {"retryable", "fatal", "validation", "timeout", "upstream"}
        assert classify_http_status(FileNotFoundError("missing.json")) == 500
        assert classify_http_status(TransportError("error", "refused")) == 503
