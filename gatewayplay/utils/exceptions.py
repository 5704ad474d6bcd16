"""
Exception hierarchy and error handling utilities for gatewayplay.

Provides:
- Custom exception classes with error codes
- Error categorization (validation, upstream, transport)
- Safe error message formatting (no sensitive data leak)
- HTTP status mapping for the gateway server
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any

import httpx


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    UPSTREAM = "upstream"


class GatewayPlayError(Exception):
    """Base exception for all gatewayplay errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(GatewayPlayError):
    """Input validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class UpstreamError(GatewayPlayError):
    """The service behind the gateway could not be invoked."""

    def __init__(self, method: str, path: str, reason: str, is_timeout: bool = False):
        category = ErrorCategory.TIMEOUT if is_timeout else ErrorCategory.UPSTREAM
        super().__init__(
            reason,
            code="UPSTREAM_TIMEOUT" if is_timeout else "UPSTREAM_ERROR",
            category=category,
            details={"method": method, "path": path},
        )
        self.reason = reason


class TransportError(GatewayPlayError):
    """The gateway itself could not be reached or answered garbage."""

    def __init__(self, status_text: str, message: str):
        category = ErrorCategory.TIMEOUT if status_text == "timeout" else ErrorCategory.RETRYABLE
        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            category=category,
            details={"status_text": status_text},
        )
        self.status_text = status_text


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    exc_str = str(exc).lower()

    if isinstance(exc, GatewayPlayError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.TIMEOUT)

    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, (ConnectionError, httpx.TransportError)):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if "timeout" in exc_str or "timed out" in exc_str:
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if "connection" in exc_str or "network" in exc_str:
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False


def classify_http_status(exc: Exception) -> int:
    """Map exception to appropriate HTTP status code."""
    _, category, _ = classify_exception(exc)
    category_to_status = {
        ErrorCategory.VALIDATION: 400,
        ErrorCategory.TIMEOUT: 504,
        ErrorCategory.RETRYABLE: 503,
        ErrorCategory.UPSTREAM: 502,
    }
    return category_to_status.get(category, 500)
