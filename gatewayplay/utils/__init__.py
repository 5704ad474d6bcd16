"""Utility functions for gatewayplay."""

from gatewayplay.utils.exceptions import (
    GatewayPlayError,
    ValidationError,
    UpstreamError,
    TransportError,
    ErrorCategory,
    classify_exception,
    classify_http_status,
    sanitize_error_message,
)

__all__ = [
    "GatewayPlayError",
    "ValidationError",
    "UpstreamError",
    "TransportError",
    "ErrorCategory",
    "classify_exception",
    "classify_http_status",
    "sanitize_error_message",
]
