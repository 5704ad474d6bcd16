"""Command-line interface for gatewayplay."""
