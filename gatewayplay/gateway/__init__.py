"""Gateway server that delegates described requests to an upstream service."""

from gatewayplay.gateway.app import create_gateway_app
from gatewayplay.gateway.delegate import GatewayDelegate, build_query_string, parse_gateway_request

__all__ = ["create_gateway_app", "GatewayDelegate", "build_query_string", "parse_gateway_request"]
