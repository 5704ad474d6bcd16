"""Bind-address checks for `gatewayplay serve`."""

from __future__ import annotations

import errno
import socket

WILDCARD_HOST = "0.0.0.0"


def bind_address(host: str | None, port: int) -> tuple[socket.AddressFamily, tuple[str, int]]:
    """Socket family and address uvicorn will bind for the gateway host."""
    host = host or WILDCARD_HOST
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    return family, (host, port)


def format_address(host: str | None, port: int) -> str:
    host = host or WILDCARD_HOST
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


def find_port_conflict(host: str | None, port: int) -> str | None:
    """Try the gateway's bind; return the busy address, or None when it is free."""
    family, address = bind_address(host, port)
    with socket.socket(family, socket.SOCK_STREAM) as sock:
        # uvicorn binds with SO_REUSEADDR, so sockets in TIME_WAIT do not count
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(address)
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return format_address(host, port)
            raise
    return None
