"""Bridge process lifecycle helpers."""

from __future__ import annotations

__all__ = [
    "bind_listen_socket",
    "is_port_in_use",
    "port_in_use_message",
]

import errno
import socket

from lcu_bridge.constants import BRIDGE_HOST, HTTP_LISTEN_BACKLOG


def is_port_in_use(port: int) -> bool:
    """Check if TCP port is accepting connections on loopback.

    Args:
        port: TCP port number to check.

    Returns:
        True if port is in use, False otherwise.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex((BRIDGE_HOST, port)) == 0


def bind_listen_socket(port: int) -> socket.socket:
    """Bind a non-blocking listening socket on loopback.

    Raises:
        RuntimeError: If the port is already in use.
        OSError: For other bind failures.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((BRIDGE_HOST, port))
    except OSError as e:
        sock.close()
        if e.errno == errno.EADDRINUSE:
            raise RuntimeError(port_in_use_message(port)) from e
        raise
    sock.listen(HTTP_LISTEN_BACKLOG)
    sock.setblocking(False)
    return sock


def port_in_use_message(port: int) -> str:
    return f"Port {port} is already in use.\nAnother process is using this port. Use --port to specify a different port."
