"""Network module for typed-kv."""

from .registry import Connection, ConnectionRegistry, StaleConnectionError
from .tcp_server import KVServer, run_server

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "StaleConnectionError",
    "KVServer",
    "run_server",
]
