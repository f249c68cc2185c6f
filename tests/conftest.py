"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator

from typedkv.cache.store import KVStore
from typedkv.network.registry import ConnectionRegistry
from typedkv.network.tcp_server import KVServer
from typedkv.protocol.parser import ProtocolParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Store / Protocol Fixtures
# ============================================================================

@pytest.fixture
def store() -> KVStore:
    """Create a fresh, empty KVStore."""
    return KVStore()


@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Registry Fixtures
# ============================================================================

@pytest.fixture
def registry():
    """Create a ConnectionRegistry and close whatever it still owns afterwards."""
    reg = ConnectionRegistry()
    yield reg
    reg.close_all()


@pytest.fixture
def peer_factory(registry: ConnectionRegistry):
    """
    Factory fixture that admits one end of a socketpair to the registry.

    Returns (conn_id, peer) where peer is the blocking client-side end.

    Usage:
        def test_something(registry, peer_factory):
            conn_id, peer = peer_factory()
            peer.sendall(b"GET key\\n")
    """
    peers = []

    def factory():
        server_end, client_end = socket.socketpair()
        client_end.settimeout(1.0)
        peers.append(client_end)
        return registry.admit(server_end), client_end

    yield factory

    for peer in peers:
        peer.close()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[KVServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a KVServer on a random free port
    2. Starts its dispatch loop in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = KVServer(host='127.0.0.1', port=server_port)

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    # Cleanup
    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Usage:
        async with AsyncClient('127.0.0.1', 7878) as client:
            response = await client.send_command("SET key value")
            assert response == "None"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except Exception:
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Args:
            command: Command string (newline will be added if missing)

        Returns:
            Response string (stripped of trailing newline)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        return await self.read_response()

    async def read_response(self) -> str:
        """Read one response line."""
        response = await asyncio.wait_for(self.reader.readline(), timeout=2.0)
        return response.decode().rstrip('\n')

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("GET key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

