"""
TCP Server Module

This module implements the dispatch loop of the typed-kv server.

The server runs on a single thread inside the asyncio event loop but
does not hand sockets to asyncio. The listener and every client socket
are nonblocking, and one loop cooperatively multiplexes them:

- accept a pending connection and admit it to the registry, or
- when no connection is pending, ask the registry for one request
  line, execute it against the store and queue the reply, or
- when nothing is pending at all, sleep for POLL_INTERVAL.

At most one line is handled per iteration and its reply is queued
before the next poll, so responses on a connection come back in the
order the requests were sent.
"""

import asyncio
import logging
import socket
from typing import Optional

from ..cache.store import KVStore
from ..config.settings import settings
from ..protocol.commands import Command, CommandType, Response
from ..protocol.errors import ParseError
from ..protocol.parser import ProtocolParser
from .registry import ConnectionRegistry, StaleConnectionError

logger = logging.getLogger(__name__)


class KVServer:
    """
    Single-threaded TCP server for the typed-kv store.

    Usage:
        server = KVServer(host='127.0.0.1', port=7878)
        await server.start()  # Runs until stop() is called

    Attributes:
        host: Server bind address (e.g., '127.0.0.1')
        port: Server port number; updated to the bound port after start
        store: The KVStore instance shared by all connections
        parser: The ProtocolParser for parsing commands
        registry: The ConnectionRegistry holding client sockets
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: KVStore = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings, 0 for any free port)
            store: KVStore instance (creates new one if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else KVStore()
        self.parser = ProtocolParser()
        self.registry = ConnectionRegistry()

        # Server state
        self._listener: Optional[socket.socket] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0

    def _bind(self) -> socket.socket:
        """Create the nonblocking listening socket. Errors propagate."""
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((self.host, self.port))
            listener.listen(settings.LISTEN_BACKLOG)
            listener.setblocking(False)
        except OSError:
            listener.close()
            raise
        return listener

    async def start(self) -> None:
        """
        Bind the listener and run the dispatch loop until stop().

        Raises:
            OSError: the address cannot be bound, or the listener
                fails with anything other than would-block
        """
        if self._running:
            return

        self._listener = self._bind()
        self.port = self._listener.getsockname()[1]
        self._running = True
        logger.info(f"Serving on {self._listener.getsockname()}")

        try:
            while self._running:
                if self._step():
                    # Let other coroutines on this loop run between requests
                    await asyncio.sleep(0)
                else:
                    await asyncio.sleep(settings.POLL_INTERVAL)
        except asyncio.CancelledError:
            logger.debug("Server start cancelled")
        finally:
            self._shutdown()

    def _step(self) -> bool:
        """
        Run one iteration of the dispatch loop.

        Returns:
            True if a connection was admitted or a request was served,
            False if there was nothing to do.
        """
        try:
            client, _ = self._listener.accept()
        except BlockingIOError:
            pass
        else:
            self.registry.admit(client)
            self._connection_count += 1
            return True

        request = self.registry.poll()
        if request is None:
            return False

        line, conn_id = request
        response = self.handle_line(line)
        try:
            self.registry.reply(conn_id, self.parser.render_response(response))
        except StaleConnectionError:
            logger.debug(f"Dropping reply to reaped connection {conn_id}")
        return True

    def handle_line(self, line: bytes) -> Response:
        """
        Parse and execute one raw request line.

        Args:
            line: Raw bytes of the request, with or without the newline

        Returns:
            Response to send back; parse errors become error responses
        """
        try:
            raw = line.decode()
        except UnicodeDecodeError:
            return Response.error("Invalid encoding")

        try:
            command = self.parser.parse_request(raw)
        except ParseError as exc:
            logger.debug(f"Rejected request {raw!r}: {exc.message}")
            return Response.error(exc.message)

        self._total_requests += 1
        return self._execute_command(command)

    def _execute_command(self, command: Command) -> Response:
        """
        Execute a parsed command on the store.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        if command.type == CommandType.SET:
            self.store.set(command.key, command.value)
            return Response.stored()

        if command.type == CommandType.GET:
            value = self.store.get(command.key)
            return Response.value_response(value) if value is not None else Response.missing()

        raise ValueError(f"Unhandled command type: {command.type}")

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        If the dispatch loop is running it exits at its next iteration
        and closes the listener and every client connection itself.
        """
        if self._running:
            self._running = False
        else:
            self._shutdown()

    def _shutdown(self) -> None:
        self._running = False
        if self._listener is not None:
            self._listener.close()
            self._listener = None
        self.registry.close_all()

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server stats including connection and
            request counts.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "active_connections": len(self.registry),
            "total_requests": self._total_requests,
        }


async def run_server(host: str = None, port: int = None) -> None:
    """
    Convenience function to create and run the server.

    Args:
        host: Bind address (default from settings)
        port: Port number (default from settings)

    Usage:
        asyncio.run(run_server(port=7878))
    """
    server = KVServer(host=host, port=port)

    try:
        await server.start()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()
