"""
Connection Registry Module

Owns the accepted client sockets and turns their byte streams into
request lines, one line per poll.

Every socket is nonblocking. Input that has not yet reached a newline
is kept in a per-connection buffer, so a command split across several
packets is reassembled across polls. Output that does not fit in the
socket send buffer is kept as well and flushed on later polls. While a
connection still has unsent output, no further requests are read from it.
"""

import itertools
import logging
import socket
from typing import Dict, List, Optional, Tuple

from ..config.settings import settings

logger = logging.getLogger(__name__)


class StaleConnectionError(LookupError):
    """Raised when replying to a connection that has been reaped."""


class Connection:
    """
    A single client socket owned by the registry.

    Attributes:
        conn_id: Stable handle used to address replies
        sock: The nonblocking client socket
        peer: Remote address, for logging
        closed: Set once the peer hung up or the socket failed
    """

    def __init__(self, conn_id: int, sock: socket.socket):
        self.conn_id = conn_id
        self.sock = sock
        self.closed = False
        try:
            self.peer = sock.getpeername()
        except OSError:
            self.peer = None
        self._inbuf = bytearray()
        self._outbuf = bytearray()

    def read_line(self) -> Optional[bytes]:
        """
        Return the next complete line, reading from the socket at most once.

        Returns:
            The line including its trailing newline, or None if no
            complete line is available yet. Sets `closed` when the peer
            has hung up or the socket failed.
        """
        line = self._take_line()
        if line is not None:
            return line

        try:
            data = self.sock.recv(settings.READ_BUFFER_SIZE)
        except BlockingIOError:
            return None
        except OSError as exc:
            logger.debug(f"Read error from {self.peer}: {exc}")
            self.closed = True
            return None

        if not data:
            # A zero-length read means the peer closed its end
            logger.debug(f"Client disconnected: {self.peer}")
            self.closed = True
            return None

        self._inbuf += data
        line = self._take_line()
        if line is None and len(self._inbuf) > settings.MAX_LINE_LENGTH:
            logger.warning(
                f"Closing {self.peer}: {len(self._inbuf)} bytes without a newline"
            )
            self.closed = True
        return line

    def _take_line(self) -> Optional[bytes]:
        end = self._inbuf.find(b"\n")
        if end < 0:
            return None
        line = bytes(self._inbuf[:end + 1])
        del self._inbuf[:end + 1]
        return line

    @property
    def pending_output(self) -> int:
        """Number of reply bytes the socket has not accepted yet."""
        return len(self._outbuf)

    def write(self, data: bytes) -> None:
        """Queue data for the peer and send as much as the socket accepts."""
        self._outbuf += data
        self.flush()

    def flush(self) -> None:
        """Send pending output without blocking."""
        while self._outbuf and not self.closed:
            try:
                sent = self.sock.send(self._outbuf)
            except BlockingIOError:
                return
            except OSError as exc:
                logger.debug(f"Write error to {self.peer}: {exc}")
                self.closed = True
                return
            del self._outbuf[:sent]

    def close(self) -> None:
        self.closed = True
        try:
            self.sock.close()
        except OSError:
            pass


class ConnectionRegistry:
    """
    The set of live client connections.

    Connections are addressed by a stable integer id handed out by
    admit(). Ids do not shift when other connections are reaped, so a
    reply always reaches the connection that sent the request, or fails
    with StaleConnectionError if that connection is gone.

    poll() scans the connections round robin starting after the one
    served last, so a busy connection cannot starve the ones admitted
    after it.
    """

    def __init__(self):
        self._connections: List[Connection] = []
        self._by_id: Dict[int, Connection] = {}
        self._ids = itertools.count(1)
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn_id: int) -> bool:
        return conn_id in self._by_id

    def admit(self, sock: socket.socket) -> int:
        """
        Take ownership of an accepted client socket.

        Args:
            sock: A connected client socket

        Returns:
            The id to use when replying to this connection
        """
        sock.setblocking(False)
        conn = Connection(next(self._ids), sock)
        self._connections.append(conn)
        self._by_id[conn.conn_id] = conn
        logger.debug(f"Client connected: {conn.peer} (id {conn.conn_id})")
        return conn.conn_id

    def poll(self) -> Optional[Tuple[bytes, int]]:
        """
        Look for one complete request line across all connections.

        Each connection is visited at most once per call. Connections
        whose peer closed are reaped before returning, whether or not a
        line was found.

        Returns:
            (line, conn_id) for the first connection with a complete
            line, or None if no connection has one.
        """
        count = len(self._connections)
        result = None
        next_start = self._cursor

        for step in range(count):
            position = (self._cursor + step) % count
            conn = self._connections[position]

            conn.flush()
            if conn.closed:
                continue
            if conn.pending_output:
                # The peer is not reading its replies; stop serving it until it does
                continue

            line = conn.read_line()
            if line is not None:
                result = (line, conn.conn_id)
                next_start = position + 1
                break

        self._reap(next_start)
        return result

    def pending_output(self, conn_id: int) -> int:
        """Number of unsent reply bytes queued for a connection."""
        conn = self._by_id.get(conn_id)
        if conn is None:
            raise StaleConnectionError(conn_id)
        return conn.pending_output

    def reply(self, conn_id: int, message: str) -> None:
        """
        Send a response line to a connection.

        Args:
            conn_id: Id returned by admit() and surfaced by poll()
            message: Response text, without the trailing newline

        Raises:
            StaleConnectionError: the connection is no longer registered
        """
        conn = self._by_id.get(conn_id)
        if conn is None:
            raise StaleConnectionError(conn_id)
        conn.write(message.encode() + b"\n")

    def close_all(self) -> None:
        """Close and forget every connection."""
        for conn in self._connections:
            conn.close()
        self._connections = []
        self._by_id.clear()
        self._cursor = 0

    def _reap(self, next_start: int) -> None:
        """Drop closed connections and keep the cursor on the same live entry."""
        live_before = sum(
            1 for conn in self._connections[:next_start] if not conn.closed
        )
        survivors = []
        for conn in self._connections:
            if conn.closed:
                conn.close()
                del self._by_id[conn.conn_id]
            else:
                survivors.append(conn)

        self._connections = survivors
        self._cursor = live_before % len(survivors) if survivors else 0
