#!/usr/bin/env python3
"""
Interactive Test Client for typed-kv

A simple command-line client for manually testing the typed-kv server.

Usage:
    python scripts/client.py                  # Connect to localhost:7878
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 8080      # Connect to specific port

Commands:
    SET <key> <value>         - Store a value (numbers are stored as Numeric)
    GET <key>                 - Retrieve a value
    help                      - Show this help
    status                    - Show connection status
    reconnect                 - Reconnect to the server
    exit                      - Exit client
"""

import argparse
import socket
import sys

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


class TypedKVClient:
    """Simple blocking TCP client for typed-kv."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket = None
        self._pending = b''

    def connect(self) -> bool:
        """Connect to the server."""
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            self._pending = b''
            return True
        except OSError as e:
            print(f"Connection error: {e}")
            return False

    def disconnect(self):
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def send_command(self, command: str) -> str:
        """Send a command and receive the response line."""
        if not self.socket:
            return "ERROR: Not connected"

        try:
            if not command.endswith('\n'):
                command += '\n'

            self.socket.sendall(command.encode('utf-8'))

            while b'\n' not in self._pending:
                chunk = self.socket.recv(4096)
                if not chunk:
                    return "ERROR: Connection closed by server"
                self._pending += chunk

            line, _, self._pending = self._pending.partition(b'\n')
            return line.decode('utf-8')

        except socket.timeout:
            return "ERROR: Request timed out"
        except OSError as e:
            return f"ERROR: {e}"

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def print_help():
    """Print help message."""
    print("""
typed-kv Commands:
------------------
  SET <key> <value>         Store a value under a key
  GET <key>                 Retrieve the value for a key

Responses:
----------
  None                      SET succeeded, or GET found nothing
  Some(Numeric(1.5))        GET returned a number
  Some(Text("bar"))         GET returned text

Client Commands:
----------------
  help                      Show this help message
  exit                      Exit the client
  reconnect                 Reconnect to the server
  status                    Show connection status

Examples:
---------
  SET name alice            Store the text "alice"
  SET answer 42             Store the number 42.0
  GET answer                Prints Some(Numeric(42.0))
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for typed-kv"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=7878,
        help="Server port (default: 7878)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Socket timeout in seconds (default: 5.0)"
    )

    args = parser.parse_args()

    print("typed-kv Client")
    print("===============")
    print(f"Connecting to {args.host}:{args.port}...")

    client = TypedKVClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m typedkv.server --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()

                if not command:
                    continue

                lower_cmd = command.lower()

                if lower_cmd == "help":
                    print_help()
                    continue

                if lower_cmd in ("exit", "quit"):
                    print("Goodbye!")
                    break

                if lower_cmd == "reconnect":
                    client.disconnect()
                    if client.connect():
                        print("Reconnected!")
                    else:
                        print("Reconnection failed.")
                    continue

                if lower_cmd == "status":
                    status = "Connected" if client.socket else "Disconnected"
                    print(f"Status: {status}")
                    print(f"Server: {args.host}:{args.port}")
                    continue

                print(client.send_command(command))

            except EOFError:
                print("\nGoodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
