"""
Protocol Parser Module

This module handles parsing of request lines into commands and
formatting of responses into wire lines.
"""

import re
from typing import List

from .commands import Command, Response, ResponseStatus
from .errors import EmptyStatement, InvalidStatement, UnknownCommand
from ..cache.values import from_token, render

# Only these characters separate tokens; any other character belongs to a token
_SEPARATORS = " \t\r\n"
_SEPARATOR_RE = re.compile(r"[ \t\r\n]+")


class ProtocolParser:
    """
    Parser for the typed-kv text protocol.

    Protocol Format:
        Request:  <COMMAND> [ARGS...]\\n
        Response: <RENDERED RESULT>\\n

    Commands:
        SET <key> <value>  -> None
        GET <key>          -> Some(Numeric(1.0)) | Some(Text("bar")) | None

    Tokens are separated by runs of space, tab, CR and LF. Keywords are
    case-insensitive; keys and values keep their case. Only the value
    of a SET is type-inferred, a key is always text.
    """

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request line into a Command object.

        Args:
            data: Raw request string (may include trailing newline)

        Returns:
            The parsed Command.

        Raises:
            EmptyStatement: the line holds no tokens
            InvalidStatement: SET or GET with the wrong number of arguments
            UnknownCommand: the first token is not SET or GET

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("SET foo 1")
            >>> cmd.key
            'foo'
            >>> cmd.value
            Numeric(value=1.0)
        """
        raw = data.strip(_SEPARATORS)
        parts = _SEPARATOR_RE.split(raw) if raw else []
        if not parts:
            raise EmptyStatement()

        command_name = parts[0].lower()

        if command_name == "set":
            return self._parse_set(parts, raw)
        if command_name == "get":
            return self._parse_get(parts, raw)

        raise UnknownCommand()

    def _parse_set(self, parts: List[str], raw: str) -> Command:
        """
        Parse a SET command.

        Format: SET <key> <value>
        """
        if len(parts) != 3:
            raise InvalidStatement("Expecting 2 arguments")

        key, value = parts[1], parts[2]
        return Command.set(key, from_token(value), raw=raw)

    def _parse_get(self, parts: List[str], raw: str) -> Command:
        """
        Parse a GET command.

        Format: GET <key>
        """
        if len(parts) != 2:
            raise InvalidStatement("Expecting 1 argument")

        return Command.get(parts[1], raw=raw)

    def render_response(self, response: Response) -> str:
        """Render a Response as a single line, without the newline."""
        if response.status == ResponseStatus.ERROR:
            return response.message

        if response.value is None:
            return "None"
        return f"Some({render(response.value)})"

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Args:
            response: Response object to format

        Returns:
            Formatted response string WITH trailing newline.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.stored())
            'None\\n'
            >>> parser.format_response(Response.error("Empty expression"))
            'Empty expression\\n'
        """
        return f"{self.render_response(response)}\n"


_default_parser = ProtocolParser()


def parse(line: str) -> Command:
    """Parse a request line with a shared parser instance."""
    return _default_parser.parse_request(line)
