"""Protocol module for typed-kv."""

from .commands import Command, CommandType, Response, ResponseStatus
from .errors import EmptyStatement, InvalidStatement, ParseError, UnknownCommand
from .parser import ProtocolParser, parse

__all__ = [
    "Command",
    "CommandType",
    "Response",
    "ResponseStatus",
    "ParseError",
    "EmptyStatement",
    "InvalidStatement",
    "UnknownCommand",
    "ProtocolParser",
    "parse",
]
