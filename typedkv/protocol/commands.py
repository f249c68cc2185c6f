"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from ..cache.values import TypedValue


class CommandType(Enum):
    """Enumeration of supported command types."""
    SET = auto()
    GET = auto()


class ResponseStatus(Enum):
    """Enumeration of response statuses."""
    OK = "OK"
    ERROR = "ERROR"


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command (SET or GET)
        key: The key for the operation
        value: The typed value for SET operations (None for GET)
        raw: The stripped source line, ignored when comparing commands
    """
    type: CommandType
    key: str
    value: Optional[TypedValue] = None
    raw: str = field(default="", compare=False)

    @classmethod
    def set(cls, key: str, value: TypedValue, raw: str = "") -> "Command":
        """Create a SET command."""
        return cls(type=CommandType.SET, key=key, value=value, raw=raw)

    @classmethod
    def get(cls, key: str, raw: str = "") -> "Command":
        """Create a GET command."""
        return cls(type=CommandType.GET, key=key, raw=raw)


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or ERROR
        message: Error description (ERROR responses only)
        value: The value returned by a GET, None when there is no payload
    """
    status: ResponseStatus
    message: str = ""
    value: Optional[TypedValue] = None

    @classmethod
    def ok(cls, value: Optional[TypedValue] = None) -> "Response":
        """Create a successful response, with or without a payload."""
        return cls(status=ResponseStatus.OK, value=value)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def stored(cls) -> "Response":
        """Create the response for a SET: success with no payload."""
        return cls.ok()

    @classmethod
    def missing(cls) -> "Response":
        """Create the response for a GET on an absent key."""
        return cls.ok()

    @classmethod
    def value_response(cls, value: TypedValue) -> "Response":
        """Create a GET response with a value."""
        return cls.ok(value=value)
