"""Errors raised while parsing request lines."""


class ParseError(Exception):
    """Base class for request lines that do not form a valid command."""

    message = "Invalid request"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class EmptyStatement(ParseError):
    """The line holds no tokens."""

    message = "Empty expression"


class InvalidStatement(ParseError):
    """A known command was given the wrong number of arguments."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid number of arguments: {reason}")


class UnknownCommand(ParseError):
    """The first token is not a known command keyword."""

    message = "Unknown command or invalid number of arguments"
