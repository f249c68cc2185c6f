"""
Typed Values

Values held by the store are either numbers or text. The variant is
chosen from the literal the client sent: anything that reads as a plain
decimal number becomes Numeric, everything else stays Text.
"""

import math
import re
from dataclasses import dataclass
from typing import Union

# sign, digits with optional fraction (or a bare fraction), optional exponent
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True, eq=False)
class Numeric:
    """A 64-bit floating point value."""
    value: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Numeric):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((Numeric, self.value))


@dataclass(frozen=True)
class Text:
    """An opaque text value."""
    value: str


TypedValue = Union[Numeric, Text]


def from_token(token: str) -> TypedValue:
    """
    Build a typed value from a single protocol token.

    Args:
        token: A whitespace-free token taken from a request line

    Returns:
        Numeric if the token is a decimal literal with a finite value,
        Text(token) otherwise (including the empty string).

    Examples:
        >>> from_token("1")
        Numeric(value=1.0)
        >>> from_token("bar")
        Text(value='bar')
        >>> from_token("1e999")
        Text(value='1e999')
    """
    if _DECIMAL_RE.fullmatch(token):
        number = float(token)
        if math.isfinite(number):
            return Numeric(number)
    return Text(token)


def render(value: TypedValue) -> str:
    """Render a value the way it appears on the wire, e.g. Text("bar")."""
    if isinstance(value, Numeric):
        return f"Numeric({value.value!r})"
    escaped = value.value.replace("\\", "\\\\").replace('"', '\\"')
    return f'Text("{escaped}")'
