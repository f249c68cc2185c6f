"""Cache module for typed-kv."""

from .store import KVStore
from .values import Numeric, Text, TypedValue, from_token, render

__all__ = ["KVStore", "Numeric", "Text", "TypedValue", "from_token", "render"]
