"""
Key-Value Store Module

This module implements the in-memory storage behind the server.
"""

from typing import Dict, Optional

from .values import TypedValue


class KVStore:
    """
    In-memory mapping from text keys to typed values.

    The store is owned by the server's dispatch loop and is never
    touched from more than one thread, so it does no locking.

    Operations:
    - set: Insert or replace a value, O(1) average
    - get: Look up a value by key, O(1) average

    A lookup of an absent key returns None. That is the normal
    "missing" outcome, not an error.
    """

    def __init__(self):
        self._store: Dict[str, TypedValue] = {}

    def set(self, key: str, value: TypedValue) -> None:
        """
        Insert or replace the value stored under a key.

        Args:
            key: The key to store
            value: The typed value to associate with the key
        """
        self._store[key] = value

    def get(self, key: str) -> Optional[TypedValue]:
        """
        Retrieve the value for a given key.

        Args:
            key: The key to look up

        Returns:
            The stored value, or None if the key was never set
        """
        return self._store.get(key)
