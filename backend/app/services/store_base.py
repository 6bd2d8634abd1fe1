"""
Notes API — Abstract Document Store Interface
===============================================

What:  Abstract base class defining the contract for the remote tree store.
Why:   The note service talks to this interface, not to Firebase directly, so
       tests can inject an in-memory fake and the backend can be swapped.
How:   Concrete implementations inherit from DocumentStore and implement
       every abstract method.
Who:   Called by NoteService.

Paths are slash-separated keys into a JSON tree ("notes", "notes/<key>").
"""

from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    """
    Abstract interface for a tree-structured key/value document store.

    Contract:
        - Every method is a single round trip to the store
        - All implementation-specific errors are wrapped in StoreError,
          keeping the original error message
        - get() returns None for a path that holds no data
    """

    @abstractmethod
    async def generate_key(self, path: str) -> str:
        """
        Reserve a new unique child key under `path`.

        Keys are generated by the store and sort chronologically.

        Raises:
            StoreError: Key generation failed.
        """

    @abstractmethod
    async def get(self, path: str) -> Any:
        """
        Read the value at `path`.

        Returns:
            The decoded JSON value, or None if nothing is stored there.

        Raises:
            StoreError: The read failed.
        """

    @abstractmethod
    async def set(self, path: str, value: Any) -> None:
        """
        Overwrite the value at `path` (full replace, last writer wins).

        Raises:
            StoreError: The write failed.
        """

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Remove the value at `path`. Deleting an empty path succeeds.

        Raises:
            StoreError: The delete failed.
        """

    @abstractmethod
    async def health_check(self, path: str) -> bool:
        """
        Lightweight reachability check.

        Returns:
            True if a shallow read of `path` succeeds, False otherwise.
            Never raises.
        """
