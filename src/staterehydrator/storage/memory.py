"""
In-memory storage backend.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional


class MemoryStorage:
    """A dict-backed storage, mostly useful for tests and short-lived processes."""

    def __init__(self, items: Optional[Mapping[str, Any]] = None):
        self._store: Dict[str, Any] = dict(items or {})
        self._lock = asyncio.Lock()

    async def get_all_keys(self) -> List[str]:
        async with self._lock:
            return list(self._store)

    async def get_item(self, key: str) -> Optional[Any]:
        """
        Retrieve a value by its key.

        Args:
            key: The storage key

        Returns:
            The stored value, or None if the key is absent
        """
        async with self._lock:
            return self._store.get(key)

    async def set_item(self, key: str, value: Any) -> None:
        async with self._lock:
            self._store[key] = value

    async def remove_item(self, key: str) -> bool:
        """
        Remove an entry by its key.

        Returns:
            True if the entry was removed, False if it didn't exist
        """
        async with self._lock:
            if key in self._store:
                del self._store[key]
                return True
            return False

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
