"""
Storage interfaces understood by the rehydrator.
"""

from typing import Any, Callable, List, Optional, Protocol, runtime_checkable

NodeCallback = Callable[[Optional[Any], Any], None]


@runtime_checkable
class AsyncStorage(Protocol):
    """
    Coroutine-based key-value storage.

    Implementations must tolerate concurrent ``get_item`` calls, since the
    rehydrator issues every read before awaiting any of them.
    """

    async def get_all_keys(self) -> List[str]:
        """Return every key currently held by the storage."""
        ...

    async def get_item(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set_item(self, key: str, value: Any) -> None:
        ...

    async def remove_item(self, key: str) -> bool:
        ...


class CallbackStorage(Protocol):
    """
    Storage reporting results through ``callback(error, result)``.

    Each call must eventually invoke its callback; ``error`` is None on
    success.
    """

    def get_all_keys(self, callback: NodeCallback) -> None:
        ...

    def get_item(self, key: str, callback: NodeCallback) -> None:
        ...
