"""
Adapter turning callback-style storages into coroutine storages.
"""

import asyncio
from typing import Any, Callable, List, Optional

from ..error import StorageError
from .base import CallbackStorage


class CallbackStorageAdapter:
    """
    Expose a ``CallbackStorage`` through the ``AsyncStorage`` interface.

    Each call settles exactly one future. The wrapped storage may invoke
    the callback synchronously, later on the loop, or from another thread;
    any invocation after the first is ignored.
    """

    def __init__(self, storage: CallbackStorage):
        self._storage = storage

    @property
    def wrapped(self) -> CallbackStorage:
        return self._storage

    async def get_all_keys(self) -> List[str]:
        keys = await self._call(self._storage.get_all_keys)
        return list(keys or [])

    async def get_item(self, key: str) -> Optional[Any]:
        return await self._call(self._storage.get_item, key)

    async def set_item(self, key: str, value: Any) -> None:
        await self._call(self._require("set_item"), key, value)

    async def remove_item(self, key: str) -> bool:
        await self._call(self._require("remove_item"), key)
        return True

    def _require(self, name: str) -> Callable[..., None]:
        method = getattr(self._storage, name, None)
        if method is None:
            raise StorageError(f"{type(self._storage).__name__} does not support {name}")
        return method

    async def _call(self, method: Callable[..., None], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(error: Optional[Any], result: Any) -> None:
            if future.done():
                return
            if error:
                future.set_exception(_as_exception(error))
            else:
                future.set_result(result)

        def callback(error: Optional[Any] = None, result: Any = None) -> None:
            loop.call_soon_threadsafe(settle, error, result)

        method(*args, callback)
        return await future


def _as_exception(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return StorageError(str(error))
