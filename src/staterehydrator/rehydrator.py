"""
Rehydration of persisted state from a key-value storage.

The rehydrator lists every key in the storage, keeps the ones belonging
to persisted state that pass the whitelist/blacklist, reads all of them
concurrently and assembles the deserialized, transform-reversed values
into one mapping.

A failing read, an unparsable value or a raising transform only turns
that key's value into ``None``. Failing to list the keys is the one error
reported to the caller.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Union

from pydantic import ValidationError

from .config import RehydrateConfig, RehydratorSettings
from .error import ConfigError, DeserializationError, KeyEnumerationError, RehydrationError, TransformError
from .keys import KeyNamespace
from .serialization import resolve_deserializer
from .storage import AsyncStorage, resolve_storage
from .transforms import apply_outbound

StateMapping = Dict[str, Any]
CompletionCallback = Callable[[Optional[BaseException], Optional[StateMapping]], None]
ConfigLike = Union[RehydrateConfig, Mapping[str, Any]]


class RestoreBatch:
    """
    Fan-in for the reads issued by one rehydration call.

    The batch counts finished reads and resolves once every selected key
    has been recorded, whatever order the reads finish in.
    """

    def __init__(self, total: int, loop: asyncio.AbstractEventLoop):
        self.total = total
        self.completed = 0
        self.restored: StateMapping = {}
        self._future: "asyncio.Future[StateMapping]" = loop.create_future()
        self._pending: Set["asyncio.Task[Any]"] = set()

    def track(self, task: "asyncio.Task[Any]", on_done: Callable[["asyncio.Task[Any]"], None]) -> None:
        """Keep a read alive until it finishes and hand it to ``on_done``."""
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(on_done)

    def record(self, key: str, value: Any) -> None:
        self.restored[key] = value
        self.completed += 1
        if self.completed == self.total and not self._future.done():
            self._future.set_result(self.restored)

    async def wait(self) -> StateMapping:
        return await self._future


class StateRehydrator:
    """
    Rehydrates persisted state slices from a storage backend.

    Args:
        config: Rehydration options, as a ``RehydrateConfig`` or a plain mapping
        logger: Logger for per-key diagnostics; silent unless the application
            configures logging
        settings: Environment settings used to build the default storage
    """

    def __init__(
        self,
        config: ConfigLike,
        *,
        logger: Optional[logging.Logger] = None,
        settings: Optional[RehydratorSettings] = None,
    ):
        self.config = _coerce_config(config)
        self.namespace = KeyNamespace.from_config(self.config)
        self._logger = logger or logging.getLogger(__name__)
        self._settings = settings
        self._deserializer = resolve_deserializer(self.config.serialize)

    def select_keys(self, all_keys: Iterable[str]) -> List[str]:
        """
        Pick the logical keys to restore out of a storage key listing.

        Args:
            all_keys: Every key held by the storage

        Returns:
            Logical keys of persisted state allowed by the whitelist/blacklist
        """
        return [key for key in self.namespace.extract_keys(all_keys) if self.config.passes_filter(key)]

    async def rehydrate(self) -> StateMapping:
        """
        Restore the persisted state.

        Returns:
            Mapping of logical key to restored value, None for keys that failed

        Raises:
            KeyEnumerationError: If the storage could not list its keys
        """
        storage = resolve_storage(self.config.storage, self._settings)
        all_keys = await self._enumerate(storage)

        keys_to_restore = self.select_keys(all_keys)
        if not keys_to_restore:
            return {}

        loop = asyncio.get_running_loop()
        batch = RestoreBatch(len(keys_to_restore), loop)
        # Every read is issued before any of them is awaited
        for key in keys_to_restore:
            task = loop.create_task(self._read(storage, key))
            batch.track(task, functools.partial(self._on_read_done, batch, key))

        restored = await batch.wait()
        self._logger.debug(f"Rehydrated {len(restored)} keys")
        return restored

    def rehydrate_with_callback(self, on_complete: CompletionCallback) -> "asyncio.Task[None]":
        """
        Restore the persisted state and report it through a callback.

        ``on_complete(error, state)`` is called exactly once: with
        ``(None, state)`` on success and ``(error, None)`` on failure.
        Must be called while an event loop is running.

        Returns:
            The task driving the rehydration
        """
        return asyncio.get_running_loop().create_task(self._deliver(on_complete))

    async def _deliver(self, on_complete: CompletionCallback) -> None:
        try:
            restored = await self.rehydrate()
        except Exception as e:
            on_complete(e, None)
            return
        on_complete(None, restored)

    async def _enumerate(self, storage: AsyncStorage) -> List[str]:
        try:
            keys = await storage.get_all_keys()
        except Exception as e:
            self._logger.warning(f"Error in storage.get_all_keys: {e}")
            raise KeyEnumerationError(str(e), source=e) from e
        return list(keys or [])

    async def _read(self, storage: AsyncStorage, key: str) -> Any:
        return await storage.get_item(self.namespace.create_storage_key(key))

    def _on_read_done(self, batch: RestoreBatch, key: str, task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            self._logger.warning(f"Read for key {key!r} was cancelled")
            batch.record(key, None)
            return

        error = task.exception()
        if error is not None:
            self._logger.warning(f"Error restoring data for key {key!r}: {error}")
            batch.record(key, None)
            return

        batch.record(key, self._restore_value(key, task.result()))

    def _restore_value(self, key: str, serialized: Any) -> Any:
        try:
            data = self._deserializer(serialized)
        except Exception as e:
            self._log_failure(DeserializationError(key, source=e))
            return None

        try:
            return apply_outbound(self.config.transforms, data, key)
        except Exception as e:
            self._log_failure(TransformError(key, source=e))
            return None

    def _log_failure(self, error: RehydrationError) -> None:
        self._logger.warning(f"Error restoring data: {error}")


async def get_stored_state(
    config: ConfigLike,
    *,
    logger: Optional[logging.Logger] = None,
    settings: Optional[RehydratorSettings] = None,
) -> StateMapping:
    """
    Restore persisted state.

    Example:
        state = await get_stored_state({"keyPrefix": "app:", "whitelist": ["user"]})
    """
    return await StateRehydrator(config, logger=logger, settings=settings).rehydrate()


def get_stored_state_callback(
    config: ConfigLike,
    on_complete: CompletionCallback,
    *,
    logger: Optional[logging.Logger] = None,
    settings: Optional[RehydratorSettings] = None,
) -> "asyncio.Task[None]":
    """Restore persisted state, reporting ``(error, state)`` to ``on_complete`` once."""
    return StateRehydrator(config, logger=logger, settings=settings).rehydrate_with_callback(on_complete)


def _coerce_config(config: ConfigLike) -> RehydrateConfig:
    if isinstance(config, RehydrateConfig):
        return config
    try:
        return RehydrateConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
