"""
Resolution of the storage object passed in a rehydration config.
"""

import inspect
import logging
from typing import Any, Optional

from ..config import RehydratorSettings
from ..constants import DEFAULT_STORAGE_NAMESPACE
from .base import AsyncStorage
from .callback import CallbackStorageAdapter
from .file import FileStorage

logger = logging.getLogger(__name__)


class KeysAliasStorage:
    """
    View of a storage that names its enumeration method ``keys``.

    Everything except ``get_all_keys`` is delegated to the wrapped object,
    which is left untouched.
    """

    def __init__(self, storage: Any):
        self._storage = storage
        self.get_all_keys = storage.keys

    def __getattr__(self, name: str) -> Any:
        return getattr(self._storage, name)


def create_default_storage(
    namespace: str = DEFAULT_STORAGE_NAMESPACE,
    settings: Optional[RehydratorSettings] = None,
) -> FileStorage:
    """
    Create the file storage used when a config names no storage.

    Args:
        namespace: Sub-directory of the storage root
        settings: Environment settings, read fresh if not provided

    Returns:
        A storage rooted at ``settings.storage_dir / namespace``
    """
    settings = settings or RehydratorSettings()
    return FileStorage(settings.storage_dir / namespace)


def resolve_storage(storage: Any, settings: Optional[RehydratorSettings] = None) -> AsyncStorage:
    """
    Turn a configured storage into a coroutine storage.

    Args:
        storage: The configured storage, or None
        settings: Settings for the default storage

    Returns:
        A storage whose methods are coroutines
    """
    if storage is None:
        default = create_default_storage(settings=settings)
        logger.debug(f"No storage configured, using {default.directory}")
        return default

    if not hasattr(storage, "get_all_keys") and hasattr(storage, "keys"):
        storage = KeysAliasStorage(storage)

    if not inspect.iscoroutinefunction(storage.get_all_keys):
        return CallbackStorageAdapter(storage)

    return storage
