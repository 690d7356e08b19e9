"""
Storage backends and the helpers that adapt configured storages.
"""

from .base import AsyncStorage, CallbackStorage
from .callback import CallbackStorageAdapter
from .factory import KeysAliasStorage, create_default_storage, resolve_storage
from .file import FileStorage
from .memory import MemoryStorage

__all__ = [
    "AsyncStorage",
    "CallbackStorage",
    "CallbackStorageAdapter",
    "FileStorage",
    "KeysAliasStorage",
    "MemoryStorage",
    "create_default_storage",
    "resolve_storage",
]
