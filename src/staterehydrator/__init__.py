"""
StateRehydrator - restore persisted application state from a key-value storage

Reads every persisted state slice back out of an asynchronous storage,
undoing serialization and transforms, and returns them as one mapping.
Keys that fail to load come back as None; only a failure to list the
storage's keys is reported as an error.

Usage:
    from staterehydrator import MemoryStorage, get_stored_state
    import asyncio

    async def main():
        storage = MemoryStorage({"persist:@@garbage:user": '{"name": "ada"}'})
        state = await get_stored_state({"storage": storage})
        print(state["user"])

    asyncio.run(main())
"""

import logging

__version__ = "0.1.0"

from .config import RehydrateConfig, RehydratorSettings
from .constants import DEFAULT_COMMON_KEYS_PREFIX, DEFAULT_DYN_PREFIX, KEY_PREFIX
from .error import (
    ErrorKind,
    RehydrationError,
    StorageError,
    KeyEnumerationError,
    ConfigError,
    DeserializationError,
    TransformError,
)
from .keys import KeyNamespace
from .rehydrator import RestoreBatch, StateRehydrator, get_stored_state, get_stored_state_callback
from .serialization import identity_deserializer, json_deserializer, json_serializer
from .storage import (
    AsyncStorage,
    CallbackStorage,
    CallbackStorageAdapter,
    FileStorage,
    MemoryStorage,
    create_default_storage,
    resolve_storage,
)
from .transforms import FunctionTransform, Transform, apply_outbound, create_transform

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version info
    "__version__",
    # Config
    "RehydrateConfig",
    "RehydratorSettings",
    "KEY_PREFIX",
    "DEFAULT_COMMON_KEYS_PREFIX",
    "DEFAULT_DYN_PREFIX",
    # Errors
    "ErrorKind",
    "RehydrationError",
    "StorageError",
    "KeyEnumerationError",
    "ConfigError",
    "DeserializationError",
    "TransformError",
    # Rehydration
    "StateRehydrator",
    "RestoreBatch",
    "KeyNamespace",
    "get_stored_state",
    "get_stored_state_callback",
    # Serialization
    "json_deserializer",
    "json_serializer",
    "identity_deserializer",
    # Storage
    "AsyncStorage",
    "CallbackStorage",
    "CallbackStorageAdapter",
    "FileStorage",
    "MemoryStorage",
    "create_default_storage",
    "resolve_storage",
    # Transforms
    "Transform",
    "FunctionTransform",
    "create_transform",
    "apply_outbound",
]
