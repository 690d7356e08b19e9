"""
Mapping between logical state keys and storage keys.

Common keys live under ``{key_prefix}{common_keys_prefix}:`` and every
other key under ``{key_prefix}@{dyn_prefix}:``.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from .config import RehydrateConfig


@dataclass(frozen=True)
class KeyNamespace:
    """Storage key layout for one configuration."""

    key_prefix: str
    common_keys_prefix: str
    dyn_prefix: str
    common_keys: FrozenSet[str] = frozenset()

    @classmethod
    def from_config(cls, config: RehydrateConfig) -> "KeyNamespace":
        """Create the namespace described by a rehydration config."""
        return cls(
            key_prefix=config.key_prefix,
            common_keys_prefix=config.common_keys_prefix,
            dyn_prefix=config.dyn_prefix,
            common_keys=config.common_keys,
        )

    @property
    def common_prefix(self) -> str:
        return f"{self.key_prefix}{self.common_keys_prefix}:"

    @property
    def dynamic_prefix(self) -> str:
        return f"{self.key_prefix}@{self.dyn_prefix}:"

    def is_common(self, key: str) -> bool:
        return key in self.common_keys

    def create_storage_key(self, key: str) -> str:
        """
        Build the storage key for a logical key.

        Args:
            key: The logical key name

        Returns:
            The key under which the value is persisted
        """
        if self.is_common(key):
            return f"{self.common_prefix}{key}"
        return f"{self.dynamic_prefix}{key}"

    def extract_logical_key(self, storage_key: str) -> Optional[str]:
        """
        Strip the namespace prefix from a storage key.

        Args:
            storage_key: A key as returned by the storage backend

        Returns:
            The logical key, or None if the key does not belong to persisted state
        """
        common = self.common_prefix
        if storage_key.startswith(common):
            return storage_key[len(common):]
        dynamic = self.dynamic_prefix
        if storage_key.startswith(dynamic):
            return storage_key[len(dynamic):]
        return None

    def sub_namespace(self, storage_key: str) -> Optional[str]:
        """Return ``"common"``, ``"dynamic"`` or None for a foreign key."""
        if storage_key.startswith(self.common_prefix):
            return "common"
        if storage_key.startswith(self.dynamic_prefix):
            return "dynamic"
        return None

    def extract_keys(self, all_keys: Iterable[str]) -> List[str]:
        """Logical keys for every persisted-state key, in enumeration order."""
        keys = []
        for storage_key in all_keys:
            logical = self.extract_logical_key(storage_key)
            if logical is not None:
                keys.append(logical)
        return keys
