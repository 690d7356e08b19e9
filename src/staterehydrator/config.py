"""
Configuration module for the rehydrator.

``RehydrateConfig`` holds the options for a single rehydration call and
``RehydratorSettings`` holds process-wide defaults read from the
environment.
"""

from pathlib import Path
from typing import Any, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_COMMON_KEYS_PREFIX, DEFAULT_DYN_PREFIX, KEY_PREFIX


class RehydratorSettings(BaseSettings):
    """Environment defaults, read from ``STATE_REHYDRATOR_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="STATE_REHYDRATOR_")

    storage_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "share" / "state-rehydrator",
        description="Root directory of the default file storage",
    )
    key_prefix: str = Field(default=KEY_PREFIX, description="Key prefix used when none is configured")
    log_level: str = Field(default="WARNING", description="Log level for the command line tool")


class RehydrateConfig(BaseModel):
    """
    Options for one rehydration call.

    Field names are snake_case, but the camelCase option names
    (``keyPrefix``, ``commonKeys``, ``commonKeysPrefix``, ``dynPrefix``)
    are accepted as well so that existing option dicts can be validated
    as they are.

    Attributes:
        storage: Storage backend, or None for the default local file storage
        serialize: When explicitly False, stored values are used as they are
        blacklist: Logical keys never restored
        whitelist: When non-empty, the only logical keys restored
        transforms: Objects exposing ``out(state, key)``, in registration order
        key_prefix: Namespace prefix of every persisted key
        common_keys: Logical keys stored under the common sub-namespace
        common_keys_prefix: Label of the common sub-namespace
        dyn_prefix: Label of the dynamic sub-namespace
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    storage: Optional[Any] = None
    serialize: bool = True
    blacklist: FrozenSet[str] = Field(default_factory=frozenset)
    whitelist: Optional[FrozenSet[str]] = None
    transforms: Tuple[Any, ...] = ()
    key_prefix: str = KEY_PREFIX
    common_keys: FrozenSet[str] = Field(default_factory=frozenset)
    common_keys_prefix: str = DEFAULT_COMMON_KEYS_PREFIX
    dyn_prefix: str = DEFAULT_DYN_PREFIX

    @field_validator("serialize", mode="before")
    @classmethod
    def _explicit_false_only(cls, value: Any) -> Any:
        # Only False itself turns JSON parsing off
        return value is not False

    @field_validator("blacklist", "common_keys", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    @field_validator("whitelist", mode="before")
    @classmethod
    def _falsy_whitelist(cls, value: Any) -> Any:
        # False, None and empty collections all mean "no restriction"
        return value if value else None

    @field_validator("key_prefix", mode="before")
    @classmethod
    def _default_key_prefix(cls, value: Any) -> Any:
        # An explicit empty prefix is kept
        return KEY_PREFIX if value is None else value

    @field_validator("common_keys_prefix", mode="before")
    @classmethod
    def _default_common_keys_prefix(cls, value: Any) -> Any:
        return value or DEFAULT_COMMON_KEYS_PREFIX

    @field_validator("dyn_prefix", mode="before")
    @classmethod
    def _default_dyn_prefix(cls, value: Any) -> Any:
        return value or DEFAULT_DYN_PREFIX

    @field_validator("transforms", mode="before")
    @classmethod
    def _check_transforms(cls, value: Any) -> Any:
        if value is None:
            return ()
        for index, transform in enumerate(value):
            if not callable(getattr(transform, "out", None)):
                raise ValueError(f"transform at index {index} has no callable 'out' method")
        return value

    def passes_filter(self, key: str) -> bool:
        """
        Check a logical key against the whitelist and blacklist.

        Args:
            key: The logical key name

        Returns:
            True if the key is allowed by the whitelist and not blacklisted
        """
        if self.whitelist and key not in self.whitelist:
            return False
        if key in self.blacklist:
            return False
        return True
