"""
Error types for the state rehydration system.

Only key enumeration failures cross the rehydrator boundary. The other
kinds are raised by storage backends or used to label per-key failures
before they are absorbed into ``None`` values.
"""

from typing import Optional
from enum import Enum


class ErrorKind(Enum):
    """Enumeration of error kinds for classification."""
    STORAGE = "storage"
    ENUMERATION = "enumeration"
    CONFIG = "config"
    DESERIALIZE = "deserialize"
    TRANSFORM = "transform"


class RehydrationError(Exception):
    """
    Base exception class for all rehydration errors.

    Attributes:
        message: The error message
        kind: The kind of error (for classification)
        source: Optional underlying exception that caused this error
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.STORAGE,
        source: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.source = source

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, kind={self.kind})"


class StorageError(RehydrationError):
    """Storage backend read/write errors."""

    def __init__(self, message: str, source: Optional[BaseException] = None):
        super().__init__(f"Storage error: {message}", ErrorKind.STORAGE, source)


class KeyEnumerationError(RehydrationError):
    """The storage backend could not list its keys."""

    def __init__(self, message: str, source: Optional[BaseException] = None):
        super().__init__(f"Key enumeration failed: {message}", ErrorKind.ENUMERATION, source)


class ConfigError(RehydrationError):
    """Configuration errors."""

    def __init__(self, message: str):
        super().__init__(f"Config error: {message}", ErrorKind.CONFIG)


class DeserializationError(RehydrationError):
    """A stored value could not be deserialized."""

    def __init__(self, key: str, source: Optional[BaseException] = None):
        self.key = key
        super().__init__(f"Could not deserialize value for key {key!r}: {source}", ErrorKind.DESERIALIZE, source)


class TransformError(RehydrationError):
    """A transform's outbound step raised."""

    def __init__(self, key: str, source: Optional[BaseException] = None):
        self.key = key
        super().__init__(f"Transform failed for key {key!r}: {source}", ErrorKind.TRANSFORM, source)
