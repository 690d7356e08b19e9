"""
Pytest configuration and fixtures.
"""

import asyncio
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class ScriptedStorage:
    """
    Async storage with scripted failures and delays.

    Records the order reads start and finish in, and how many were in
    flight at once.
    """

    def __init__(
        self,
        items: Mapping[str, Any],
        *,
        failing: Iterable[str] = (),
        delays: Optional[Dict[str, float]] = None,
        keys_error: Optional[Exception] = None,
    ):
        self.items = dict(items)
        self.failing = set(failing)
        self.delays = delays or {}
        self.keys_error = keys_error
        self.reads: List[str] = []
        self.finished: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_all_keys(self) -> List[str]:
        if self.keys_error is not None:
            raise self.keys_error
        return list(self.items)

    async def get_item(self, key: str) -> Optional[Any]:
        self.reads.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if key in self.failing:
                raise OSError(f"cannot read {key}")
            return self.items.get(key)
        finally:
            self.in_flight -= 1
            self.finished.append(key)


class NodeStyleStorage:
    """
    Storage reporting through ``callback(error, result)``.

    ``mode`` selects how callbacks fire: ``"sync"`` inside the call,
    ``"loop"`` on a later loop iteration, ``"thread"`` from another thread.
    With ``repeat`` every callback fires twice. ``no_error`` is the error
    argument passed on success.
    """

    def __init__(
        self,
        items: Mapping[str, Any],
        *,
        mode: str = "sync",
        repeat: bool = False,
        keys_error: Optional[Any] = None,
        no_error: Any = None,
    ):
        self.items = dict(items)
        self.no_error = no_error
        self.mode = mode
        self.repeat = repeat
        self.keys_error = keys_error

    def _fire(self, callback, error, result) -> None:
        times = 2 if self.repeat else 1
        for _ in range(times):
            if self.mode == "sync":
                callback(error, result)
            elif self.mode == "loop":
                asyncio.get_running_loop().call_soon(callback, error, result)
            else:
                threading.Thread(target=callback, args=(error, result)).start()

    def get_all_keys(self, callback) -> None:
        if self.keys_error is not None:
            self._fire(callback, self.keys_error, None)
        else:
            self._fire(callback, self.no_error, list(self.items))

    def get_item(self, key: str, callback) -> None:
        self._fire(callback, self.no_error, self.items.get(key))

    def set_item(self, key: str, value: Any, callback) -> None:
        self.items[key] = value
        self._fire(callback, None, None)


class KeysOnlyStorage:
    """Storage naming its enumeration method ``keys``."""

    def __init__(self, items: Mapping[str, Any]):
        self.items = dict(items)

    async def keys(self) -> List[str]:
        return list(self.items)

    async def get_item(self, key: str) -> Optional[Any]:
        return self.items.get(key)


@pytest.fixture
def temp_storage_dir(tmp_path):
    """A storage root directory."""
    return tmp_path / "storage"


@pytest.fixture
def sample_items():
    """Persisted state under the ``root`` key prefix."""
    return {
        "root@@garbage:foo": '"bar"',
        "root@@garbage:todos": '[{"id": 1, "done": false}]',
        "rootcommon:settings": '{"theme": "dark"}',
        "unrelated:entry": '"ignored"',
    }
