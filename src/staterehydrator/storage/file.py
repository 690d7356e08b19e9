"""
File-based storage backend.

Each key is stored in its own file inside a namespace directory. File
names are the URL-quoted key plus a suffix, so listing the directory
recovers the exact keys.
"""

import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, unquote

import aiofiles
import aiofiles.os

from ..error import StorageError

logger = logging.getLogger(__name__)


class FileStorage:
    """Asynchronous file storage scoped to one directory."""

    SUFFIX = ".item"

    def __init__(self, directory: Path, encoding: str = "utf-8"):
        self.directory = Path(directory)
        self.encoding = encoding

    def _get_path(self, key: str) -> Path:
        """Get the file path for a key."""
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    async def get_all_keys(self) -> List[str]:
        """
        List every key held in the directory.

        A directory that does not exist yet holds no keys.

        Raises:
            StorageError: If the directory cannot be listed
        """
        if not await aiofiles.os.path.exists(self.directory):
            return []
        try:
            names = await aiofiles.os.listdir(self.directory)
        except OSError as e:
            raise StorageError(f"Failed to list {self.directory}: {e}", source=e)
        return sorted(
            unquote(name[:-len(self.SUFFIX)])
            for name in names
            if name.endswith(self.SUFFIX)
        )

    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageError: If the file exists but cannot be read
        """
        path = self._get_path(key)
        if not await aiofiles.os.path.exists(path):
            return None
        try:
            async with aiofiles.open(path, "r", encoding=self.encoding) as f:
                return await f.read()
        except OSError as e:
            raise StorageError(f"Failed to read {key!r}: {e}", source=e)

    async def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key.

        The value is written to a temporary file first and moved into
        place, so readers never observe a partial write.
        """
        path = self._get_path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            await aiofiles.os.makedirs(self.directory, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding=self.encoding) as f:
                await f.write(value)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {key!r}: {e}", source=e)

    async def remove_item(self, key: str) -> bool:
        """Remove a key. Returns False if it was not stored."""
        path = self._get_path(key)
        if not await aiofiles.os.path.exists(path):
            return False
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            raise StorageError(f"Failed to remove {key!r}: {e}", source=e)
        return True

    async def clear(self) -> int:
        """Remove every key. Returns the number of keys removed."""
        count = 0
        for key in await self.get_all_keys():
            if await self.remove_item(key):
                count += 1
        logger.debug(f"Cleared {count} keys from {self.directory}")
        return count
