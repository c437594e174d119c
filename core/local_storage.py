"""
Durable key-value storage for the dashboard.
String values only, persisted as one JSON object per storage file.
"""

from pathlib import Path
from typing import Dict, Optional

from utils import read_storage_file, write_storage_file
from logging_config import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """
    Reads are served from memory so session checks stay synchronous;
    every write goes straight through to disk.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self._data: Dict[str, str] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """(Re)load all entries from disk. A corrupt file is treated as empty."""
        try:
            content = await read_storage_file(str(self.file_path))
        except IOError as e:
            logger.warning(f"Local storage at {self.file_path} is unreadable, starting empty: {e}")
            content = None

        if isinstance(content, dict):
            self._data = {str(k): str(v) for k, v in content.items() if v is not None}
        else:
            self._data = {}
        self._loaded = True
        logger.info(f"Local storage loaded from {self.file_path} ({len(self._data)} keys)")

    async def ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        await self._flush()

    async def set_items(self, entries: Dict[str, str]) -> None:
        """Set several keys with a single write."""
        self._data.update({key: str(value) for key, value in entries.items()})
        await self._flush()

    async def remove_items(self, *keys: str) -> None:
        changed = False
        for key in keys:
            if key in self._data:
                del self._data[key]
                changed = True
        if changed:
            await self._flush()

    async def clear(self) -> None:
        self._data = {}
        await self._flush()

    async def _flush(self) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        await write_storage_file(str(self.file_path), dict(self._data))
