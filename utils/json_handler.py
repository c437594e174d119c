"""
JSON file I/O for the dashboard's local storage file.
Each storage file holds one flat object; access to a file is serialized
through its own asyncio.Lock.
"""

import asyncio
import json
import os
from typing import Any, Dict, Optional, Union

import aiofiles
from pydantic import BaseModel

_storage_locks: Dict[str, asyncio.Lock] = {}


def _lock_for(file_path: str) -> asyncio.Lock:
    if file_path not in _storage_locks:
        _storage_locks[file_path] = asyncio.Lock()
    return _storage_locks[file_path]


def model_to_payload(obj: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Plain JSON-ready dict for a stored object (extra fields included).

    Raises:
        ValueError: the object cannot be written as JSON
    """
    payload = obj.model_dump(mode="json") if isinstance(obj, BaseModel) else dict(obj)
    try:
        json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Object is not JSON serializable: {str(e)}")
    return payload


async def read_storage_file(file_path: str) -> Optional[dict]:
    """
    Read a storage file. Returns None when the file does not exist.

    Raises:
        IOError: the file cannot be read or is not valid JSON
    """
    async with _lock_for(file_path):
        if not os.path.exists(file_path):
            return None
        try:
            async with aiofiles.open(file_path, mode="r", encoding="utf-8") as file:
                content = await file.read()
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise IOError(f"Error parsing storage file: {str(e)}")
        except IOError as e:
            raise IOError(f"Error reading storage file: {str(e)}")


async def write_storage_file(file_path: str, entries: Dict[str, str]) -> None:
    """Replace the storage file with `entries`."""
    async with _lock_for(file_path):
        try:
            async with aiofiles.open(file_path, mode="w", encoding="utf-8") as file:
                await file.write(json.dumps(entries, ensure_ascii=False))
        except IOError as e:
            raise IOError(f"Error writing storage file: {str(e)}")
