"""
BUNNYSTORE - Key/Value Cache Stores

Stores used to persist existence-cache shards between processes.
Values must be JSON-serializable.
"""

import copy
import json
import logging
import os
import re
from typing import Any, Dict, Optional, Protocol

from bunnystore.core.errors import CacheError
from .filesystem import FileSystemAdapter

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueCache(Protocol):
    """Protocol for the injected key/value cache store."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None when absent."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""
        ...


class InMemoryCache:
    """Process-local cache store. Values are copied in and out."""

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self.put_count = 0

    def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.put_count += 1

    def keys(self) -> list[str]:
        """Keys currently stored."""
        return list(self._data)


class FileCache:
    """
    Cache store persisting one JSON file per key.

    Missing or unreadable entries read as None so a corrupt file is
    indistinguishable from a cache miss.
    """

    def __init__(self, fs: FileSystemAdapter, cache_dir: str, namespace: str = "bunnystore"):
        self._fs = fs
        self._cache_dir = cache_dir
        self._namespace = namespace

    def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not self._fs.exists(path):
            return None

        try:
            return json.loads(self._fs.read(path))
        except (ValueError, OSError) as e:
            logger.debug(f"Ignoring unreadable cache entry {path}: {e}")
            return None

    def put(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        try:
            self._fs.write(path, json.dumps(value, sort_keys=True))
        except (TypeError, ValueError, OSError) as e:
            raise CacheError(f"Failed to persist cache entry {key!r}: {e}") from e

    def _path_for(self, key: str) -> str:
        if not _SAFE_KEY.match(key):
            raise CacheError(f"Invalid cache key: {key!r}")
        return os.path.join(self._cache_dir, f"{self._namespace}_{key}.json")
