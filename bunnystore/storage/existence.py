"""
BUNNYSTORE - Existence Cache

Remembers which paths are known to exist so existence checks can skip a
remote probe.

Flags are grouped into 16 shards keyed by the first hex character of the
path's MD5 digest. Each shard is stored as one mapping {path: True} in the
injected cache store and is rewritten as a whole on every change. Only
positive existence is stored; a deleted path simply loses its entry.
"""

import hashlib
import logging
from typing import Dict

from bunnystore.core.errors import CacheError
from bunnystore.infrastructure.cache import KeyValueCache

logger = logging.getLogger(__name__)

SHARD_COUNT = 16


def shard_key(path: str) -> str:
    """Cache key of the shard holding ``path``."""
    return hashlib.md5(path.encode("utf-8")).hexdigest()[0]


class ExistenceCache:
    """Sharded positive-existence cache over a key/value store."""

    def __init__(self, store: KeyValueCache):
        self._store = store

    def load_shard(self, path: str) -> Dict[str, bool]:
        """
        Load the shard holding ``path``.

        Returns:
            A fresh mapping; empty when the shard is absent or unreadable
        """
        key = shard_key(path)
        try:
            shard = self._store.get(key)
        except CacheError as e:
            logger.debug(f"Treating unreadable shard {key} as empty: {e}")
            return {}

        if not isinstance(shard, dict):
            return {}
        return dict(shard)

    def contains(self, path: str) -> bool:
        """True when ``path`` is marked as existing."""
        return self.load_shard(path).get(path) is True

    def mark(self, path: str) -> None:
        """Mark ``path`` as existing. Writes the shard only when the flag is new."""
        shard = self.load_shard(path)
        if shard.get(path) is True:
            return

        shard[path] = True
        self._save(path, shard)

    def unmark(self, path: str) -> None:
        """Forget ``path``. Writes the shard only when an entry was removed."""
        shard = self.load_shard(path)
        if path not in shard:
            return

        del shard[path]
        self._save(path, shard)

    def _save(self, path: str, shard: Dict[str, bool]) -> None:
        key = shard_key(path)
        try:
            self._store.put(key, shard)
        except CacheError as e:
            # The remote operation already happened; a lost flag only costs a later probe
            logger.warning(f"Failed to save existence shard {key}: {e}")
            return
        logger.debug(f"Saved existence shard {key} ({len(shard)} entries)")
