"""In-memory font file cache with at-most-one concurrent fetch per family.

Entries are never evicted, invalidated or refreshed for the process
lifetime. A failed fetch stores nothing, so a later request may retry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("fontgate.cache")


class FontFileCache:
    """Thread-safe mapping of family name -> raw font file bytes."""

    def __init__(self):
        self._files: dict[str, bytes] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __contains__(self, family: object) -> bool:
        return family in self._files

    def __len__(self) -> int:
        return len(self._files)

    def _lock_for(self, family: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(family)
            if lock is None:
                lock = self._locks[family] = threading.Lock()
            return lock

    def get_or_fetch(self, family: str, fetch: Callable[[], bytes]) -> bytes:
        """Return cached bytes for ``family``, calling ``fetch`` on a miss.

        Concurrent callers for the same uncached family block on a
        per-family lock; only the first runs ``fetch``. Exceptions from
        ``fetch`` propagate and leave the cache unchanged.
        """
        data = self._files.get(family)
        if data is not None:
            logger.info("Font file already downloaded for %s", family)
            return data

        with self._lock_for(family):
            data = self._files.get(family)
            if data is not None:
                logger.debug("Font file for %s downloaded by a concurrent request", family)
                return data
            data = fetch()
            self._files[family] = data
            return data
