"""Time-bounded weather snapshot cache."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional

from models.weather import WeatherSnapshot

LOGGER = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 900.0


class WeatherCache:
    """Key -> snapshot map; expiry is checked on read.

    Entries are immutable snapshots and reads take no lock. Writes are upserts
    and the last writer wins; an expired entry is only evicted if it has not
    been replaced since it was read.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, WeatherSnapshot] = {}
        self._write_lock = threading.Lock()

    def get(self, key: str) -> Optional[WeatherSnapshot]:
        snapshot = self._entries.get(key)
        if snapshot is None:
            return None
        if not snapshot.is_fresh(self.clock()):
            LOGGER.debug("Evicting expired weather entry", extra={"cache_key": key})
            with self._write_lock:
                if self._entries.get(key) is snapshot:
                    del self._entries[key]
            return None
        return snapshot

    def put(self, key: str, snapshot: WeatherSnapshot) -> WeatherSnapshot:
        with self._write_lock:
            self._entries[key] = snapshot
        return snapshot

    def clear(self) -> None:
        LOGGER.info("Clearing weather cache", extra={"entries": len(self._entries)})
        with self._write_lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["DEFAULT_TTL_SECONDS", "WeatherCache"]
