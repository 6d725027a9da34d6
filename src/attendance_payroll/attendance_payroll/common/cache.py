"""Read-through cache for slow-changing reference data (shift lists, employees).

The cache sits in the calling layer; the engine never sees it. Writers must call
``invalidate`` after any change to the cached source.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from .logging_config import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class ReadThroughCache(Generic[T]):
    def __init__(self, *, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, T]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable, loader: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            hit = self._entries.get(key)
            if hit and now - hit[0] <= self._ttl:
                return hit[1]

        value = loader()
        with self._lock:
            self._entries[key] = (self._clock(), value)
        return value

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
        logger.debug("cache invalidated", extra={"cache_key": key if key is not None else "*"})

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
