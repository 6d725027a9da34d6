from __future__ import annotations

from typing import Optional, Sequence

from ..common.cache import ReadThroughCache
from .model import ShiftDefinition
from .repository import ShiftRepository


class CachedShiftRepository(ShiftRepository):
    """Serves shift reads from a TTL cache; every write invalidates it."""

    def __init__(self, inner: ShiftRepository, cache: ReadThroughCache):
        self._inner = inner
        self._cache = cache

    def list_all(self, *, active_only: bool = False) -> Sequence[ShiftDefinition]:
        shifts = self._cache.get("shifts:all", lambda: tuple(self._inner.list_all()))
        if active_only:
            return [s for s in shifts if s.active]
        return list(shifts)

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        key = (code or "").strip().upper()
        for s in self.list_all():
            if s.code.upper() == key:
                return s
        return None

    def save(self, shift: ShiftDefinition) -> ShiftDefinition:
        saved = self._inner.save(shift)
        self._cache.invalidate()
        return saved

    def deactivate(self, code: str) -> bool:
        ok = self._inner.deactivate(code)
        self._cache.invalidate()
        return ok
