from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ShiftDefinition


class ShiftRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[ShiftDefinition]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        raise NotImplementedError

    def save(self, shift: ShiftDefinition) -> ShiftDefinition:
        raise NotImplementedError

    def deactivate(self, code: str) -> bool:
        raise NotImplementedError
