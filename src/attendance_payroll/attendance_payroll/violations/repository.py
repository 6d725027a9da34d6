from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ViolationRulesConfig


class ViolationRulesRepository(Protocol):
    def get_active(self) -> Optional[ViolationRulesConfig]:
        raise NotImplementedError

    def activate(self, config: ViolationRulesConfig) -> ViolationRulesConfig:
        """Store ``config`` as the only active version, in one transaction."""

        raise NotImplementedError

    def list_history(self, *, limit: int = 20) -> Sequence[ViolationRulesConfig]:
        raise NotImplementedError
