from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence, Union

from ..common.logging_config import get_logger
from .model import ViolationRulesConfig
from .repository import ViolationRulesRepository

logger = get_logger(__name__)


class ViolationRulesService:
    def __init__(self, rules: ViolationRulesRepository):
        self._rules = rules

    def get_active(self) -> ViolationRulesConfig:
        """Active rules, or the built-in defaults when nothing was ever activated."""
        return self._rules.get_active() or ViolationRulesConfig()

    def activate(
        self,
        config: Union[ViolationRulesConfig, Mapping[str, Any]],
        *,
        updated_by: Optional[str] = None,
    ) -> ViolationRulesConfig:
        if not isinstance(config, ViolationRulesConfig):
            config = ViolationRulesConfig.from_dict(config)
        if updated_by:
            config = replace(config, updated_by=updated_by)
        config = replace(config, active=True, rules_id=None, created_at=None)

        stored = self._rules.activate(config)
        logger.info(
            "violation rules activated",
            extra={"rules_id": stored.rules_id, "updated_by": stored.updated_by},
        )
        return stored

    def history(self, *, limit: int = 20) -> Sequence[ViolationRulesConfig]:
        return self._rules.list_history(limit=limit)
