from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Type

from .config import RuleConfigBase
from .context import MatchContext
from .models import MAX_RULE_ID, RuleOutcome


class Rule(ABC):
    """
    One matching pass.

    `match` only reads the context and returns the row indexes it claims; the
    runner writes the tags so each row is tagged at most once per run.
    """

    rule_id: int
    rule_key: str
    rule_title: str
    config_model: Type[RuleConfigBase]

    def __init__(self):
        rule_id = getattr(self, "rule_id", None)
        if not isinstance(rule_id, int) or not 1 <= rule_id <= MAX_RULE_ID:
            raise ValueError(f"Rule must define an integer rule_id in 1..{MAX_RULE_ID}")
        if not getattr(self, "rule_key", None):
            raise ValueError("Rule must define rule_key")

    def config(self, ctx: MatchContext):
        return ctx.get_rule_config(self.rule_key, self.config_model)

    @abstractmethod
    def match(self, ctx: MatchContext) -> RuleOutcome:  # pragma: no cover
        raise NotImplementedError
