from __future__ import annotations

from ..config import DetailsPhraseRuleConfig
from ..context import MatchContext
from ..models import RuleOutcome
from ..rule import Rule


class DetailsPhraseRule(Rule):
    """Bank debit with a given operation code whose details equal a fixed phrase.

    Subclasses only supply the id, key, title and a config model with defaults.
    """

    config_model = DetailsPhraseRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: DetailsPhraseRuleConfig = self.config(ctx)
        tagged = [
            row.index
            for row in ctx.unmatched()
            if row.operation_code == cfg.operation_code
            and row.bank_amount is not None
            and row.bank_amount < 0
            and row.details == cfg.details
        ]
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
