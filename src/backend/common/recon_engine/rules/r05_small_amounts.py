from __future__ import annotations

from ..config import SmallAmountRuleConfig
from ..context import MatchContext
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R05_SMALL_AMOUNTS(Rule):
    rule_id = 5
    rule_key = "R05-SMALL-AMOUNTS"
    rule_title = "Small bank credits up to the ceiling"
    config_model = SmallAmountRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: SmallAmountRuleConfig = self.config(ctx)
        codes = set(cfg.codes)
        tagged = [
            row.index
            for row in ctx.unmatched()
            if row.operation_code in codes
            and row.bank_amount is not None
            and 0 < row.bank_amount <= cfg.ceiling
        ]
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
