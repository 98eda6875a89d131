from __future__ import annotations

from ..config import StandingOrderRuleConfig
from ..context import MatchContext
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R02_STANDING_ORDERS(Rule):
    rule_id = 2
    rule_key = "R02-STANDING-ORDERS"
    rule_title = "Standing-order debits"
    config_model = StandingOrderRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: StandingOrderRuleConfig = self.config(ctx)
        codes = set(cfg.codes)
        tagged = [row.index for row in ctx.unmatched() if row.operation_code in codes]
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
