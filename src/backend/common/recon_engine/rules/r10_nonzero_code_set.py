from __future__ import annotations

from ..config import NonZeroCodeSetRuleConfig
from ..context import MatchContext
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R10_NONZERO_CODE_SET(Rule):
    rule_id = 10
    rule_key = "R10-NONZERO-CODE-SET"
    rule_title = "Non-zero bank movements with self-reconciling operation codes"
    config_model = NonZeroCodeSetRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: NonZeroCodeSetRuleConfig = self.config(ctx)
        codes = set(cfg.codes)
        tagged = [
            row.index
            for row in ctx.unmatched()
            if row.operation_code in codes and row.bank_amount is not None and row.bank_amount != 0
        ]
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
