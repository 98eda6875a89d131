from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from ..config import ResidualTransferRuleConfig
from ..context import MatchContext, amount_key, starts_with_any
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R11_RESIDUAL_TRANSFERS(Rule):
    """
    Pair leftover transfer lines with BT book entries of the same absolute amount.

    Within a bucket rows are paired positionally in input order; the surplus on
    the larger side stays unmatched.
    """

    rule_id = 11
    rule_key = "R11-RESIDUAL-TRANSFERS"
    rule_title = "Residual transfers paired 1:1 by absolute amount"
    config_model = ResidualTransferRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: ResidualTransferRuleConfig = self.config(ctx)

        bank: Dict[str, List[int]] = defaultdict(list)
        books: Dict[str, List[int]] = defaultdict(list)
        for row in ctx.unmatched():
            if row.operation_code == cfg.transfer_code and row.bank_amount is not None and row.bank_amount != 0:
                bank[amount_key(row.bank_amount)].append(row.index)
            # A row is on one side only, so no row is paired twice.
            elif (
                row.books_amount is not None
                and row.books_amount != 0
                and starts_with_any(row.ref1.strip(), [cfg.books_ref_prefix])
            ):
                books[amount_key(row.books_amount)].append(row.index)

        tagged: List[int] = []
        for key, bank_idx in bank.items():
            books_idx = books.get(key)
            if not books_idx:
                continue
            for bank_i, books_i in zip(bank_idx, books_idx):
                tagged.extend([bank_i, books_i])
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
