from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Tuple

from ..config import UniqueAmountDateRuleConfig
from ..context import MatchContext, amount_key, starts_with_any
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R01_UNIQUE_AMOUNT_DATE(Rule):
    rule_id = 1
    rule_key = "R01-UNIQUE-AMOUNT-DATE"
    rule_title = "Bank debit and OV/RC book entry unique on amount and date"
    config_model = UniqueAmountDateRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: UniqueAmountDateRuleConfig = self.config(ctx)
        codes = set(cfg.bank_codes)

        bank: Dict[Tuple[str, str], List[int]] = defaultdict(list)
        books: Dict[Tuple[str, str], List[int]] = defaultdict(list)
        for row in ctx.unmatched():
            if not row.date:
                continue
            if row.operation_code in codes and row.bank_amount is not None and row.bank_amount < 0:
                bank[(amount_key(row.bank_amount), row.date)].append(row.index)
            if (
                row.books_amount is not None
                and row.books_amount > 0
                and starts_with_any(row.ref1, cfg.books_ref_prefixes)
            ):
                books[(amount_key(row.books_amount), row.date)].append(row.index)

        tagged: List[int] = []
        for key, bank_idx in bank.items():
            books_idx = books.get(key)
            # Ambiguous groups (two or more on either side) are left for later passes.
            if books_idx and len(bank_idx) == 1 and len(books_idx) == 1:
                tagged.extend([bank_idx[0], books_idx[0]])
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
