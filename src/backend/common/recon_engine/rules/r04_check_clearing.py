from __future__ import annotations

from typing import List, Set

from ..config import CheckClearingRuleConfig
from ..context import MatchContext, digits_key, starts_with_any
from ..models import RuleOutcome
from ..registry import register_rule
from ..rule import Rule


@register_rule
class R04_CHECK_CLEARING(Rule):
    """
    Cleared cheques: bank ref1 against the CH book entry's ref2.

    References are compared on their digits only (punctuation and leading zeros
    dropped); amounts may differ by up to the configured tolerance. Greedy
    first-fit in row order, each book entry is consumed at most once.
    """

    rule_id = 4
    rule_key = "R04-CHECK-CLEARING"
    rule_title = "Cheques cleared by reference number within amount tolerance"
    config_model = CheckClearingRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        cfg: CheckClearingRuleConfig = self.config(ctx)
        open_rows = ctx.unmatched()

        bank = [
            row
            for row in open_rows
            if row.operation_code == cfg.check_code
            and row.ref1.strip() != ""
            and row.bank_amount is not None
        ]
        books = [
            row
            for row in open_rows
            if starts_with_any(row.ref1, [cfg.books_ref_prefix])
            and row.ref2.strip() != ""
            and row.books_amount is not None
        ]

        used: Set[int] = set()
        tagged: List[int] = []
        for bank_row in bank:
            if bank_row.index in used:
                continue
            bank_ref = digits_key(bank_row.ref1)
            bank_amt = abs(bank_row.bank_amount)
            for books_row in books:
                if books_row.index in used or books_row.index == bank_row.index:
                    continue
                if digits_key(books_row.ref2) != bank_ref:
                    continue
                if abs(abs(books_row.books_amount) - bank_amt) <= cfg.amount_tolerance:
                    used.update((bank_row.index, books_row.index))
                    tagged.extend([bank_row.index, books_row.index])
                    break
        return RuleOutcome(rule_id=self.rule_id, tagged=tagged)
