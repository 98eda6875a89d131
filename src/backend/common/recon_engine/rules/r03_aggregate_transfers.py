from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Set

from ..config import AggregateTransferRuleConfig
from ..context import MatchContext, quantize_amount
from ..models import NOT_AVAILABLE, AuxiliaryEvent, Rule3GapReport, RuleOutcome, StatementRow
from ..registry import register_rule
from ..rule import Rule

logger = logging.getLogger(__name__)


@register_rule
class R03_AGGREGATE_TRANSFERS(Rule):
    """
    Reconcile a day's batch of transfers from the auxiliary dataset.

    Each auxiliary event (rows sharing a date) must be covered by one or more
    bank credits carrying the batch-transfer phrase and equal to the event sum,
    and by the book entries whose ref1 is one of the event's payment refs. When
    both sides exist and the books sum agrees with the event sum, every
    candidate is tagged; otherwise a gap report is emitted and nothing is tagged.
    """

    rule_id = 3
    rule_key = "R03-AGGREGATE-TRANSFERS"
    rule_title = "Batch transfers reconciled against the auxiliary payments file"
    config_model = AggregateTransferRuleConfig

    def match(self, ctx: MatchContext) -> RuleOutcome:
        if not ctx.aux_events:
            return RuleOutcome(rule_id=self.rule_id)

        cfg: AggregateTransferRuleConfig = self.config(ctx)
        claimed: Set[int] = set()
        tagged: List[int] = []
        gaps: List[Rule3GapReport] = []

        for event in ctx.aux_events:
            open_rows = [row for row in ctx.unmatched() if row.index not in claimed]
            event_sum = quantize_amount(event.total)

            books = self._books_candidates(open_rows, event)
            books_sum = quantize_amount(sum((row.books_amount or Decimal("0") for row in books), Decimal("0")))
            bank = self._bank_candidates(open_rows, event_sum, cfg)

            if bank and books:
                diff = quantize_amount(abs(books_sum - event_sum))
                if diff <= cfg.amount_epsilon:
                    matched = [row.index for row in bank + books]
                    claimed.update(matched)
                    tagged.extend(matched)
                    continue
                gap = Rule3GapReport(
                    event_date=event.event_date,
                    aux_sum=event_sum,
                    books_sum=books_sum,
                    gap=diff,
                    bank_count=len(bank),
                    books_count=len(books),
                )
            else:
                gap = Rule3GapReport(
                    event_date=event.event_date,
                    aux_sum=event_sum,
                    books_sum=books_sum if books else NOT_AVAILABLE,
                    gap=NOT_AVAILABLE,
                    bank_count=len(bank),
                    books_count=len(books),
                )
            logger.info(
                "Aggregate transfer %s unresolved: aux=%s books=%s gap=%s (bank=%d, books=%d)",
                gap.event_date,
                gap.aux_sum,
                gap.books_sum,
                gap.gap,
                gap.bank_count,
                gap.books_count,
            )
            gaps.append(gap)

        return RuleOutcome(rule_id=self.rule_id, tagged=tagged, gaps=gaps)

    @staticmethod
    def _books_candidates(rows: List[StatementRow], event: AuxiliaryEvent) -> List[StatementRow]:
        if not event.payment_refs:
            return []
        return [row for row in rows if row.ref1.strip() in event.payment_refs]

    @staticmethod
    def _bank_candidates(
        rows: List[StatementRow],
        event_sum: Decimal,
        cfg: AggregateTransferRuleConfig,
    ) -> List[StatementRow]:
        target = abs(event_sum)
        return [
            row
            for row in rows
            if row.operation_code == cfg.transfer_code
            and row.bank_amount is not None
            and row.bank_amount > 0
            and cfg.transfer_phrase in row.details
            and abs(abs(row.bank_amount) - target) <= cfg.amount_epsilon
        ]
