from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .config import ReconConfig
from .context import MatchContext
from .models import AuxiliaryEvent, ColumnMapping, RuleOutcome, StatementRow
from .registry import registry
from .rule import Rule

logger = logging.getLogger(__name__)


class TagConflictError(RuntimeError):
    """A rule claimed a row that an earlier rule already tagged."""


class ReconciliationRunner:
    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        if rules is None:
            self._rules = registry.create_all()
        else:
            self._rules = sorted(rules, key=lambda r: r.rule_id)

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def build_context(
        self,
        *,
        rows: Sequence[StatementRow],
        columns: Optional[ColumnMapping] = None,
        aux_events: Optional[Sequence[AuxiliaryEvent]] = None,
        config: Optional[ReconConfig] = None,
    ) -> MatchContext:
        cfg = config or ReconConfig()
        # Overrides are merged with rule defaults here, once, before any pass runs.
        rule_configs = {rule.rule_key: cfg.get_rule_config(rule.rule_key, rule.config_model) for rule in self._rules}
        return MatchContext(
            rows=tuple(rows),
            columns=columns or ColumnMapping(),
            aux_events=tuple(aux_events) if aux_events is not None else None,
            config=cfg,
            rule_configs=rule_configs,
        )

    def run(self, ctx: MatchContext, *, rule_ids: Optional[set[int]] = None) -> List[RuleOutcome]:
        outcomes: List[RuleOutcome] = []
        for rule in self._rules:
            if rule_ids is not None and rule.rule_id not in rule_ids:
                continue
            if not rule.config(ctx).enabled:
                logger.debug("Rule %s (%s) disabled by configuration", rule.rule_id, rule.rule_key)
                continue

            outcome = rule.match(ctx)
            tagged = self._apply(ctx, rule, outcome.tagged)
            outcome = outcome.model_copy(update={"tagged": tagged})
            logger.info("Rule %s (%s) tagged %d rows", rule.rule_id, rule.rule_key, len(tagged))
            outcomes.append(outcome)
        return outcomes

    def _apply(self, ctx: MatchContext, rule: Rule, indexes: Sequence[int]) -> List[int]:
        # A row can be both a bank and a books candidate of the same pass.
        unique = list(dict.fromkeys(indexes))
        by_index = {row.index: row for row in ctx.rows}
        for idx in unique:
            row = by_index[idx]
            if not row.is_unmatched:
                raise TagConflictError(
                    f"Rule {rule.rule_id} claimed row {idx} already tagged {row.match_tag}"
                )
        for idx in unique:
            by_index[idx].match_tag = rule.rule_id
        return unique
