from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .config import DEFAULT_MATCH_COLUMN, ReconConfig, SupplierConfig
from .models import ReconciliationResult, Tag
from .normalize import build_aux_events, normalize_rows
from .rule import Rule
from .runner import ReconciliationRunner
from .schema import headers_of, resolve_aux_columns, resolve_columns
from .stats import build_stats, matched_count
from .supplier import build_supplier_ledger

logger = logging.getLogger(__name__)


def reconcile(
    primary_rows: Optional[Sequence[Mapping[str, Any]]],
    aux_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    supplier_config: Optional[SupplierConfig] = None,
    config: Optional[ReconConfig] = None,
    *,
    rules: Optional[Iterable[Rule]] = None,
) -> ReconciliationResult:
    """
    Tag every statement row with the rule that reconciled it (0 = unmatched).

    Input mappings are not modified; the result carries copies with the final
    tag written into the match column. An empty primary dataset yields an empty
    result rather than an error.
    """
    cfg = config or ReconConfig()
    suppliers = supplier_config or SupplierConfig()
    column_aliases = cfg.column_aliases()
    aux_aliases = cfg.aux_column_aliases()

    primary = [_stringify_keys(row) for row in (primary_rows or [])]
    if not primary:
        logger.warning("Primary dataset is empty; nothing to reconcile.")
        return ReconciliationResult(match_column=DEFAULT_MATCH_COLUMN)

    columns = resolve_columns(headers_of(primary), column_aliases)
    rows = normalize_rows(primary, columns)

    aux_events = None
    if aux_rows is not None:
        aux = [_stringify_keys(row) for row in aux_rows]
        aux_events = build_aux_events(aux, resolve_aux_columns(headers_of(aux), aux_aliases))

    runner = ReconciliationRunner(rules)
    ctx = runner.build_context(rows=rows, columns=columns, aux_events=aux_events, config=cfg)
    outcomes = runner.run(ctx)

    match_column = columns.match or DEFAULT_MATCH_COLUMN
    out_rows: List[Dict[str, Any]] = []
    tags: List[Tag] = []
    for row in ctx.rows:
        out = dict(row.raw)
        # Reconciliation numbers already in the input are written back untouched.
        if not row.pretagged:
            out[match_column] = row.match_tag
        out_rows.append(out)
        tags.append(row.match_tag)

    stats = build_stats(tags)
    logger.info("Reconciled %d of %d rows", matched_count(stats), len(tags))

    return ReconciliationResult(
        rows=out_rows,
        tags=tags,
        stats=stats,
        supplier_ledger=build_supplier_ledger(ctx.rows, suppliers),
        rule3_gaps=[gap for outcome in outcomes for gap in outcome.gaps],
        columns=columns,
        match_column=match_column,
    )


def _stringify_keys(row: Mapping[Any, Any]) -> Dict[str, Any]:
    return {str(k): v for k, v in row.items()}
