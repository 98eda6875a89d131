from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from common.recon_engine.models import ReconciliationResult

logger = logging.getLogger(__name__)

DATA_SHEET = "DataSheet"
STATS_SHEET = "סיכום"
SUPPLIER_SHEET = "הוראת קבע ספקים"
GAPS_SHEET = "פערי סכומים – כלל 3"

STATS_HEADERS = ["מס", "כמות"]
SUPPLIER_HEADERS = ["פרטים", "סכום", "מס' ספק", "סכום חובה", "סכום זכות"]
GAPS_HEADERS = ["Event", "Aux Sum", "Books Sum", "Gap", "Bank Count", "Books Count"]


def write_result_workbook(result: ReconciliationResult, path: str | Path) -> Path:
    """Write the tagged rows, stats, supplier ledger and rule 3 gaps as one workbook."""
    out_path = Path(path)
    wb = Workbook()

    ws = wb.active
    ws.title = DATA_SHEET
    headers = _union_headers(result.rows)
    _write_rows(ws, headers, ([row.get(h, "") for h in headers] for row in result.rows))

    _write_rows(
        wb.create_sheet(STATS_SHEET),
        STATS_HEADERS,
        ([s.rule, s.count] for s in result.stats),
    )
    _write_rows(
        wb.create_sheet(SUPPLIER_SHEET),
        SUPPLIER_HEADERS,
        ([e.details, e.amount, e.supplier_id, e.debit, e.credit] for e in result.supplier_ledger),
    )
    if result.rule3_gaps:
        _write_rows(
            wb.create_sheet(GAPS_SHEET),
            GAPS_HEADERS,
            (
                [g.event_date, g.aux_sum, g.books_sum, g.gap, g.bank_count, g.books_count]
                for g in result.rule3_gaps
            ),
        )

    for sheet in wb.worksheets:
        sheet.sheet_view.rightToLeft = True

    out_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(out_path)
    logger.info("Wrote result workbook %s", out_path)
    return out_path


def _union_headers(rows: Sequence[dict[str, Any]]) -> list[str]:
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _write_rows(ws: Worksheet, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
