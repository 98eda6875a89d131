from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence

from openpyxl.utils.datetime import from_excel

from .models import (
    UNMATCHED,
    AuxColumnMapping,
    AuxiliaryEvent,
    ColumnMapping,
    StatementRow,
    Tag,
)

logger = logging.getLogger(__name__)

# Thousands separators, currency marks, NBSP and RTL/LTR control marks.
_AMOUNT_NOISE = (",", "\u20aa", "$", "\u00a0", "\u200e", "\u200f")

_DMY_RE = re.compile(r"^(\d{1,2})[./](\d{1,2})[./](\d{4})$")


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a cell into a finite Decimal, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        parsed = Decimal(str(value))
        return parsed if parsed.is_finite() else None
    s = str(value)
    for noise in _AMOUNT_NOISE:
        s = s.replace(noise, "")
    s = s.strip()
    if not s:
        return None
    if s.startswith("(") and s.endswith(")"):
        s = f"-{s[1:-1].strip()}"
    try:
        parsed = Decimal(s)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_operation_code(value: Any) -> Optional[int]:
    parsed = parse_amount(value)
    if parsed is None or parsed != parsed.to_integral_value():
        return None
    return int(parsed)


def parse_match_tag(value: Any) -> Tag:
    """
    Existing match cell as a tag. Empty cells and numeric zero are unmatched;
    integral numbers become ints, anything else is kept as trimmed text.
    """
    text = cell_text(value).strip()
    if not text:
        return UNMATCHED
    number = parse_amount(value)
    if number is None:
        return text
    if number == 0:
        return UNMATCHED
    if number == number.to_integral_value():
        return int(number)
    return text


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Reference numbers typed into numeric cells come back as floats.
        return str(int(value))
    return str(value)


def normalize_date(value: Any) -> str:
    """
    Normalize a date-bearing cell to YYYY-MM-DD.

    Numeric cells are spreadsheet serials (1900 date system). Strings that do
    not parse as a date are kept verbatim so they can still serve as a key.
    """
    if value is None or isinstance(value, bool):
        return "" if value is None else str(value)
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float, Decimal)):
        if value == 0:
            return ""
        try:
            converted = from_excel(float(value))
        except (OverflowError, ValueError):
            return str(value)
        if isinstance(converted, datetime):
            return converted.date().isoformat()
        return str(value)
    text = str(value).strip()
    if not text:
        return ""
    parsed = _parse_date_text(text)
    return parsed.isoformat() if parsed else text


def _parse_date_text(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    m = _DMY_RE.match(text)
    if m:
        dd, mm, yyyy = (int(p) for p in m.groups())
        try:
            return date(yyyy, mm, dd)
        except ValueError:
            return None
    return None


def _cell(row: Mapping[str, Any], column: Optional[str]) -> Any:
    if column is None:
        return None
    return row.get(column)


def normalize_rows(rows: Sequence[Mapping[str, Any]], columns: ColumnMapping) -> List[StatementRow]:
    unresolved = [name for name in columns.unresolved() if name != "match"]
    if unresolved:
        logger.warning("Unresolved statement columns (dependent rules will find no candidates): %s", unresolved)

    out: List[StatementRow] = []
    for idx, row in enumerate(rows):
        tag = parse_match_tag(_cell(row, columns.match))
        out.append(
            StatementRow(
                index=idx,
                match_tag=tag,
                pretagged=tag != UNMATCHED,
                operation_code=parse_operation_code(_cell(row, columns.operation_code)),
                bank_amount=parse_amount(_cell(row, columns.bank_amount)),
                books_amount=parse_amount(_cell(row, columns.books_amount)),
                ref1=cell_text(_cell(row, columns.ref1)),
                ref2=cell_text(_cell(row, columns.ref2)),
                date=normalize_date(_cell(row, columns.date)),
                details=cell_text(_cell(row, columns.details)),
                raw=dict(row),
            )
        )
    return out


def build_aux_events(
    aux_rows: Sequence[Mapping[str, Any]],
    columns: AuxColumnMapping,
) -> Optional[List[AuxiliaryEvent]]:
    """
    Group auxiliary rows into per-date events.

    Returns None when the date or amount column cannot be resolved, which turns
    the aggregate-transfer rule into a no-op.
    """
    if columns.date is None or columns.amount is None:
        logger.warning("Auxiliary dataset has no resolvable date/amount column; skipping aggregate events.")
        return None

    events: Dict[str, AuxiliaryEvent] = {}
    for row in aux_rows:
        event_date = normalize_date(row.get(columns.date))
        if not event_date:
            continue
        amount = parse_amount(row.get(columns.amount))
        if amount is None:
            continue
        event = events.get(event_date)
        if event is None:
            event = events[event_date] = AuxiliaryEvent(event_date=event_date)
        event.total += amount
        if columns.payment_ref is not None:
            ref = cell_text(row.get(columns.payment_ref)).strip()
            if ref:
                event.payment_refs.add(ref)
    return list(events.values())
