from __future__ import annotations

import csv
import logging
import zipfile
from pathlib import Path
from typing import Any, Iterable

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

PREFERRED_SHEET = "DataSheet"
EXCEL_SUFFIXES = (".xlsx", ".xlsm")


class WorkbookAdapterError(ValueError):
    pass


def read_table(
    path: str | Path,
    *,
    sheet_name: str | None = None,
) -> list[dict[str, Any]]:
    """
    Read a header-driven table from an Excel workbook or a CSV file.

    The first row is the header; every record carries every header, with empty
    cells as "". Fully empty rows are dropped. Workbooks default to the
    `DataSheet` sheet when present, otherwise the first sheet.
    """
    p = Path(path)
    if not p.exists():
        raise WorkbookAdapterError(f"Input file not found: {p}")

    suffix = p.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        rows = _read_workbook(p, sheet_name)
    elif suffix == ".csv":
        rows = _read_csv(p)
    else:
        raise WorkbookAdapterError(f"Unsupported file type '{suffix}' for {p.name} (expected .xlsx or .csv).")

    logger.info("Read %d rows from %s", len(rows), p)
    return rows


def _read_workbook(path: Path, sheet_name: str | None) -> list[dict[str, Any]]:
    try:
        wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise WorkbookAdapterError(f"Could not open workbook {path.name}: {exc}") from exc

    try:
        if sheet_name is not None:
            if sheet_name not in wb.sheetnames:
                raise WorkbookAdapterError(
                    f"Sheet '{sheet_name}' not found in {path.name}. Available: {wb.sheetnames}"
                )
            ws = wb[sheet_name]
        elif PREFERRED_SHEET in wb.sheetnames:
            ws = wb[PREFERRED_SHEET]
        else:
            ws = wb[wb.sheetnames[0]]

        values = ws.iter_rows(values_only=True)
        header = next(values, None)
        if header is None:
            return []
        return _records(header, values)
    finally:
        wb.close()


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header is None:
            return []
        return _records(header, reader)


def _records(header: Iterable[Any], rows: Iterable[Iterable[Any]]) -> list[dict[str, Any]]:
    columns = [(idx, str(h).strip()) for idx, h in enumerate(header) if h is not None and str(h).strip()]
    out: list[dict[str, Any]] = []
    for raw in rows:
        cells = list(raw or ())
        if all(_is_blank(c) for c in cells):
            continue
        record: dict[str, Any] = {}
        for idx, name in columns:
            value = cells[idx] if idx < len(cells) else None
            record[name] = "" if value is None else value
        out.append(record)
    return out


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
