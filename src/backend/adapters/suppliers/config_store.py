from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from openpyxl import Workbook
from pydantic import ValidationError

from common.recon_engine.config import SupplierConfig
from common.recon_engine.context import amount_key
from common.recon_engine.normalize import cell_text, parse_amount
from common.recon_engine.schema import headers_of, pick_column

logger = logging.getLogger(__name__)

SUPPLIER_ID_ALIASES = ["מס' ספק", "מס ספק", "Supplier"]
DETAILS_ALIASES = ["פרטים", "תיאור", "Details"]
AMOUNT_ALIASES = ["סכום", "Amount"]

TEMPLATE_SHEET = "ספקים"
TEMPLATE_ROWS: list[list[Any]] = [
    ["פרטים", "סכום", "מס' ספק"],
    ["שם ספק לדוגמה", "", "12345"],
    ["", 150.50, "98765"],
]


class SupplierConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SupplierImportCounts:
    names: int = 0
    amounts: int = 0


def load_supplier_config(path: str | Path) -> SupplierConfig:
    """
    Load the persisted supplier mapping.

    A missing file yields the built-in name map. Both snake_case keys and the
    camelCase keys of older browser exports (`nameMap` / `amountMap`) are read.
    """
    p = Path(path)
    if not p.exists():
        logger.info("Supplier config %s not found; using built-in defaults", p)
        return SupplierConfig.default()
    try:
        with p.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except json.JSONDecodeError as exc:
        raise SupplierConfigError(f"Supplier config {p} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise SupplierConfigError(f"Supplier config {p} must be a JSON object.")

    payload = {
        "name_map": raw.get("name_map", raw.get("nameMap", {})),
        "amount_map": raw.get("amount_map", raw.get("amountMap", {})),
    }
    try:
        return SupplierConfig.model_validate(payload)
    except ValidationError as exc:
        raise SupplierConfigError(f"Supplier config {p} has an invalid shape: {exc}") from exc


def save_supplier_config(config: SupplierConfig, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as handle:
        json.dump(config.model_dump(), handle, indent=2, ensure_ascii=False)
    logger.info("Saved supplier config to %s", p)
    return p


def add_name_mapping(config: SupplierConfig, details: str, supplier_id: str) -> SupplierConfig:
    """Map a details substring to a supplier id. Existing keys keep their position."""
    key = details.strip()
    supplier = supplier_id.strip()
    if not key or not supplier:
        raise SupplierConfigError("Both the details text and the supplier id are required.")
    name_map = dict(config.name_map)
    name_map[key] = supplier
    return config.model_copy(update={"name_map": name_map})


def add_amount_mapping(config: SupplierConfig, amount: Any, supplier_id: str) -> SupplierConfig:
    """Map an absolute amount (keyed to two decimals, sign ignored) to a supplier id."""
    parsed = parse_amount(amount)
    supplier = supplier_id.strip()
    if parsed is None or not supplier:
        raise SupplierConfigError(f"Need a numeric amount and a supplier id, got {amount!r} / {supplier_id!r}.")
    amount_map = dict(config.amount_map)
    amount_map[amount_key(parsed)] = supplier
    return config.model_copy(update={"amount_map": amount_map})


def import_supplier_rows(
    config: SupplierConfig,
    rows: Sequence[Mapping[str, Any]],
) -> tuple[SupplierConfig, SupplierImportCounts]:
    """
    Merge supplier rows (details and/or amount -> supplier id) into a copy of `config`.

    Rows without a supplier id are skipped. Existing keys are overwritten in
    place; new keys are appended after the configured ones.
    """
    headers = headers_of(rows)
    supplier_col = pick_column(headers, SUPPLIER_ID_ALIASES)
    details_col = pick_column(headers, DETAILS_ALIASES)
    amount_col = pick_column(headers, AMOUNT_ALIASES)

    name_map = dict(config.name_map)
    amount_map = dict(config.amount_map)
    names = 0
    amounts = 0

    if supplier_col is None:
        logger.warning("Supplier import has no supplier id column; nothing imported")
        return config.model_copy(), SupplierImportCounts()

    for row in rows:
        supplier_id = cell_text(row.get(supplier_col)).strip()
        if not supplier_id:
            continue

        if details_col is not None:
            details = cell_text(row.get(details_col)).strip()
            if details:
                name_map[details] = supplier_id
                names += 1

        if amount_col is not None:
            amount = parse_amount(row.get(amount_col))
            if amount is not None and amount != 0:
                amount_map[amount_key(amount)] = supplier_id
                amounts += 1

    logger.info("Imported %d suppliers by name and %d by amount", names, amounts)
    return SupplierConfig(name_map=name_map, amount_map=amount_map), SupplierImportCounts(names, amounts)


def write_supplier_template(path: str | Path) -> Path:
    p = Path(path)
    wb = Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET
    for row in TEMPLATE_ROWS:
        ws.append(row)
    ws.column_dimensions["A"].width = 30
    ws.column_dimensions["B"].width = 15
    ws.column_dimensions["C"].width = 15
    ws.sheet_view.rightToLeft = True

    p.parent.mkdir(parents=True, exist_ok=True)
    wb.save(p)
    logger.info("Wrote supplier import template %s", p)
    return p
