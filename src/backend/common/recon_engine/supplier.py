from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from .config import SupplierConfig
from .context import amount_key, quantize_amount
from .models import StatementRow, SupplierLedgerEntry

STANDING_ORDER_TAG = 2

# Pseudo supplier carrying the credit side of the standing-order ledger.
TOTALS_SUPPLIER_ID = "20001"
TOTALS_DETAILS = "סה\"כ זכות – עם מס' ספק"


def resolve_supplier(details: str, amount: Optional[Decimal], config: SupplierConfig) -> str:
    """Name map first (insertion order, substring match), then the amount map."""
    for key, supplier_id in config.name_map.items():
        if key and key in details:
            return supplier_id
    if amount is not None:
        return config.amount_map.get(amount_key(amount), "")
    return ""


def build_supplier_ledger(rows: Sequence[StatementRow], config: SupplierConfig) -> List[SupplierLedgerEntry]:
    entries: List[SupplierLedgerEntry] = []
    total_with_supplier = Decimal("0")

    for row in rows:
        if row.pretagged or row.match_tag != STANDING_ORDER_TAG:
            continue
        supplier_id = resolve_supplier(row.details, row.bank_amount, config)
        debit = abs(row.bank_amount) if row.bank_amount is not None else Decimal("0")
        if supplier_id:
            total_with_supplier += debit
        entries.append(
            SupplierLedgerEntry(
                details=row.details,
                amount=row.bank_amount,
                supplier_id=supplier_id,
                debit=debit,
                credit=Decimal("0"),
            )
        )

    if total_with_supplier > 0:
        entries.append(
            SupplierLedgerEntry(
                details=TOTALS_DETAILS,
                amount=Decimal("0"),
                supplier_id=TOTALS_SUPPLIER_ID,
                debit=Decimal("0"),
                credit=quantize_amount(total_with_supplier),
            )
        )
    return entries
