from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field

UNMATCHED = 0
MAX_RULE_ID = 11

NOT_AVAILABLE = "N/A"

# Final tag of a row: 0, a rule id, or a reconciliation number already present in the input.
Tag = Union[int, str]


class ColumnMapping(BaseModel):
    """Actual header names resolved for each canonical field (None = unresolved)."""

    match: Optional[str] = None
    operation_code: Optional[str] = None
    bank_amount: Optional[str] = None
    books_amount: Optional[str] = None
    ref1: Optional[str] = None
    ref2: Optional[str] = None
    date: Optional[str] = None
    details: Optional[str] = None

    def unresolved(self) -> List[str]:
        return [name for name, value in self.model_dump().items() if value is None]


class AuxColumnMapping(BaseModel):
    date: Optional[str] = None
    amount: Optional[str] = None
    payment_ref: Optional[str] = None


class StatementRow(BaseModel):
    """One statement line after normalization.

    Amounts are `None` when the cell could not be parsed; every numeric
    predicate treats `None` as failing. `raw` is the untouched input mapping.
    `pretagged` rows arrived with a non-empty match cell and are left alone.
    """

    index: int
    match_tag: Tag = UNMATCHED
    pretagged: bool = False
    operation_code: Optional[int] = None
    bank_amount: Optional[Decimal] = None
    books_amount: Optional[Decimal] = None
    ref1: str = ""
    ref2: str = ""
    date: str = ""
    details: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_unmatched(self) -> bool:
        return self.match_tag == UNMATCHED


class AuxiliaryEvent(BaseModel):
    event_date: str
    total: Decimal = Decimal("0")
    payment_refs: Set[str] = Field(default_factory=set)


class Rule3GapReport(BaseModel):
    event_date: str
    aux_sum: Decimal
    books_sum: Union[Literal["N/A"], Decimal]
    gap: Union[Literal["N/A"], Decimal]
    bank_count: int
    books_count: int


class RuleOutcome(BaseModel):
    rule_id: int
    tagged: List[int] = Field(default_factory=list)
    gaps: List[Rule3GapReport] = Field(default_factory=list)


class RuleStat(BaseModel):
    rule: Tag
    count: int


class SupplierLedgerEntry(BaseModel):
    details: str
    amount: Optional[Decimal] = None
    supplier_id: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


class ReconciliationResult(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)
    stats: List[RuleStat] = Field(default_factory=list)
    supplier_ledger: List[SupplierLedgerEntry] = Field(default_factory=list)
    rule3_gaps: List[Rule3GapReport] = Field(default_factory=list)
    columns: ColumnMapping = Field(default_factory=ColumnMapping)
    match_column: str = ""

    def count_for(self, rule: Tag) -> int:
        for stat in self.stats:
            if stat.rule == rule:
                return stat.count
        return 0
