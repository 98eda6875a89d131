from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from .config import ReconConfig, RuleConfigBase
from .models import AuxiliaryEvent, ColumnMapping, StatementRow

C = TypeVar("C", bound=RuleConfigBase)

CENT = Decimal("0.01")

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class MatchContext:
    rows: Tuple[StatementRow, ...]
    columns: ColumnMapping = field(default_factory=ColumnMapping)
    # None when no auxiliary dataset was supplied (or it had no usable columns).
    aux_events: Optional[Tuple[AuxiliaryEvent, ...]] = None
    config: ReconConfig = field(default_factory=ReconConfig)
    # Typed rule configs, resolved once by the runner when the context is built.
    rule_configs: Mapping[str, RuleConfigBase] = field(default_factory=dict)

    def unmatched(self) -> List[StatementRow]:
        return [row for row in self.rows if row.is_unmatched]

    def get_rule_config(self, rule_key: str, model: Type[C]) -> C:
        resolved = self.rule_configs.get(rule_key)
        if isinstance(resolved, model):
            return resolved
        return self.config.get_rule_config(rule_key, model)


def quantize_amount(value: Decimal, quantize: Optional[Decimal] = CENT) -> Decimal:
    if quantize is None:
        return value
    return value.quantize(quantize, rounding=ROUND_HALF_UP)


def amount_key(value: Decimal) -> str:
    """Absolute amount formatted to two decimals, e.g. Decimal("-100") -> "100.00"."""
    return str(quantize_amount(abs(value)))


def starts_with_any(text: str, prefixes: Iterable[str]) -> bool:
    upper = text.upper()
    return any(upper.startswith(p.upper()) for p in prefixes)


def digits_key(value: str) -> str:
    """Reference digits without punctuation or leading zeros ("CH-0012" -> "12")."""
    return _NON_DIGITS.sub("", value).lstrip("0") or "0"
