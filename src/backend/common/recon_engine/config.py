from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)


# Header aliases, in priority order. Exact matches win over substring matches.
DEFAULT_COLUMN_ALIASES: Dict[str, List[str]] = {
    "match": ["מס.התאמה", "מס. התאמה", "מס התאמה", "מספר התאמה", "התאמה"],
    "operation_code": ["קוד פעולת בנק", "קוד פעולה", "קוד פעולת", "Bank Code"],
    "bank_amount": ["סכום בדף", "סכום דף", "סכום בבנק", "סכום תנועת בנק", "Bank Amount"],
    "books_amount": ["סכום בספרים", "סכום בספר", "סכום ספרים", "Books Amount"],
    "ref1": ["אסמכתא 1", "אסמכתא1", "אסמכתא", "אסמכתה", "Ref1"],
    "ref2": ["אסמכתא 2", "אסמכתא2", "אסמכתא-2", "אסמכתה 2", "Ref2"],
    "date": ["תאריך מאזן", "תאריך ערך", "תאריך", "Date"],
    "details": ["פרטים", "תיאור", "שם ספק", "Details", "תאור"],
}

DEFAULT_AUX_COLUMN_ALIASES: Dict[str, List[str]] = {
    "date": ["תאריך פריקה", "תאריך", "פריקה"],
    "amount": ["אחרי ניכוי", "אחרי", "סכום"],
    "payment_ref": ["מס' תשלום", "מס תשלום", "מספר תשלום"],
}

# Written back when the primary dataset has no match column of its own.
DEFAULT_MATCH_COLUMN = "התאמה"

TRANSFER_CODE = 485
TRANSFER_PHRASE = "העב' במקבץ-נט"

DEFAULT_SUPPLIER_NAME_MAP: Dict[str, str] = {
    "בזק בינלאומי ב": "30006",
    "פרי ירוחם חב'": "34714",
    "סלקום ישראל בע": "30055",
    "בזק-הוראות קבע": "34746",
    "דרך ארץ הייווי": "34602",
    "גלובס פבלישר ע": "30067",
    "פלאפון תקשורת": "30030",
    "מרכז הכוכביות": "30002",
    "ע.אשדוד-מסים": "30056",
    'א.ש.א(בס"ד)אחז': "30050",
    "או.פי.ג'י(מ.כ)": "30047",
    "רשות האכיפה וה": "67-1",
    "קול ביז מילניו": "30053",
    "פריוריטי סופטו": "30097",
    "אינטרנט רימון": "34636",
    'עו"דכנית בע"מ': "30018",
    "עיריית רמת גן": "30065",
    "פז חברת נפט בע": "34811",
    "ישראכרט": "28002",
    "חברת החשמל ליש": "30015",
    "הפניקס ביטוח": "34686",
    "מימון ישיר מקב": "34002",
    "שלמה טפר": "30247",
    "נמרוד תבור עורך-דין": "30038",
    "עיריית בית שמש": "34805",
    "פז קמעונאות וא": "34811",
    "הו\"ק הלו' רבית": "8004",
}


class RuleConfigBase(BaseModel):
    enabled: bool = True


class UniqueAmountDateRuleConfig(RuleConfigBase):
    bank_codes: List[int] = Field(default_factory=lambda: [120, 175])
    books_ref_prefixes: List[str] = Field(default_factory=lambda: ["OV", "RC"])


class StandingOrderRuleConfig(RuleConfigBase):
    codes: List[int] = Field(default_factory=lambda: [469, 515])


class AggregateTransferRuleConfig(RuleConfigBase):
    transfer_code: int = TRANSFER_CODE
    transfer_phrase: str = TRANSFER_PHRASE
    # Exact two-decimal equality by default.
    amount_epsilon: Decimal = Decimal("0.00")


class CheckClearingRuleConfig(RuleConfigBase):
    check_code: int = 493
    books_ref_prefix: str = "CH"
    # Inclusive: a difference of exactly this amount still matches.
    amount_tolerance: Decimal = Decimal("0.50")


class SmallAmountRuleConfig(RuleConfigBase):
    codes: List[int] = Field(default_factory=lambda: [453, 472, 473, 124])
    ceiling: Decimal = Decimal("1000")


class DetailsPhraseRuleConfig(RuleConfigBase):
    operation_code: int
    details: str


class CounterpartyDebitRuleConfig(DetailsPhraseRuleConfig):
    operation_code: int = 175
    details: str = 'פאיימי בע"מ'


class CustodyChequesRuleConfig(DetailsPhraseRuleConfig):
    operation_code: int = 143
    details: str = "שיקים ממשמרת"


class TransmittedChequeRuleConfig(DetailsPhraseRuleConfig):
    operation_code: int = 191
    details: str = "הפק' שיק-שידור"


class MachineChequeRuleConfig(DetailsPhraseRuleConfig):
    operation_code: int = 205
    details: str = "הפק.שיק במכונה"


class NonZeroCodeSetRuleConfig(RuleConfigBase):
    codes: List[int] = Field(default_factory=lambda: [191, 132, 396])


class ResidualTransferRuleConfig(RuleConfigBase):
    transfer_code: int = TRANSFER_CODE
    books_ref_prefix: str = "BT"


class SupplierConfig(BaseModel):
    """Supplier lookup tables for standing-order rows.

    `name_map` is scanned in insertion order (first substring hit wins);
    `amount_map` is keyed by the absolute amount formatted to two decimals.
    """

    name_map: Dict[str, str] = Field(default_factory=dict)
    amount_map: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def default(cls) -> "SupplierConfig":
        return cls(name_map=dict(DEFAULT_SUPPLIER_NAME_MAP))


class ReconConfig(BaseModel):
    """Per-run overrides for the matching engine.

    Rules pull their typed config via `get_rule_config`. Column alias overrides
    replace the default alias list for the fields they name.
    """

    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    columns: Dict[str, List[str]] = Field(default_factory=dict)
    aux_columns: Dict[str, List[str]] = Field(default_factory=dict)

    def get_rule_config(
        self,
        rule_key: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        if rule_key not in self.rules:
            if default is not None:
                return default
            return model()  # type: ignore[call-arg]
        raw = self.rules.get(rule_key, {})
        return model.model_validate(raw)

    def column_aliases(self) -> Dict[str, List[str]]:
        return _merge_aliases(DEFAULT_COLUMN_ALIASES, self.columns)

    def aux_column_aliases(self) -> Dict[str, List[str]]:
        return _merge_aliases(DEFAULT_AUX_COLUMN_ALIASES, self.aux_columns)


def _merge_aliases(defaults: Dict[str, List[str]], overrides: Dict[str, List[str]]) -> Dict[str, List[str]]:
    unknown = sorted(set(overrides) - set(defaults))
    if unknown:
        raise ValueError(f"Unknown column fields in alias overrides: {unknown}")
    merged = {field: list(aliases) for field, aliases in defaults.items()}
    for field, aliases in overrides.items():
        merged[field] = list(aliases)
    return merged
