from decimal import Decimal

from common.recon_engine import ReconConfig, SupplierConfig, reconcile
from common.recon_engine.config import DEFAULT_MATCH_COLUMN, TRANSFER_PHRASE
from common.recon_engine.models import RuleStat

CODE = "קוד פעולת בנק"
BANK = "סכום בדף"
BOOKS = "סכום בספרים"
REF1 = "אסמכתא 1"
REF2 = "אסמכתא 2"
DATE = "תאריך"
DETAILS = "פרטים"


def _row(code="", bank="", books="", ref1="", ref2="", date="", details="", **extra):
    row = {
        CODE: code,
        BANK: bank,
        BOOKS: books,
        REF1: ref1,
        REF2: ref2,
        DATE: date,
        DETAILS: details,
    }
    row.update(extra)
    return row


def test_hebrew_headers_resolve_and_scenarios_are_tagged(make_aux_row):
    primary = [
        _row(code=120, bank=-100.0, date="2024-01-05"),
        _row(ref1="OV1001", books=100.0, date="05/01/2024"),
        _row(code=485, bank=100, details=f"{TRANSFER_PHRASE} 4411"),
        _row(ref1="P1", books=55),
        _row(ref1="P2", books=45),
        _row(code=493, ref1="000123", bank=500.10),
        _row(ref1="CH", ref2="123", books=500.50),
        _row(code=999, bank=1),
    ]
    aux = [
        make_aux_row(date="2024-02-01", amount=60, payment="P1"),
        make_aux_row(date="2024-02-01", amount=40, payment="P2"),
    ]
    result = reconcile(primary, aux)

    assert result.columns.operation_code == CODE
    assert result.columns.match is None
    assert result.match_column == DEFAULT_MATCH_COLUMN
    assert result.tags == [1, 1, 3, 3, 3, 4, 4, 0]
    assert result.stats == [
        RuleStat(rule=0, count=1),
        RuleStat(rule=1, count=2),
        RuleStat(rule=3, count=3),
        RuleStat(rule=4, count=2),
    ]
    assert result.count_for(3) == 3
    assert result.count_for(7) == 0
    assert result.rule3_gaps == []


def test_gap_reports_are_surfaced_and_rows_stay_unmatched(make_aux_row):
    primary = [
        _row(code=485, bank=100, details=TRANSFER_PHRASE),
        _row(ref1="P1", books=55),
        _row(ref1="P2", books=35),
    ]
    aux = [
        make_aux_row(date="2024-02-01", amount=60, payment="P1"),
        make_aux_row(date="2024-02-01", amount=40, payment="P2"),
    ]
    result = reconcile(primary, aux)
    assert result.tags == [0, 0, 0]
    (gap,) = result.rule3_gaps
    assert gap.gap == Decimal("10.00")
    assert (gap.bank_count, gap.books_count) == (1, 2)


def test_inputs_are_not_mutated_and_tags_are_written_to_copies():
    primary = [_row(code=469, bank=-50, details="anything")]
    snapshot = dict(primary[0])
    result = reconcile(primary)
    assert primary[0] == snapshot
    assert result.rows[0][DEFAULT_MATCH_COLUMN] == 2
    assert result.rows[0][CODE] == 469


def test_existing_match_values_are_kept_and_hidden_from_every_pass():
    match_col = "מס.התאמה"
    primary = [
        _row(code=469, bank=-50, details="ישראכרט", **{match_col: "7"}),
        _row(code=469, bank=-50, details="ישראכרט", **{match_col: ""}),
        _row(code=469, bank=-50, details="ישראכרט", **{match_col: 57}),
        _row(code=469, bank=-50, details="ישראכרט", **{match_col: "A-7"}),
        _row(code=469, bank=-50, details="ישראכרט", **{match_col: 0}),
    ]
    result = reconcile(primary, supplier_config=SupplierConfig.default())
    assert result.match_column == match_col
    assert result.tags == [7, 2, 57, "A-7", 2]
    assert [r[match_col] for r in result.rows] == ["7", 2, 57, "A-7", 2]
    assert result.stats == [
        RuleStat(rule=2, count=2),
        RuleStat(rule=7, count=1),
        RuleStat(rule=57, count=1),
        RuleStat(rule="A-7", count=1),
    ]
    # Only rows tagged by this run feed the standing-order ledger.
    assert [e.debit for e in result.supplier_ledger[:-1]] == [Decimal("50"), Decimal("50")]
    assert result.supplier_ledger[-1].credit == Decimal("100.00")


def test_empty_primary_dataset_yields_empty_result():
    result = reconcile([])
    assert result.rows == []
    assert result.tags == []
    assert result.stats == []
    assert result.supplier_ledger == []
    assert result.match_column == DEFAULT_MATCH_COLUMN


def test_missing_columns_leave_rows_unmatched():
    result = reconcile([{"Foo": 1, "Bar": "x"}, {"Foo": 2, "Bar": "y"}])
    assert result.tags == [0, 0]
    assert result.stats == [RuleStat(rule=0, count=2)]
    assert result.columns.operation_code is None


def test_without_auxiliary_rows_rule_three_never_fires():
    primary = [
        _row(code=485, bank=100, details=TRANSFER_PHRASE),
        _row(ref1="P1", books=100),
    ]
    result = reconcile(primary)
    assert result.tags == [0, 0]
    assert result.rule3_gaps == []


def test_column_alias_override():
    primary = [{"Op": 469, "Amt": -10, "Txt": "x"}]
    cfg = ReconConfig(columns={"operation_code": ["Op"], "bank_amount": ["Amt"], "details": ["Txt"]})
    result = reconcile(primary, config=cfg)
    assert result.tags == [2]


def test_supplier_ledger_is_built_for_standing_orders():
    primary = [
        _row(code=469, bank=-120, details="בזק בינלאומי בע\"מ"),
        _row(code=515, bank=-80, details="unknown"),
    ]
    result = reconcile(primary, supplier_config=SupplierConfig.default())
    assert [e.supplier_id for e in result.supplier_ledger] == ["30006", "", "20001"]
    assert result.supplier_ledger[-1].credit == Decimal("120.00")
