from decimal import Decimal

from common.recon_engine.config import SupplierConfig
from common.recon_engine.models import StatementRow
from common.recon_engine.supplier import (
    TOTALS_DETAILS,
    TOTALS_SUPPLIER_ID,
    build_supplier_ledger,
    resolve_supplier,
)


def _standing_order(index, details, amount, tag=2):
    return StatementRow(
        index=index,
        match_tag=tag,
        operation_code=469,
        bank_amount=Decimal(amount) if amount is not None else None,
        details=details,
    )


def test_name_map_takes_precedence_over_amount_map():
    cfg = SupplierConfig(name_map={"חשמל": "111"}, amount_map={"50.00": "222"})
    assert resolve_supplier("חברת החשמל", Decimal("-50"), cfg) == "111"
    assert resolve_supplier("other", Decimal("-50"), cfg) == "222"
    assert resolve_supplier("other", Decimal("-51"), cfg) == ""
    assert resolve_supplier("other", None, cfg) == ""


def test_name_map_is_scanned_in_insertion_order():
    cfg = SupplierConfig(name_map={"פז": "1", "פז קמעונאות": "2"})
    assert resolve_supplier("פז קמעונאות וא", None, cfg) == "1"


def test_ledger_only_includes_standing_orders_and_adds_totals():
    cfg = SupplierConfig(name_map={"בזק": "30006"}, amount_map={"19.99": "555"})
    rows = [
        _standing_order(0, "בזק", "-100.004"),
        _standing_order(1, "?", "-19.99"),
        _standing_order(2, "nobody", "-7"),
        _standing_order(3, "בזק", "-999", tag=5),
    ]
    ledger = build_supplier_ledger(rows, cfg)

    assert [e.supplier_id for e in ledger] == ["30006", "555", "", TOTALS_SUPPLIER_ID]
    assert ledger[0].debit == Decimal("100.004")
    assert ledger[0].credit == Decimal("0")
    assert ledger[2].debit == Decimal("7")
    totals = ledger[-1]
    assert totals.details == TOTALS_DETAILS
    assert totals.debit == Decimal("0")
    assert totals.credit == Decimal("119.99")


def test_no_totals_entry_when_nothing_resolves():
    ledger = build_supplier_ledger([_standing_order(0, "nobody", "-7")], SupplierConfig())
    assert len(ledger) == 1
    assert ledger[0].supplier_id == ""


def test_unparseable_amount_has_zero_debit():
    ledger = build_supplier_ledger([_standing_order(0, "x", None)], SupplierConfig(name_map={"x": "9"}))
    assert ledger[0].debit == Decimal("0")
    # Total is zero, so no credit line.
    assert len(ledger) == 1


def test_default_supplier_config_carries_known_names():
    cfg = SupplierConfig.default()
    assert cfg.name_map["ישראכרט"] == "28002"
    assert cfg.amount_map == {}


def test_rows_arriving_with_tag_two_are_not_standing_orders_of_this_run():
    row = _standing_order(0, "x", "-10")
    carried = row.model_copy(update={"pretagged": True})
    assert build_supplier_ledger([carried], SupplierConfig(name_map={"x": "9"})) == []
