from common.recon_engine.rules.r02_standing_orders import R02_STANDING_ORDERS
from common.recon_engine.config import DEFAULT_MATCH_COLUMN as MATCH


def test_standing_order_codes_are_tagged_regardless_of_amount(make_row, make_ctx):
    rows = [
        make_row(code=469, bank=-120),
        make_row(code="515", bank=""),
        make_row(code=470, bank=-120),
    ]
    res = R02_STANDING_ORDERS().match(make_ctx(rows))
    assert res.tagged == [0, 1]


def test_already_tagged_rows_are_invisible(make_row, make_ctx):
    rows = [
        make_row(code=469, bank=-120, **{MATCH: 7}),
        make_row(code=469, bank=-80, **{MATCH: ""}),
    ]
    res = R02_STANDING_ORDERS().match(make_ctx(rows))
    assert res.tagged == [1]
