from common.recon_engine import reconcile
from common.recon_engine.config import (
    CounterpartyDebitRuleConfig,
    CustodyChequesRuleConfig,
    MachineChequeRuleConfig,
    TransmittedChequeRuleConfig,
)
from common.recon_engine.rules.r05_small_amounts import R05_SMALL_AMOUNTS
from common.recon_engine.rules.r06_counterparty_debit import R06_COUNTERPARTY_DEBIT
from common.recon_engine.rules.r07_custody_cheques import R07_CUSTODY_CHEQUES
from common.recon_engine.rules.r08_transmitted_cheques import R08_TRANSMITTED_CHEQUES
from common.recon_engine.rules.r09_machine_cheques import R09_MACHINE_CHEQUES
from common.recon_engine.rules.r10_nonzero_code_set import R10_NONZERO_CODE_SET


def test_small_amounts_between_zero_and_ceiling(make_row, make_ctx):
    rows = [
        make_row(code=453, bank="1000"),
        make_row(code=472, bank="0.01"),
        make_row(code=473, bank="1000.01"),
        make_row(code=124, bank="0"),
        make_row(code=124, bank="-5"),
        make_row(code=999, bank="5"),
    ]
    res = R05_SMALL_AMOUNTS().match(make_ctx(rows))
    assert res.tagged == [0, 1]


def test_counterparty_debit_requires_exact_details(make_row, make_ctx):
    name = CounterpartyDebitRuleConfig().details
    rows = [
        make_row(code=175, bank="-20", details=name),
        make_row(code=175, bank="-20", details=f"{name} "),
        make_row(code=175, bank="20", details=name),
    ]
    res = R06_COUNTERPARTY_DEBIT().match(make_ctx(rows))
    assert res.tagged == [0]


def test_cheque_phrase_rules_use_their_own_code_and_phrase(make_row, make_ctx):
    rows = [
        make_row(code=143, bank="-1", details=CustodyChequesRuleConfig().details),
        make_row(code=191, bank="-1", details=TransmittedChequeRuleConfig().details),
        make_row(code=205, bank="-1", details=MachineChequeRuleConfig().details),
        make_row(code=205, bank="-1", details=CustodyChequesRuleConfig().details),
    ]
    ctx = make_ctx(rows)
    assert R07_CUSTODY_CHEQUES().match(ctx).tagged == [0]
    assert R08_TRANSMITTED_CHEQUES().match(ctx).tagged == [1]
    assert R09_MACHINE_CHEQUES().match(ctx).tagged == [2]


def test_nonzero_code_set_accepts_either_sign(make_row, make_ctx):
    rows = [
        make_row(code=191, bank="12"),
        make_row(code=132, bank="-12"),
        make_row(code=396, bank="0"),
        make_row(code=396, bank="abc"),
    ]
    res = R10_NONZERO_CODE_SET().match(make_ctx(rows))
    assert res.tagged == [0, 1]


def test_first_satisfied_predicate_wins(make_row):
    rows = [
        # Qualifies for rule 8 and rule 10: rule 8 runs first.
        make_row(code=191, bank="-30", details=TransmittedChequeRuleConfig().details),
        # Only rule 10.
        make_row(code=191, bank="30", details="other"),
        # Rule 6 wins over nothing else.
        make_row(code=175, bank="-5", details=CounterpartyDebitRuleConfig().details),
    ]
    result = reconcile(rows)
    assert result.tags == [8, 10, 6]


def test_phrase_rule_overrides(make_row, make_ctx):
    rows = [make_row(code=143, bank="-1", details="custom phrase")]
    client_rules = {"R07-CUSTODY-CHEQUES": {"details": "custom phrase"}}
    res = R07_CUSTODY_CHEQUES().match(make_ctx(rows, client_rules=client_rules))
    assert res.tagged == [0]
