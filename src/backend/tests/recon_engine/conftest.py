import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.recon_engine.config import ReconConfig
from common.recon_engine.context import MatchContext
from common.recon_engine.normalize import build_aux_events, normalize_rows
from common.recon_engine.runner import ReconciliationRunner
from common.recon_engine.schema import headers_of, resolve_aux_columns, resolve_columns

AUX_DATE = "תאריך פריקה"
AUX_AMOUNT = "אחרי ניכוי"
AUX_PAYMENT = "מס' תשלום"
MATCH = "התאמה"


@pytest.fixture
def make_row():
    def _make(
        *,
        code="",
        bank="",
        books="",
        ref1="",
        ref2="",
        date="",
        details="",
        **extra,
    ) -> dict:
        row = {
            "Bank Code": code,
            "Bank Amount": bank,
            "Books Amount": books,
            "Ref1": ref1,
            "Ref2": ref2,
            "Date": date,
            "Details": details,
        }
        row.update(extra)
        return row

    return _make


@pytest.fixture
def make_aux_row():
    def _make(*, date, amount, payment="") -> dict:
        return {AUX_DATE: date, AUX_AMOUNT: amount, AUX_PAYMENT: payment}

    return _make


@pytest.fixture
def make_ctx():
    def _make(
        rows: list[dict],
        *,
        aux_rows: list[dict] | None = None,
        client_rules: dict | None = None,
        rules=None,
    ) -> MatchContext:
        cfg = ReconConfig(rules=client_rules or {})
        columns = resolve_columns(headers_of(rows), cfg.column_aliases())
        aux_events = None
        if aux_rows is not None:
            aux_columns = resolve_aux_columns(headers_of(aux_rows), cfg.aux_column_aliases())
            aux_events = build_aux_events(aux_rows, aux_columns)
        return ReconciliationRunner(rules).build_context(
            rows=normalize_rows(rows, columns),
            columns=columns,
            aux_events=aux_events,
            config=cfg,
        )

    return _make
