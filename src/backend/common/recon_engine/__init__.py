"""Bank statement reconciliation engine.

This package intentionally contains only matching logic:
- Inputs are plain tabular rows (header -> value mappings), an optional
  auxiliary payments table, a supplier mapping and a run config.
- No file, spreadsheet or network I/O lives here (see `adapters`).
"""

from .config import ReconConfig, SupplierConfig
from .context import MatchContext
from .engine import reconcile
from .models import (
    ReconciliationResult,
    Rule3GapReport,
    RuleOutcome,
    RuleStat,
    StatementRow,
    SupplierLedgerEntry,
)
from .runner import ReconciliationRunner, TagConflictError

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
