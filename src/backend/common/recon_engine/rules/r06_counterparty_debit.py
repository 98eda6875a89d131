from __future__ import annotations

from ..config import CounterpartyDebitRuleConfig
from ..registry import register_rule
from .details_phrase import DetailsPhraseRule


@register_rule
class R06_COUNTERPARTY_DEBIT(DetailsPhraseRule):
    rule_id = 6
    rule_key = "R06-COUNTERPARTY-DEBIT"
    rule_title = "Debits to the fixed payment-processor counterparty"
    config_model = CounterpartyDebitRuleConfig
