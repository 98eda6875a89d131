from __future__ import annotations

from ..config import MachineChequeRuleConfig
from ..registry import register_rule
from .details_phrase import DetailsPhraseRule


@register_rule
class R09_MACHINE_CHEQUES(DetailsPhraseRule):
    rule_id = 9
    rule_key = "R09-MACHINE-CHEQUES"
    rule_title = "Machine cheque deposits"
    config_model = MachineChequeRuleConfig
