from __future__ import annotations

from ..config import TransmittedChequeRuleConfig
from ..registry import register_rule
from .details_phrase import DetailsPhraseRule


@register_rule
class R08_TRANSMITTED_CHEQUES(DetailsPhraseRule):
    rule_id = 8
    rule_key = "R08-TRANSMITTED-CHEQUES"
    rule_title = "Transmitted cheque deposits"
    config_model = TransmittedChequeRuleConfig
