from __future__ import annotations

from ..config import CustodyChequesRuleConfig
from ..registry import register_rule
from .details_phrase import DetailsPhraseRule


@register_rule
class R07_CUSTODY_CHEQUES(DetailsPhraseRule):
    rule_id = 7
    rule_key = "R07-CUSTODY-CHEQUES"
    rule_title = "Cheques drawn from custody"
    config_model = CustodyChequesRuleConfig
