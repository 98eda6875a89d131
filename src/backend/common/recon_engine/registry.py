from __future__ import annotations

from typing import Dict, Iterable, Type

from .rule import Rule


class RuleRegistry:
    def __init__(self):
        self._rules: Dict[int, Type[Rule]] = {}

    def register(self, rule_cls: Type[Rule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError("Rule class missing rule_id")
        if rule_id in self._rules:
            raise ValueError(f"Duplicate rule_id registered: {rule_id}")
        rule_key = getattr(rule_cls, "rule_key", "")
        if any(cls.rule_key == rule_key for cls in self._rules.values()):
            raise ValueError(f"Duplicate rule_key registered: {rule_key}")
        self._rules[rule_id] = rule_cls

    def create_all(self) -> list[Rule]:
        # Pass order is the rule id order, whatever the import order was.
        return [self._rules[rule_id]() for rule_id in self.ids()]

    def get(self, rule_id: int) -> Type[Rule]:
        return self._rules[rule_id]

    def ids(self) -> Iterable[int]:
        return sorted(self._rules)


registry = RuleRegistry()


def register_rule(rule_cls: Type[Rule]) -> Type[Rule]:
    registry.register(rule_cls)
    return rule_cls
