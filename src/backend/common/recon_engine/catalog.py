from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

from pydantic import BaseModel

from .registry import registry

# Built-in passes register themselves on import.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    """One matching pass as listed for reviewers: pass order, what it matches, and its tunables."""

    rule_id: int
    rule_key: str
    rule_title: str

    module: str
    class_name: str

    config_model: str
    # Default constants (operation codes, phrases, tolerances) the pass runs with.
    defaults: Dict[str, Any]
    config_schema: Dict[str, Any]


def build_catalog() -> List[RuleCatalogEntry]:
    """Registered passes in the order they tag rows."""
    entries: List[RuleCatalogEntry] = []
    for rule_id in registry.ids():
        rule_cls = registry.get(rule_id)
        cfg_model = rule_cls.config_model
        entries.append(
            RuleCatalogEntry(
                rule_id=rule_id,
                rule_key=rule_cls.rule_key,
                rule_title=rule_cls.rule_title,
                module=rule_cls.__module__,
                class_name=rule_cls.__name__,
                config_model=cfg_model.__name__,
                defaults=cfg_model().model_dump(mode="json"),
                config_schema=cfg_model.model_json_schema(),
            )
        )
    return entries


def _format_default(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _dump_markdown(catalog: List[RuleCatalogEntry]) -> str:
    lines = [
        "| Pass | Key | Title | Defaults |",
        "|---|---|---|---|",
    ]
    for entry in catalog:
        defaults = "; ".join(
            f"{name}={_format_default(value)}" for name, value in entry.defaults.items() if name != "enabled"
        )
        lines.append(f"| {entry.rule_id} | `{entry.rule_key}` | {entry.rule_title} | {defaults} |")
    return "\n".join(lines)


def _dump_json(catalog: List[RuleCatalogEntry]) -> str:
    return json.dumps([e.model_dump() for e in catalog], indent=2, ensure_ascii=False)


def _dump_yaml(catalog: List[RuleCatalogEntry]) -> str:
    import yaml

    return yaml.safe_dump([e.model_dump() for e in catalog], sort_keys=False, allow_unicode=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List the reconciliation passes with their default constants.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json", "markdown"),
        default="yaml",
        help="Output format (default: yaml). markdown prints a one-line-per-pass table without schemas.",
    )
    args = parser.parse_args(argv)

    catalog = build_catalog()
    if args.format == "json":
        print(_dump_json(catalog))
    elif args.format == "markdown":
        print(_dump_markdown(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
