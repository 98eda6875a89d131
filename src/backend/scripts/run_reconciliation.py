from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from adapters.suppliers import (  # noqa: E402
    SupplierConfigError,
    add_amount_mapping,
    add_name_mapping,
    import_supplier_rows,
    load_supplier_config,
    save_supplier_config,
    write_supplier_template,
)
from adapters.workbook import WorkbookAdapterError, read_table, write_result_workbook  # noqa: E402
from common.recon_engine import ReconConfig, ReconciliationResult, SupplierConfig, reconcile  # noqa: E402
from common.recon_engine.stats import matched_count, unmatched_count  # noqa: E402
from common.recon_engine.supplier import TOTALS_SUPPLIER_ID  # noqa: E402
from common.settings import get_run_settings  # noqa: E402

logger = logging.getLogger("run_reconciliation")

BASE_NAME = "reconciliation_result"


def _load_json(path: Path):
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def load_rules_config(path: str | Path | None) -> ReconConfig:
    if not path:
        return ReconConfig()
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"Rules config not found: {p}")
    try:
        config = ReconConfig.model_validate(_load_json(p))
        # Alias overrides naming unknown fields fail here rather than mid-run.
        config.column_aliases()
        config.aux_column_aliases()
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Rules config {p} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise SystemExit(f"Rules config {p} has an invalid shape: {exc}") from exc
    except ValueError as exc:
        raise SystemExit(f"Rules config {p}: {exc}") from exc
    return config


def run_reconciliation_from_files(
    main_path: str | Path,
    *,
    aux_path: str | Path | None = None,
    sheet_name: str | None = None,
    supplier_config: SupplierConfig | None = None,
    config: ReconConfig | None = None,
) -> ReconciliationResult:
    primary = read_table(main_path, sheet_name=sheet_name)
    aux = read_table(aux_path) if aux_path else None
    return reconcile(primary, aux, supplier_config, config)


def _write_markdown(result: ReconciliationResult, out_path: Path) -> None:
    lines = [
        "# Bank Reconciliation",
        "",
        f"Rows: {len(result.tags)} | matched: {matched_count(result.stats)} | "
        f"unmatched: {unmatched_count(result.stats)}",
        "",
        "## Rows per rule",
    ]
    for stat in result.stats:
        label = "unmatched" if stat.rule == 0 else f"rule {stat.rule}"
        lines.append(f"- {label}: {stat.count}")

    lines.append("")
    lines.append("## Rule 3 gaps")
    if not result.rule3_gaps:
        lines.append("- none")
    for gap in result.rule3_gaps:
        lines.append(
            f"- {gap.event_date}: aux={gap.aux_sum} books={gap.books_sum} gap={gap.gap} "
            f"(bank rows={gap.bank_count}, book rows={gap.books_count})"
        )

    entries = [e for e in result.supplier_ledger if e.supplier_id != TOTALS_SUPPLIER_ID]
    resolved = [e for e in entries if e.supplier_id]
    totals = [e for e in result.supplier_ledger if e.supplier_id == TOTALS_SUPPLIER_ID]
    lines.append("")
    lines.append("## Standing orders")
    lines.append(f"- Rows: {len(entries)}")
    lines.append(f"- With supplier: {len(resolved)}")
    if totals:
        lines.append(f"- Credit total: {totals[0].credit}")
    unresolved = [e for e in entries if not e.supplier_id]
    if unresolved:
        lines.append("- Without supplier:")
        for entry in unresolved:
            lines.append(f"  - {entry.details} ({entry.amount})")
    out_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    settings = get_run_settings()
    parser = argparse.ArgumentParser(
        description="Reconcile a bank statement workbook and write XLSX/JSON/MD outputs."
    )
    parser.add_argument("--main", default=None, help="Primary statement file (.xlsx or .csv).")
    parser.add_argument("--aux", default=None, help="Optional auxiliary payments file for batch transfers.")
    parser.add_argument("--sheet", default=None, help="Sheet to read from the primary workbook.")
    parser.add_argument(
        "--supplier-config",
        default=settings.supplier_config_path,
        help="Supplier mapping JSON (default: RECON_SUPPLIER_CONFIG_PATH).",
    )
    parser.add_argument(
        "--rules-config",
        default=settings.rules_config_path,
        help="JSON rule/column overrides (default: RECON_RULES_CONFIG_PATH).",
    )
    parser.add_argument(
        "--output-dir",
        default=settings.output_dir,
        help="Directory for result files (default: RECON_OUTPUT_DIR or cwd).",
    )
    parser.add_argument(
        "--import-suppliers",
        default=None,
        help="Sheet of supplier rows to merge into the supplier config before running.",
    )
    parser.add_argument(
        "--add-name",
        nargs=2,
        metavar=("DETAILS", "SUPPLIER_ID"),
        default=None,
        help="Map a details substring to a supplier id and save the supplier config.",
    )
    parser.add_argument(
        "--add-amount",
        nargs=2,
        metavar=("AMOUNT", "SUPPLIER_ID"),
        default=None,
        help="Map an absolute amount to a supplier id and save the supplier config.",
    )
    parser.add_argument(
        "--write-template",
        default=None,
        help="Write the supplier import template to this path.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.write_template:
        print(f"Wrote {write_supplier_template(args.write_template)}")

    try:
        supplier_config = load_supplier_config(args.supplier_config)
        if args.import_suppliers:
            supplier_config, counts = import_supplier_rows(supplier_config, read_table(args.import_suppliers))
            save_supplier_config(supplier_config, args.supplier_config)
            print(f"Imported {counts.names} suppliers by name and {counts.amounts} by amount.")
        if args.add_name or args.add_amount:
            if args.add_name:
                supplier_config = add_name_mapping(supplier_config, *args.add_name)
            if args.add_amount:
                supplier_config = add_amount_mapping(supplier_config, *args.add_amount)
            save_supplier_config(supplier_config, args.supplier_config)
            print(f"Saved supplier config to {args.supplier_config}")

        if not args.main:
            if args.write_template or args.import_suppliers or args.add_name or args.add_amount:
                return 0
            raise SystemExit("--main is required to run a reconciliation.")

        result = run_reconciliation_from_files(
            args.main,
            aux_path=args.aux,
            sheet_name=args.sheet,
            supplier_config=supplier_config,
            config=load_rules_config(args.rules_config),
        )
    except (WorkbookAdapterError, SupplierConfigError) as exc:
        raise SystemExit(str(exc)) from exc

    output_dir = Path(args.output_dir).resolve()
    output_dir.mkdir(parents=True, exist_ok=True)
    out_xlsx = output_dir / f"{BASE_NAME}.xlsx"
    out_json = output_dir / f"{BASE_NAME}.json"
    out_md = output_dir / f"{BASE_NAME}.md"

    write_result_workbook(result, out_xlsx)
    out_json.write_text(
        json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    _write_markdown(result, out_md)

    print(f"Wrote {out_xlsx}")
    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
