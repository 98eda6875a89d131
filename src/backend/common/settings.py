from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

SUPPLIER_CONFIG_DEFAULT = ".recon_suppliers.json"


@dataclass(frozen=True)
class RunSettings:
    supplier_config_path: str
    rules_config_path: str
    output_dir: str
    log_level: str


def get_run_settings() -> RunSettings:
    """
    Defaults for the reconciliation run script, read from the environment (.env honoured):
      RECON_SUPPLIER_CONFIG_PATH, RECON_RULES_CONFIG_PATH, RECON_OUTPUT_DIR, RECON_LOG_LEVEL
    """
    return RunSettings(
        supplier_config_path=os.getenv("RECON_SUPPLIER_CONFIG_PATH", SUPPLIER_CONFIG_DEFAULT).strip(),
        rules_config_path=os.getenv("RECON_RULES_CONFIG_PATH", "").strip(),
        output_dir=os.getenv("RECON_OUTPUT_DIR", ".").strip() or ".",
        log_level=_log_level(os.getenv("RECON_LOG_LEVEL", "INFO")),
    )


def _log_level(value: str) -> str:
    level = value.strip().upper() or "INFO"
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"RECON_LOG_LEVEL must be a logging level name, got '{value}'.")
    return level
