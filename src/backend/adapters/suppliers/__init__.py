"""Supplier mapping persistence, single and bulk additions, and the import template."""

from .config_store import (
    SupplierConfigError,
    SupplierImportCounts,
    add_amount_mapping,
    add_name_mapping,
    import_supplier_rows,
    load_supplier_config,
    save_supplier_config,
    write_supplier_template,
)

__all__ = [
    "SupplierConfigError",
    "SupplierImportCounts",
    "add_amount_mapping",
    "add_name_mapping",
    "import_supplier_rows",
    "load_supplier_config",
    "save_supplier_config",
    "write_supplier_template",
]
