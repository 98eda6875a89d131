"""Spreadsheet ingestion/export around the reconciliation engine."""

from .result_workbook import write_result_workbook
from .tables import WorkbookAdapterError, read_table

__all__ = [
    "WorkbookAdapterError",
    "read_table",
    "write_result_workbook",
]
