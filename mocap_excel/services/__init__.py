"""Extraction services: acquisition, whole-workbook and needed-metrics paths."""

from .acquire import AcquisitionError
from .needed_metrics import (
    extract_needed_metrics,
    parse_excel_to_needed_metrics,
    parse_excel_url_to_needed_metrics,
    parse_workbook_to_needed_metrics,
)
from .workbook import (
    parse_excel_to_data_sets,
    parse_excel_to_rows,
    parse_excel_url_to_data_sets,
    parse_workbook_bytes,
    select_primary_sheet,
)

__all__ = [
    "AcquisitionError",
    "extract_needed_metrics",
    "parse_excel_to_data_sets",
    "parse_excel_to_needed_metrics",
    "parse_excel_to_rows",
    "parse_excel_url_to_data_sets",
    "parse_excel_url_to_needed_metrics",
    "parse_workbook_bytes",
    "parse_workbook_to_needed_metrics",
    "select_primary_sheet",
]
