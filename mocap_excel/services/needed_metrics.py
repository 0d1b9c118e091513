from __future__ import annotations

import logging
import math
import re
from pathlib import Path

from ..config.loader import MetricCatalog, default_catalog
from ..excel.columns import NOT_FOUND, build_column_index, resolve_column
from ..excel.header import find_header_row_with_time
from ..excel.reader import open_workbook, read_sheet_grid
from ..models.cell import Cell, CellGrid, parse_number
from ..models.parse_result import NeededParseFailure, NeededParseResult, NeededParseSuccess
from ..models.series import NeededMetrics, Role, Series
from .acquire import fetch_url_bytes, read_file_bytes

"""Needed-metrics extraction (chart path).

Reads one sheet, finds its "Time" header row and builds, for every role in
the catalog, one Series per whitelisted metric on a shared time axis.

Nothing here raises to the caller: structural problems and unexpected errors
come back as NeededParseFailure, missing columns as warnings on a success.
"""

__all__ = [
    "NO_METRICS_REASON",
    "TIME_COLUMN_KEY",
    "TIME_MISSING_WARNING",
    "extract_needed_metrics",
    "parse_excel_to_needed_metrics",
    "parse_excel_url_to_needed_metrics",
    "parse_workbook_to_needed_metrics",
    "select_needed_sheet",
]

logger = logging.getLogger(__name__)

TIME_COLUMN_KEY = "Time"
TIME_MISSING_WARNING = "Could not find 'Time' column; times will be NaN."
NO_METRICS_REASON = "No needed metrics could be extracted."

_BASEBALL_DATA_RE = re.compile(r"baseball.*data", re.IGNORECASE)
_BASEBALL_RE = re.compile(r"baseball", re.IGNORECASE)


def select_needed_sheet(names: list[str]) -> str | None:
    for pattern in (_BASEBALL_DATA_RE, _BASEBALL_RE):
        match = next((n for n in names if pattern.search(n)), None)
        if match is not None:
            return match
    return names[0] if names else None


def _value_at(row: list[Cell], idx: int) -> float:
    if idx == NOT_FOUND or idx >= len(row):
        return math.nan
    return parse_number(row[idx])


def extract_needed_metrics(grid: CellGrid, catalog: MetricCatalog | None = None) -> NeededParseResult:
    """Build per-role series from an already decoded sheet grid."""
    catalog = catalog or default_catalog()
    header = find_header_row_with_time(grid)
    index = build_column_index(header)
    warnings: list[str] = []

    time_idx = resolve_column(index, TIME_COLUMN_KEY, catalog)
    if time_idx == NOT_FOUND:
        warnings.append(TIME_MISSING_WARNING)

    rows = grid[header.data_start:]
    # time 軸は一度だけ作り、全ロールで共有する
    time = [_value_at(r, time_idx) for r in rows]

    by_role: dict[Role, NeededMetrics] = {}
    for role in Role:
        series: list[Series] = []
        missing: list[str] = []
        for metric in catalog.metrics_for(role):
            idx = resolve_column(index, metric.key, catalog)
            if idx == NOT_FOUND:
                missing.append(metric.key)
            series.append(Series(label=metric.label, key=metric.key, values=[_value_at(r, idx) for r in rows]))
        warnings.extend(f"Missing column in sheet: {key}" for key in missing)
        by_role[role] = NeededMetrics(time=time, series=series)

    if not any(m.series for m in by_role.values()):
        return NeededParseFailure(why=NO_METRICS_REASON, warnings=warnings)

    if warnings:
        logger.warning(f"parse warnings: {warnings}")

    return NeededParseSuccess(
        pitcher=by_role[Role.PITCHER],
        hitter=by_role[Role.HITTER],
        warnings=warnings,
    )


def parse_workbook_to_needed_metrics(buf: bytes, catalog: MetricCatalog | None = None) -> NeededParseResult:
    """Needed-metrics extraction from an in-memory workbook. Never raises."""
    try:
        with open_workbook(buf) as xls:
            names = [str(n) for n in xls.sheet_names]
            sheet_name = select_needed_sheet(names)
            if sheet_name is None:
                return NeededParseFailure(why="No sheets found in workbook.")
            try:
                grid = read_sheet_grid(xls, xls.sheet_names[names.index(sheet_name)])
            except Exception as e:
                logger.warning(f"sheet={sheet_name} unreadable: {e}")
                return NeededParseFailure(why=f"Sheet '{sheet_name}' is empty or unreadable.")

        if not grid:
            return NeededParseFailure(why=f"Sheet '{sheet_name}' has no data.")

        logger.debug(f"needed metrics: sheet={sheet_name} rows={len(grid)}")
        return extract_needed_metrics(grid, catalog)
    except Exception as e:
        logger.exception(f"parse_workbook_to_needed_metrics error: {e}")
        return NeededParseFailure(why=str(e))


def parse_excel_to_needed_metrics(path: str | Path, catalog: MetricCatalog | None = None) -> NeededParseResult:
    """Read a local workbook and extract needed metrics. Never raises."""
    try:
        buf = read_file_bytes(path)
    except Exception as e:
        logger.error(f"parse_excel_to_needed_metrics error: {e}")
        return NeededParseFailure(why=str(e))
    return parse_workbook_to_needed_metrics(buf, catalog)


def parse_excel_url_to_needed_metrics(
    url: str, catalog: MetricCatalog | None = None, timeout: float | None = None
) -> NeededParseResult:
    """Fetch a workbook over HTTP and extract needed metrics. Never raises."""
    try:
        buf = fetch_url_bytes(url, timeout=timeout)
    except Exception as e:
        logger.error(f"parse_excel_url_to_needed_metrics error: {e}")
        return NeededParseFailure(why=str(e))
    return parse_workbook_to_needed_metrics(buf, catalog)
