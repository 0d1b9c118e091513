from __future__ import annotations

import logging
import re
from pathlib import Path

from ..excel.header import detect_header_row
from ..excel.normalize import DEFAULT_FPS, has_metric_columns, normalize_sheet, to_objects
from ..excel.reader import open_workbook, read_sheet_grid
from ..models.series import Row, RowsBySheet
from .acquire import fetch_url_bytes, read_file_bytes

"""Whole-workbook extraction (generic path).

Every sheet goes through header detection and row normalization. Sheets that
cannot be read, have no data rows, or only carry time are left out of the
result instead of failing the call. Acquisition and workbook decoding errors
still propagate.
"""

__all__ = [
    "parse_excel_to_data_sets",
    "parse_excel_to_rows",
    "parse_excel_url_to_data_sets",
    "parse_workbook_bytes",
    "select_primary_sheet",
]

logger = logging.getLogger(__name__)

# 優先順位順
PRIMARY_SHEET_PATTERNS = (
    re.compile(r"baseball", re.IGNORECASE),
    re.compile(r"positions|velocity", re.IGNORECASE),
    re.compile(r"signal|data|sheet1", re.IGNORECASE),
)


def parse_workbook_bytes(buf: bytes, fps_guess: float = DEFAULT_FPS) -> RowsBySheet:
    """Normalize every usable sheet of an in-memory workbook.

    Raises:
        WorkbookDecodeError: the buffer is not a readable workbook
    """
    out: RowsBySheet = {}
    with open_workbook(buf) as xls:
        for sheet_name in xls.sheet_names:
            name = str(sheet_name)
            try:
                grid = read_sheet_grid(xls, sheet_name)
            except Exception as e:
                logger.warning(f"sheet={name} skipped: unreadable ({e})")
                continue
            if not grid:
                logger.debug(f"sheet={name} skipped: empty")
                continue

            header = detect_header_row(grid)
            data_rows = grid[header.data_start:]
            if not header.labels or not data_rows:
                logger.debug(f"sheet={name} skipped: no header or data rows")
                continue

            cleaned = normalize_sheet(to_objects(header.labels, data_rows), fps_guess)
            if cleaned and has_metric_columns(cleaned):
                out[name] = cleaned
                logger.debug(f"sheet={name} header_row={header.index} rows={len(cleaned)}")
            else:
                logger.debug(f"sheet={name} skipped: no numeric columns besides time")
    return out


def select_primary_sheet(sets: RowsBySheet) -> str | None:
    """Name of the sheet the legacy single-sheet API should return."""
    names = list(sets)
    for pattern in PRIMARY_SHEET_PATTERNS:
        match = next((n for n in names if pattern.search(n)), None)
        if match is not None:
            return match
    return names[0] if names else None


def parse_excel_to_data_sets(path: str | Path, fps_guess: float = DEFAULT_FPS) -> RowsBySheet:
    return parse_workbook_bytes(read_file_bytes(path), fps_guess)


def parse_excel_url_to_data_sets(
    url: str, fps_guess: float = DEFAULT_FPS, timeout: float | None = None
) -> RowsBySheet:
    return parse_workbook_bytes(fetch_url_bytes(url, timeout=timeout), fps_guess)


def parse_excel_to_rows(path: str | Path, fps_guess: float = DEFAULT_FPS) -> list[Row]:
    """Rows of the single most relevant sheet, or [] when nothing qualified."""
    sets = parse_excel_to_data_sets(path, fps_guess)
    name = select_primary_sheet(sets)
    return sets[name] if name is not None else []
