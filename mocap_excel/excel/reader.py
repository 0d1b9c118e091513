from __future__ import annotations

import io

import pandas as pd

from ..models.cell import CellGrid, to_cell

"""Workbook decoding into tagged cell grids.

pandas (openpyxl engine for .xlsx) does the actual decoding. Sheets are read
with header=None so header detection happens on our side, and every raw value
is coerced through to_cell() before leaving this module.
"""

__all__ = [
    "WorkbookDecodeError",
    "open_workbook",
    "read_sheet_grid",
    "read_workbook_grids",
]


class WorkbookDecodeError(Exception):
    """Raised when the buffer is not a readable workbook."""


def open_workbook(buf: bytes) -> pd.ExcelFile:
    """Open an in-memory workbook buffer.

    Raises:
        WorkbookDecodeError: empty buffer or a format pandas cannot read
    """
    if not buf:
        raise WorkbookDecodeError("workbook buffer is empty")
    try:
        return pd.ExcelFile(io.BytesIO(buf))
    except Exception as e:
        raise WorkbookDecodeError(f"could not open workbook: {e}") from e


def read_sheet_grid(xls: pd.ExcelFile, sheet_name: str) -> CellGrid:
    """Read one sheet as a list of rows of Cells (no header applied)."""
    df = xls.parse(sheet_name, header=None)
    return [[to_cell(v) for v in raw] for raw in df.itertuples(index=False, name=None)]


def read_workbook_grids(buf: bytes) -> dict[str, CellGrid]:
    """Decode every sheet, keyed by sheet name."""
    grids: dict[str, CellGrid] = {}
    with open_workbook(buf) as xls:
        for name in xls.sheet_names:
            grids[str(name)] = read_sheet_grid(xls, name)
    return grids
