from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Union

import numpy as np
import pandas as pd

"""Tagged cell values for decoded spreadsheet grids.

The decoder hands back whatever pandas/openpyxl produced (str, int, float,
numpy scalars, Timestamp, NaN, NaT, None). Everything downstream works on the
closed union below instead, so each cell is coerced exactly once in to_cell().
"""

__all__ = [
    "Cell",
    "CellGrid",
    "DateLike",
    "EMPTY",
    "Empty",
    "Number",
    "Text",
    "cell_label",
    "parse_number",
    "to_cell",
]


@dataclass(frozen=True)
class Empty:
    """Blank cell (None, NaN, NaT)."""


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Text:
    value: str

    @property
    def stripped(self) -> str:
        return self.value.strip()

    @property
    def is_blank(self) -> bool:
        return self.value.strip() == ""


@dataclass(frozen=True)
class DateLike:
    value: datetime


Cell = Union[Empty, Number, Text, DateLike]
CellGrid = list[list[Cell]]

EMPTY = Empty()


def to_cell(raw: Any) -> Cell:
    """Coerce one raw decoder value into a Cell."""
    if raw is None:
        return EMPTY
    if isinstance(raw, (Empty, Number, Text, DateLike)):
        return raw
    # bool は int のサブクラスなので先に判定
    if isinstance(raw, (bool, np.bool_)):
        return Text("TRUE" if raw else "FALSE")
    if isinstance(raw, (int, float, np.integer, np.floating)):
        value = float(raw)
        if math.isnan(value):
            return EMPTY
        return Number(value)
    if isinstance(raw, str):
        return Text(raw)
    if raw is pd.NaT:
        return EMPTY
    if isinstance(raw, datetime):
        return DateLike(raw)
    if isinstance(raw, date):
        return DateLike(datetime(raw.year, raw.month, raw.day))
    if isinstance(raw, time):
        return Text(raw.isoformat())
    try:
        if pd.isna(raw):
            return EMPTY
    except (TypeError, ValueError):
        pass
    return Text(str(raw))


def parse_number(cell: Cell) -> float:
    """Numeric value of a cell, NaN when absent or unparseable.

    Text is trimmed and thousands separators are removed before parsing.
    Non-finite results are treated as absent.
    """
    if isinstance(cell, Number):
        return cell.value if math.isfinite(cell.value) else math.nan
    if isinstance(cell, Text):
        s = cell.value.strip().replace(",", "")
        if not s or "_" in s:
            return math.nan
        try:
            n = float(s)
        except ValueError:
            return math.nan
        return n if math.isfinite(n) else math.nan
    return math.nan


def cell_label(cell: Cell) -> str:
    """Render a cell as header text ("" for blanks, 3 rather than 3.0)."""
    if isinstance(cell, Empty):
        return ""
    if isinstance(cell, Text):
        return cell.value
    if isinstance(cell, Number):
        v = cell.value
        if math.isfinite(v) and v.is_integer():
            return str(int(v))
        return repr(v)
    return cell.value.isoformat()
