from __future__ import annotations

import math
import re
from dataclasses import dataclass

from ..models.cell import EMPTY, Cell, parse_number
from ..models.series import Row

"""Row normalization for the whole-workbook path.

Turns objectified sheet rows (label -> Cell) into numeric Rows that always
carry ``t`` in seconds. The time source is inferred per sheet:

- a t/time column, else the first column mentioning "timestamp"; scaled
  from milliseconds when it looks like ms
- else a frame counter divided by the caller's fps guess
- else NaN

Cells that do not parse to a finite number are dropped from the Row rather
than stored as NaN.
"""

__all__ = [
    "DEFAULT_FPS",
    "MS_MIN_VALUE",
    "MS_MIN_MEAN_DELTA",
    "TimeKeys",
    "average_delta",
    "find_time_keys",
    "has_metric_columns",
    "normalize_sheet",
    "to_objects",
]

DEFAULT_FPS = 120.0
# 値が 50 を超え、かつ平均差分が 10 を超える列は ms とみなす
MS_MIN_VALUE = 50.0
MS_MIN_MEAN_DELTA = 10.0

_TIME_KEY_RE = re.compile(r"^(t|time)$", re.IGNORECASE)
_TIMESTAMP_KEY_RE = re.compile(r"timestamp", re.IGNORECASE)
_MS_KEY_RE = re.compile(r"(ms|millisecond)", re.IGNORECASE)
_FRAME_KEY_RE = re.compile(r"^frames?$", re.IGNORECASE)
_FRAME_INDEX_KEY_RE = re.compile(r"frame ?index", re.IGNORECASE)


@dataclass(frozen=True)
class TimeKeys:
    """Columns that drive time inference for one sheet (None when absent)."""
    time: str | None  # exact t/time column
    timestamp: str | None  # first column mentioning "timestamp"
    ms_marker: str | None
    frame: str | None

    @property
    def time_key(self) -> str | None:
        return self.time or self.timestamp

    @property
    def consumed(self) -> set[str]:
        """Columns used for time and therefore not copied into Rows."""
        return {k for k in (self.time_key, self.ms_marker, self.frame) if k is not None}


def to_objects(labels: list[str], rows: list[list[Cell]]) -> list[dict[str, Cell]]:
    """Zip header labels with each data row; blank labels become ``Col{i}``."""
    keys = [label or f"Col{i}" for i, label in enumerate(labels)]
    out: list[dict[str, Cell]] = []
    for r in rows:
        out.append({key: (r[i] if i < len(r) else EMPTY) for i, key in enumerate(keys)})
    return out


def find_time_keys(keys: list[str]) -> TimeKeys:
    def first(pred) -> str | None:
        return next((k for k in keys if pred(k)), None)

    return TimeKeys(
        time=first(lambda k: _TIME_KEY_RE.match(k)),
        timestamp=first(lambda k: _TIMESTAMP_KEY_RE.search(k)),
        ms_marker=first(lambda k: _MS_KEY_RE.search(k)),
        frame=first(lambda k: _FRAME_KEY_RE.match(k) or _FRAME_INDEX_KEY_RE.search(k)),
    )


def average_delta(values: list[float]) -> float:
    """Mean absolute successive difference of the finite values (NaN if < 2)."""
    vals = [v for v in values if math.isfinite(v)]
    if len(vals) < 2:
        return math.nan
    total = sum(abs(b - a) for a, b in zip(vals, vals[1:]))
    return total / (len(vals) - 1)


def _resolve_fps(fps_guess: float | None) -> float:
    if fps_guess is None or not math.isfinite(fps_guess) or fps_guess <= 0:
        return DEFAULT_FPS
    return float(fps_guess)


def normalize_sheet(rows_raw: list[dict[str, Cell]], fps_guess: float | None = DEFAULT_FPS) -> list[Row]:
    if not rows_raw:
        return []
    keys = list(rows_raw[0].keys())
    tk = find_time_keys(keys)
    fps = _resolve_fps(fps_guess)

    time_key = tk.time_key
    time_values: list[float] = []
    looks_ms_column = False
    if time_key is not None:
        time_values = [parse_number(r.get(time_key, EMPTY)) for r in rows_raw]
        looks_ms_column = average_delta(time_values) > MS_MIN_MEAN_DELTA

    skip = tk.consumed
    out: list[Row] = []
    for i, r in enumerate(rows_raw):
        if time_key is not None:
            n = time_values[i]
            looks_ms = tk.ms_marker is not None or (
                math.isfinite(n) and n > MS_MIN_VALUE and looks_ms_column
            )
            t_sec = n / 1000.0 if looks_ms else n
        elif tk.frame is not None:
            f = parse_number(r.get(tk.frame, EMPTY))
            t_sec = f / fps if math.isfinite(f) else math.nan
        else:
            t_sec = math.nan

        row: Row = {"t": t_sec}
        for k in keys:
            if k in skip:
                continue
            n = parse_number(r.get(k, EMPTY))
            if math.isfinite(n):
                row[k] = n
        out.append(row)

    return out


def has_metric_columns(rows: list[Row]) -> bool:
    """True when some row carries a numeric key besides ``t``."""
    return any(k != "t" for r in rows for k in r)
