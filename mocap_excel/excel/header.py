from __future__ import annotations

import re

from ..models.cell import Cell, CellGrid, Text, cell_label
from ..models.header import HeaderRow

"""Header row detection.

Two detectors with different tolerances:

detect_header_row()
    Scores each of the first HEADER_SCAN_ROWS rows and picks the most
    header-like one. Used by the whole-workbook path.
find_header_row_with_time()
    Takes the first row holding a literal "Time" cell, else row 0. Used by
    the needed-metrics path, whose exports always carry that column.
"""

__all__ = [
    "HEADER_SCAN_ROWS",
    "canonical_label",
    "dedupe_labels",
    "detect_header_row",
    "find_header_row_with_time",
    "score_header_row",
]

HEADER_SCAN_ROWS = 20

_TIME_LIKE_RE = re.compile(r"^(t|time|timestamp)$", re.IGNORECASE)
_TIME_RE = re.compile(r"^time$", re.IGNORECASE)
_FRAME_RE = re.compile(r"frame", re.IGNORECASE)
_FRAME_EXACT_RE = re.compile(r"^frames?$", re.IGNORECASE)
_TIMESTAMP_EXACT_RE = re.compile(r"^timestamp$", re.IGNORECASE)
_T_EXACT_RE = re.compile(r"^(t|time)$", re.IGNORECASE)


def _texts(row: list[Cell]) -> list[str]:
    return [c.stripped for c in row if isinstance(c, Text)]


def score_header_row(row: list[Cell]) -> int:
    """Header-likeness of one row.

    +1 per non-empty text cell, +3 for a t/time/timestamp cell, +2 for any
    cell mentioning "frame", -3 when the row has at most one text cell
    (title rows).
    """
    texts = _texts(row)
    non_empty = sum(1 for s in texts if s != "")
    has_time = any(_TIME_LIKE_RE.match(s) for s in texts)
    has_frame = any(_FRAME_RE.search(s) for s in texts)
    score = non_empty + (3 if has_time else 0) + (2 if has_frame else 0)
    if non_empty <= 1:
        score -= 3
    return score


def canonical_label(label: str) -> str:
    s = label.strip()
    if _FRAME_EXACT_RE.match(s):
        return "Frame"
    if _TIMESTAMP_EXACT_RE.match(s):
        return "Timestamp"
    if _T_EXACT_RE.match(s):
        return "Time"
    return s


def dedupe_labels(labels: list[str]) -> list[str]:
    """Suffix repeated labels with " (2)", " (3)", ...; blanks pass through."""
    seen: dict[str, int] = {}
    out: list[str] = []
    for label in labels:
        if not label:
            out.append(label)
            continue
        count = seen.get(label, 0) + 1
        seen[label] = count
        out.append(label if count == 1 else f"{label} ({count})")
    return out


def detect_header_row(grid: CellGrid) -> HeaderRow:
    """Pick the best-scoring header row among the first rows of ``grid``.

    Ties keep the earliest row. An empty grid yields index 0 with no labels.
    """
    best_idx = 0
    best_score: int | None = None
    for i, row in enumerate(grid[:HEADER_SCAN_ROWS]):
        score = score_header_row(row)
        if best_score is None or score > best_score:
            best_score = score
            best_idx = i

    raw = grid[best_idx] if grid else []
    labels = dedupe_labels([canonical_label(cell_label(c)) for c in raw])
    return HeaderRow(index=best_idx, labels=list(labels))


def find_header_row_with_time(grid: CellGrid) -> HeaderRow:
    """First row (within the scan window) containing a "Time" cell, else row 0."""
    for i, row in enumerate(grid[:HEADER_SCAN_ROWS]):
        if any(_TIME_RE.match(s) for s in _texts(row)):
            return HeaderRow(index=i, labels=_trimmed_labels(row))
    return HeaderRow(index=0, labels=_trimmed_labels(grid[0] if grid else []))


def _trimmed_labels(row: list[Cell]) -> list[str | None]:
    return [c.stripped if isinstance(c, Text) else None for c in row]
