from __future__ import annotations

import re

from ..config.loader import MetricCatalog
from ..models.header import HeaderRow

"""Column resolution against a detected header.

Exports are inconsistent about spacing and contain a handful of known
misspelled paths, so lookup falls back in three tiers:

1. exact (trimmed) header text
2. catalog alias table (both directions)
3. whitespace-insensitive comparison, first match wins
"""

__all__ = [
    "NOT_FOUND",
    "build_column_index",
    "resolve_column",
]

NOT_FOUND = -1

_WS_RE = re.compile(r"\s+")


def build_column_index(header: HeaderRow) -> dict[str, int]:
    """Header text -> column position. A repeated label keeps its last position."""
    index: dict[str, int] = {}
    for i, label in enumerate(header.labels):
        if label is not None:
            index[label.strip()] = i
    return index


def resolve_column(index: dict[str, int], key: str, catalog: MetricCatalog | None = None) -> int:
    """Column position for ``key`` or NOT_FOUND."""
    if key in index:
        return index[key]
    if catalog is not None:
        for candidate in catalog.alias_candidates(key):
            if candidate in index:
                return index[candidate]
    squashed = _WS_RE.sub("", key)
    for label, i in index.items():
        if _WS_RE.sub("", label) == squashed:
            return i
    return NOT_FOUND
