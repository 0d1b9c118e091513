from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Output shapes for extracted motion-capture series.

Row / RowsBySheet are the loose generic payload (column -> number, always with
``t``). Series / NeededMetrics are the fixed-shape payload the charts consume,
where every values list lines up with ``time``.
"""

__all__ = [
    "NeededMetrics",
    "Role",
    "Row",
    "RowsBySheet",
    "Series",
]

Row = dict[str, float]
RowsBySheet = dict[str, list[Row]]


class Role(Enum):
    """Athlete role whose whitelist drives needed-metrics extraction.

    Definition order is the build order; the first role builds the shared
    time sequence.
    """
    PITCHER = "pitcher"
    HITTER = "hitter"


@dataclass(frozen=True)
class Series:
    label: str  # UI label
    key: str  # canonical header key (/Calc/...)
    values: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class NeededMetrics:
    """Aligned time axis (seconds) plus the series sampled on it."""
    time: list[float]
    series: list[Series]

    def series_for(self, key: str) -> Series | None:
        for s in self.series:
            if s.key == key:
                return s
        return None

    def to_dict(self) -> dict:
        return {
            "time": [_json_number(t) for t in self.time],
            "series": [
                {"label": s.label, "key": s.key, "values": [_json_number(v) for v in s.values]}
                for s in self.series
            ],
        }


def _json_number(value: float) -> float | None:
    # NaN は JSON 非対応なので null
    return None if value != value else value
