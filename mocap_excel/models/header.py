from __future__ import annotations

from dataclasses import dataclass

"""HeaderRow model: where a sheet's header sits and what it says."""

__all__ = [
    "HeaderRow",
]


@dataclass(frozen=True)
class HeaderRow:
    """Detected header row of a sheet.

    labels keep the column order of the grid. A label is None when the
    header cell was not text (needed-metrics variant only).
    """
    index: int  # 0-based row index into the grid
    labels: list[str | None]

    @property
    def data_start(self) -> int:
        """First grid row after the header."""
        return self.index + 1
