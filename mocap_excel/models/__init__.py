"""Domain models for motion-capture workbook extraction.

Cells, header rows, series and the needed-metrics result types used
throughout the package.
"""

from .cell import EMPTY, Cell, DateLike, Empty, Number, Text, to_cell
from .header import HeaderRow
from .parse_result import NeededParseFailure, NeededParseResult, NeededParseSuccess
from .series import NeededMetrics, Role, Row, RowsBySheet, Series

__all__ = [
    # Grid cells
    "Cell",
    "DateLike",
    "EMPTY",
    "Empty",
    "Number",
    "Text",
    "to_cell",
    # Header
    "HeaderRow",
    # Extraction output
    "NeededMetrics",
    "Role",
    "Row",
    "RowsBySheet",
    "Series",
    # Results
    "NeededParseFailure",
    "NeededParseResult",
    "NeededParseSuccess",
]
