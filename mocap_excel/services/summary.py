from __future__ import annotations

from ..models.parse_result import NeededParseResult
from ..models.series import Row, RowsBySheet

"""SUMMARY line rendering for the CLI.

The renderers return the line body; log_summary() adds the "SUMMARY " label.
Bodies:

    sheets={n} rows={rows} columns={cols}
    ok=true pitcher_series={p} hitter_series={h} samples={n} missing_time={k} warnings={w}
    ok=false warnings={w} why="{reason}"
"""

__all__ = [
    "render_data_sets_summary",
    "render_needed_summary",
    "render_rows_summary",
]


def _column_count(rows: list[Row]) -> int:
    keys: set[str] = set()
    for r in rows:
        keys.update(r)
    keys.discard("t")
    return len(keys)


def render_data_sets_summary(sets: RowsBySheet) -> str:
    total_rows = sum(len(rows) for rows in sets.values())
    total_cols = sum(_column_count(rows) for rows in sets.values())
    return f"sheets={len(sets)} rows={total_rows} columns={total_cols}"


def render_rows_summary(sheet: str | None, rows: list[Row]) -> str:
    return f"sheet={sheet or '-'} rows={len(rows)} columns={_column_count(rows)}"


def render_needed_summary(result: NeededParseResult) -> str:
    """Render a needed-metrics result.

    Examples:
        >>> from mocap_excel.models import NeededParseFailure
        >>> render_needed_summary(NeededParseFailure(why="No sheets found in workbook."))
        'ok=false warnings=0 why="No sheets found in workbook."'
    """
    if not result.ok:
        return f'ok=false warnings={len(result.warnings)} why="{result.why}"'
    time = result.pitcher.time
    missing_time = sum(1 for t in time if t != t)
    return (
        f"ok=true "
        f"pitcher_series={len(result.pitcher.series)} "
        f"hitter_series={len(result.hitter.series)} "
        f"samples={len(time)} "
        f"missing_time={missing_time} "
        f"warnings={len(result.warnings)}"
    )
