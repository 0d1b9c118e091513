from __future__ import annotations

from unittest.mock import MagicMock, patch

from mocap_excel.models.parse_result import NeededParseFailure, NeededParseSuccess
from mocap_excel.services.needed_metrics import (
    parse_excel_to_needed_metrics,
    parse_excel_url_to_needed_metrics,
    parse_workbook_to_needed_metrics,
)
from mocap_excel.services.workbook import parse_workbook_bytes

PELVIS_VEL = "/Calc/Pelvis/Twist/Velocity_x"


def test_pelvis_scenario_from_xlsx(make_workbook, pelvis_rows):
    path = make_workbook(
        "pitch.xlsx",
        {
            "Summary": [["Athlete", "Session"], ["A", 1]],
            "Baseball Data": pelvis_rows,
        },
    )
    result = parse_excel_to_needed_metrics(path)
    assert isinstance(result, NeededParseSuccess)
    assert result.pitcher.time == [0, 1]
    assert result.hitter.time == [0, 1]
    assert result.pitcher.series_for(PELVIS_VEL).values == [1.5, 2.5]
    assert result.hitter.series_for(PELVIS_VEL).values == [1.5, 2.5]


def test_falls_back_to_first_sheet(make_workbook, pelvis_rows):
    path = make_workbook("pitch.xlsx", {"Capture": pelvis_rows, "Other": [["x"]]})
    result = parse_excel_to_needed_metrics(path)
    assert result.ok
    assert result.pitcher.series_for(PELVIS_VEL).values == [1.5, 2.5]


def test_missing_time_column_still_ok(make_workbook):
    path = make_workbook("pitch.xlsx", {"Baseball": [[PELVIS_VEL], [1.0], [2.0]]})
    result = parse_excel_to_needed_metrics(path)
    assert result.ok
    assert any("Time column" in w for w in result.warnings)
    assert all(t != t for t in result.pitcher.time)
    assert len(result.pitcher.time) == 2


def test_blank_row_aligns_with_whole_workbook_rows(make_workbook):
    path = make_workbook("pitch.xlsx", {"Baseball": [["Time", PELVIS_VEL], [0, 1.0], [None, None], [1, 2.0]]})
    buf = path.read_bytes()
    result = parse_workbook_to_needed_metrics(buf)
    rows = parse_workbook_bytes(buf)["Baseball"]
    assert len(result.pitcher.time) == len(rows) == 3
    assert result.pitcher.time[1] != result.pitcher.time[1]
    assert rows[1]["t"] != rows[1]["t"]


def test_empty_sheet_is_structured_failure(make_workbook):
    path = make_workbook("pitch.xlsx", {"Baseball": []})
    result = parse_excel_to_needed_metrics(path)
    assert isinstance(result, NeededParseFailure)
    assert result.why == "Sheet 'Baseball' has no data."
    assert result.warnings == []


def test_garbage_buffer_never_raises():
    result = parse_workbook_to_needed_metrics(b"\x00\x01 not excel")
    assert isinstance(result, NeededParseFailure)
    assert "could not open workbook" in result.why
    assert result.warnings == []


def test_missing_file_never_raises(temp_workdir):
    result = parse_excel_to_needed_metrics(temp_workdir / "missing.xlsx")
    assert not result.ok
    assert "File not found" in result.why


def test_url_failure_never_raises():
    resp = MagicMock(status_code=404, reason="Not Found", ok=False)
    with patch("mocap_excel.services.acquire.requests.get", return_value=resp):
        result = parse_excel_url_to_needed_metrics("https://example.com/pitch.xlsx")
    assert result.to_dict() == {"ok": False, "why": "Failed to fetch Excel: 404 Not Found", "warnings": []}


def test_unexpected_error_is_captured(make_workbook, pelvis_rows):
    path = make_workbook("pitch.xlsx", {"Baseball": pelvis_rows})
    with patch(
        "mocap_excel.services.needed_metrics.extract_needed_metrics",
        side_effect=RuntimeError("boom"),
    ):
        result = parse_excel_to_needed_metrics(path)
    assert result.to_dict() == {"ok": False, "why": "boom", "warnings": []}


def test_unreadable_sheet_is_structured_failure(make_workbook, pelvis_rows):
    path = make_workbook("pitch.xlsx", {"Baseball": pelvis_rows})
    with patch(
        "mocap_excel.services.needed_metrics.read_sheet_grid",
        side_effect=ValueError("corrupt sheet xml"),
    ):
        result = parse_excel_to_needed_metrics(path)
    assert result.to_dict() == {
        "ok": False,
        "why": "Sheet 'Baseball' is empty or unreadable.",
        "warnings": [],
    }
