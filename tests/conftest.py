# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from mocap_excel.logging.init import reset_logging
from mocap_excel.models.cell import CellGrid, to_cell


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    """Write an .xlsx under data/ from {sheet: rows} (rows are raw cell lists)."""
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        p = temp_workdir / "data" / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return p
    return _make


@pytest.fixture()
def grid_of() -> Callable[[list[list[object]]], CellGrid]:
    def _grid(rows: list[list[object]]) -> CellGrid:
        return [[to_cell(v) for v in row] for row in rows]
    return _grid


@pytest.fixture()
def pelvis_rows() -> list[list[object]]:
    return [
        ["Name"],
        ["Time", "/Calc/Pelvis/Twist/Velocity_x"],
        [0, 1.5],
        [1, 2.5],
    ]


@pytest.fixture()
def catalog_yaml() -> str:
    return """roles:
  pitcher:
    - label: Pelvis Twist Velocity
      key: /Calc/Pelvis/Twist/Velocity_x
  hitter:
    - label: Shoulder Twist
      key: /Calc/Shoulder/Twist_x
aliases:
  /Calc/Pelvis/Twist/Velocity: /Calc/Pelvis/Twist/Velocity_x
"""


@pytest.fixture()
def write_catalog(temp_workdir: Path, catalog_yaml: str) -> Path:
    p = temp_workdir / "catalog.yml"
    p.write_text(catalog_yaml, encoding="utf-8")
    return p
