from __future__ import annotations

from pathlib import Path

import pytest

from mocap_excel.config.loader import (
    CATALOG_ENV_VAR,
    ConfigError,
    MetricSpec,
    catalog_from_env,
    default_catalog,
    load_catalog,
)
from mocap_excel.models.series import Role


def test_default_catalog_contents():
    catalog = default_catalog()
    pitcher = catalog.metrics_for(Role.PITCHER)
    hitter = catalog.metrics_for(Role.HITTER)
    assert len(pitcher) == 14
    assert len(hitter) == 14
    assert pitcher[0] == MetricSpec(label="Pelvis Twist Velocity", key="/Calc/Pelvis/Twist/Velocity_x")
    assert hitter[-1].key == "/Calc/CenterOfGravity/VelocityZ_x"
    assert catalog.aliases["/Calc/Knee/Lead/Flexion/Extension_x"] == "/Calc/Knee/Lead/FlexionExtension_x"


def test_default_catalog_loaded_once():
    assert default_catalog() is default_catalog()


def test_catalog_is_immutable():
    catalog = default_catalog()
    with pytest.raises(TypeError):
        catalog.aliases["x"] = "y"  # type: ignore[index]
    assert isinstance(catalog.metrics_for(Role.PITCHER), tuple)


def test_alias_candidates_order():
    catalog = default_catalog()
    canonical = "/Calc/Elbow/Dominant/FlexionExtension/Velocity_x"
    assert list(catalog.alias_candidates("/Calc/Elbow/Dominant/Flexion/Extension/Velocity_x")) == [canonical]
    assert list(catalog.alias_candidates(canonical)) == [
        "/Calc/Elbow/Dominant/Flexion/Extension/Velocity_x",
        "/Calc/Elbow/Dominant/Flexion/Extenstion/Velocity_x",
    ]
    assert list(catalog.alias_candidates("Time")) == []


def test_load_custom_catalog(write_catalog: Path):
    catalog = load_catalog(write_catalog)
    assert [m.label for m in catalog.metrics_for(Role.PITCHER)] == ["Pelvis Twist Velocity"]
    assert dict(catalog.aliases) == {"/Calc/Pelvis/Twist/Velocity": "/Calc/Pelvis/Twist/Velocity_x"}


def test_load_catalog_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="catalog file not found"):
        load_catalog(temp_workdir / "nope.yml")


def test_load_catalog_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "bad.yml"
    p.write_text("roles: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_catalog(p)


def test_load_catalog_missing_role(write_catalog: Path):
    text = write_catalog.read_text(encoding="utf-8").replace(
        "  hitter:\n    - label: Shoulder Twist\n      key: /Calc/Shoulder/Twist_x\n", ""
    )
    write_catalog.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_catalog(write_catalog)
    assert "catalog validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_catalog_extra_field(write_catalog: Path):
    write_catalog.write_text(write_catalog.read_text(encoding="utf-8") + "fps: 240\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="catalog validation failed"):
        load_catalog(write_catalog)


def test_load_catalog_empty_file(temp_workdir: Path):
    p = temp_workdir / "empty.yml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="catalog validation failed"):
        load_catalog(p)


def test_catalog_from_env(monkeypatch, write_catalog: Path):
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)
    assert catalog_from_env() is default_catalog()
    monkeypatch.setenv(CATALOG_ENV_VAR, str(write_catalog))
    assert len(catalog_from_env().metrics_for(Role.HITTER)) == 1
