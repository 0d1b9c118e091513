from __future__ import annotations

import json
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.series import Role

"""Metric catalog loader.

Responsibilities:
- Load the YAML catalog (per-role whitelist + header alias table)
- Validate it against catalog.schema.json
- Freeze it into a MetricCatalog shared by every extraction call

The packaged catalog is read once per process via default_catalog().
"""

__all__ = [
    "CATALOG_PATH",
    "CATALOG_ENV_VAR",
    "ConfigError",
    "MetricCatalog",
    "MetricSpec",
    "catalog_from_env",
    "default_catalog",
    "load_catalog",
]

_CONFIG_DIR = Path(__file__).parent
CATALOG_PATH = _CONFIG_DIR / "catalog.yml"
SCHEMA_PATH = _CONFIG_DIR / "catalog.schema.json"
CATALOG_ENV_VAR = "MOCAP_EXCEL_CATALOG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class MetricSpec:
    label: str  # UI label
    key: str  # canonical header key


@dataclass(frozen=True)
class MetricCatalog:
    """Immutable whitelist and alias table.

    roles: Role -> ordered MetricSpec tuple
    aliases: variant header key -> canonical key
    """
    roles: Mapping[Role, tuple[MetricSpec, ...]]
    aliases: Mapping[str, str]

    def metrics_for(self, role: Role) -> tuple[MetricSpec, ...]:
        return self.roles.get(role, ())

    def alias_candidates(self, key: str) -> Iterator[str]:
        """Alternative header keys for ``key``, most specific first.

        The key's own canonical target comes first, then every known variant
        that maps onto ``key``.
        """
        target = self.aliases.get(key)
        if target is not None:
            yield target
        for variant, canonical in self.aliases.items():
            if canonical == key and variant != key:
                yield variant


def _validate_catalog_schema(data: Any) -> None:
    """Validate catalog data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"catalog schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"catalog validation failed: {e.message}") from e


def load_catalog(path: Path) -> MetricCatalog:
    if not path.exists():
        raise ConfigError(f"catalog file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_catalog_schema(data)

    roles = {
        role: tuple(
            MetricSpec(label=entry["label"], key=entry["key"])
            for entry in data["roles"][role.value]
        )
        for role in Role
    }
    return MetricCatalog(
        roles=MappingProxyType(roles),
        aliases=MappingProxyType(dict(data["aliases"])),
    )


@lru_cache(maxsize=1)
def default_catalog() -> MetricCatalog:
    """Packaged catalog, loaded on first use and reused afterwards."""
    return load_catalog(CATALOG_PATH)


def catalog_from_env() -> MetricCatalog:
    """Catalog named by $MOCAP_EXCEL_CATALOG, else the packaged one."""
    override = os.getenv(CATALOG_ENV_VAR)
    if override:
        return load_catalog(Path(override))
    return default_catalog()
