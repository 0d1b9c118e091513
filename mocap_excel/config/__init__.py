from .loader import (
    CATALOG_PATH,
    ConfigError,
    MetricCatalog,
    MetricSpec,
    catalog_from_env,
    default_catalog,
    load_catalog,
)

__all__ = [
    "CATALOG_PATH",
    "ConfigError",
    "MetricCatalog",
    "MetricSpec",
    "catalog_from_env",
    "default_catalog",
    "load_catalog",
]
