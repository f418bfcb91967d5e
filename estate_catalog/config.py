# estate_catalog/config.py
# Environment-aware configuration for the Estate Catalog service

import os
from typing import List, Literal

from estate_catalog.errors import ConfigurationError
from estate_catalog.models import FilterMode

CATALOG_BACKENDS = ("sqlite", "memory")
LOG_FORMATS = ("standard", "json")


def parse_bool(raw: str) -> bool:
    """Parse a boolean environment value ("1", "true", "yes", "on" are true)."""
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_filter_mode(raw: str) -> FilterMode:
    """Parse FILTER_MODE, accepting both snake_case and camelCase spellings."""
    normalized = raw.strip().lower().replace("-", "_")
    if normalized == "allornone":
        normalized = FilterMode.all_or_none.value
    try:
        return FilterMode(normalized)
    except ValueError:
        allowed = ", ".join(mode.value for mode in FilterMode)
        raise ConfigurationError(f"Invalid FILTER_MODE {raw!r}; expected one of: {allowed}")


def parse_backend(raw: str) -> str:
    backend = raw.strip().lower()
    if backend not in CATALOG_BACKENDS:
        raise ConfigurationError(
            f"Invalid CATALOG_BACKEND {raw!r}; expected one of: {', '.join(CATALOG_BACKENDS)}"
        )
    return backend


def parse_cors_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Storage
CATALOG_BACKEND = parse_backend(os.environ.get("CATALOG_BACKEND", "sqlite"))
DATABASE_PATH = os.environ.get("DATABASE_PATH", "estate_catalog.db")

# Schema variants: geo location required on create, and how search filters combine
REQUIRE_LOCATION = parse_bool(os.environ.get("REQUIRE_LOCATION", "false"))
FILTER_MODE = parse_filter_mode(os.environ.get("FILTER_MODE", FilterMode.independent.value))

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if IS_DEV else "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "standard")
if LOG_FORMAT not in LOG_FORMATS:
    raise ConfigurationError(f"Invalid LOG_FORMAT {LOG_FORMAT!r}; expected one of: {', '.join(LOG_FORMATS)}")

# CORS origins (restricted in prod only)
CORS_ORIGINS = parse_cors_origins(os.environ.get("CORS_ORIGINS", ""))
if IS_PROD and not CORS_ORIGINS:
    raise ConfigurationError("CORS_ORIGINS must be set when ENV=prod")
