"""
estate_catalog/test_config_logging.py

Environment parsing helpers, error status codes and logging setup.

Run: pytest estate_catalog/test_config_logging.py -v
"""

from __future__ import annotations

import json
import logging
import sys

import pytest

from estate_catalog.config import parse_backend, parse_bool, parse_cors_origins, parse_filter_mode
from estate_catalog.errors import (
    CatalogError,
    ConfigurationError,
    InvalidFilterError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from estate_catalog.logging_config import JsonFormatter, get_logger, setup_logging
from estate_catalog.models import FilterMode


# ========================================================================
# CONFIG
# ========================================================================

class TestConfigParsing:
    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "false", "", "no", "off", "maybe"])
    def test_falsy(self, raw):
        assert parse_bool(raw) is False

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("independent", FilterMode.independent),
            ("all_or_none", FilterMode.all_or_none),
            ("allOrNone", FilterMode.all_or_none),
            ("all-or-none", FilterMode.all_or_none),
        ],
    )
    def test_filter_mode(self, raw, expected):
        assert parse_filter_mode(raw) is expected

    def test_unknown_filter_mode(self):
        with pytest.raises(ConfigurationError, match="FILTER_MODE"):
            parse_filter_mode("strict")

    def test_backend(self):
        assert parse_backend(" SQLite ") == "sqlite"
        assert parse_backend("memory") == "memory"
        with pytest.raises(ConfigurationError):
            parse_backend("postgres")

    def test_cors_origins(self):
        assert parse_cors_origins("https://a.example, ,https://b.example") == [
            "https://a.example",
            "https://b.example",
        ]
        assert parse_cors_origins("") == []


# ========================================================================
# ERRORS
# ========================================================================

class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (NotFoundError("Project not found."), 404),
            (ValidationError("Name is required."), 400),
            (InvalidFilterError("type", "Invalid property type."), 400),
            (StoreError("Server error while fetching projects."), 500),
            (ConfigurationError("bad"), 500),
        ],
    )
    def test_status_codes(self, exc, status):
        assert isinstance(exc, CatalogError)
        assert exc.status_code == status

    def test_invalid_filter_keeps_filter_name(self):
        exc = InvalidFilterError("priceRange", "Invalid price range.")
        assert isinstance(exc, ValidationError)
        assert exc.filter_name == "priceRange"
        assert str(exc) == "Invalid price range."


# ========================================================================
# LOGGING
# ========================================================================

@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogging:
    def test_setup_installs_single_handler(self, restore_root_logger):
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging("CHATTY")
        assert restore_root_logger.level == logging.INFO

    def test_json_format(self, restore_root_logger):
        setup_logging("INFO", format_type="json")
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_json_formatter_output(self):
        record = logging.LogRecord(
            name="estate_catalog.service",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="[PROJECTS] Created project_id=%s",
            args=("abc",),
            exc_info=None,
        )
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "estate_catalog.service"
        assert payload["message"] == "[PROJECTS] Created project_id=abc"
        assert "timestamp" in payload

    def test_json_formatter_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        payload = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exception"]

    def test_get_logger(self):
        assert get_logger("estate_catalog.store") is logging.getLogger("estate_catalog.store")
