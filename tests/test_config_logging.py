"""
Tests for configuration loading and logging setup.
"""

import json
import logging
import pytest

from core.market_study import ValuationInputError
from utils.config import Config
from utils.logging import JsonFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes after the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# Configuration
# =============================================================================

class TestConfig:
    """Tests for Config.load()."""

    def test_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "DEBUG", "LOG_LEVEL", "CURRENCY", "HOMOGENIZATION_WEIGHTS"):
            monkeypatch.delenv(name, raising=False)

        config = Config.load()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.log_level == "INFO"
        assert config.currency == "BRL"
        assert config.homogenization_weights == {}

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("HOMOGENIZATION_WEIGHTS", json.dumps({"bedrooms": 0.12, "suites": 0.08}))

        config = Config.load()
        assert config.port == 9000
        assert config.debug is True
        assert config.homogenization_weights == {"bedrooms": 0.12, "suites": 0.08}

    @pytest.mark.parametrize("raw", ["{bad json", "[0.1, 0.2]"])
    def test_invalid_weights(self, monkeypatch, raw):
        monkeypatch.setenv("HOMOGENIZATION_WEIGHTS", raw)
        with pytest.raises(ValuationInputError):
            Config.load()

    def test_to_dict(self):
        config = Config(port=8080, homogenization_weights={"bedrooms": 0.1})
        data = config.to_dict()
        assert data["port"] == 8080
        assert data["homogenization_weights"] == {"bedrooms": 0.1}


# =============================================================================
# Logging
# =============================================================================

class TestLogging:
    """Tests for setup_logging()."""

    def test_standard_format(self, restore_root_logger):
        setup_logging("DEBUG")
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_json_format(self, restore_root_logger):
        setup_logging("warning", "json")
        root = restore_root_logger
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging("LOUD")
        assert restore_root_logger.level == logging.INFO

    def test_json_formatter_output(self):
        record = logging.LogRecord(
            name="core.market_study.service",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Valuated %d samples",
            args=(3,),
            exc_info=None,
        )
        data = json.loads(JsonFormatter().format(record))
        assert data["message"] == "Valuated 3 samples"
        assert data["level"] == "INFO"
        assert data["logger"] == "core.market_study.service"
        assert "timestamp" in data
