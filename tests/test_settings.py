import json
import logging

import pytest

from price_forecast.config.settings import Settings, load_config_section
from price_forecast.utils.logger import JsonFormatter, setup_logger
from price_forecast.utils.symbols import sanitize_symbol, symbol_slug


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FORECASTS_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("RANDOM_SEED", "42")
    settings = Settings.load()
    assert settings.log_level == "DEBUG"
    assert settings.forecasts_dir == tmp_path / "out"
    assert settings.random_seed == 42


def test_invalid_seed_fails_fast(monkeypatch):
    monkeypatch.setenv("RANDOM_SEED", "abc")
    with pytest.raises(RuntimeError):
        Settings.load()


def test_missing_config_section_is_empty(tmp_path):
    assert load_config_section(tmp_path / "nope.yaml", "pipeline") == {}
    assert load_config_section(None, "pipeline") == {}


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("price_forecast.test", logging.INFO, __file__, 1, "Trained", (), None)
    record.variant = "cnn"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "Trained"
    assert payload["variant"] == "cnn"
    assert payload["level"] == "INFO"


def _json_handlers():
    return [
        handler
        for handler in logging.getLogger("price_forecast").handlers
        if isinstance(handler.formatter, JsonFormatter)
    ]


def test_setup_logger_namespaces_loggers():
    logger = setup_logger("unit")
    assert logger.name == "price_forecast.unit"
    before = len(logging.getLogger("price_forecast").handlers)
    setup_logger("unit")
    setup_logger("other")
    assert len(logging.getLogger("price_forecast").handlers) == before
    assert len(_json_handlers()) == 1


def test_symbol_helpers():
    assert sanitize_symbol(" brk/b ") == "BRK_B"
    assert symbol_slug("Reliance.NS") == "reliance_ns"
    with pytest.raises(ValueError):
        sanitize_symbol("   ")
