import json
import logging

import pytest
import structlog

from playground.utils.logging import LogSettings, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def _file_lines(directory):
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in (directory / "playground.log").read_text().splitlines()]


class TestLogSettings:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        settings = LogSettings.from_env()
        assert settings.level == "INFO"
        assert settings.json_console is True

    def test_log_level_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "test")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "console")

        settings = LogSettings.from_env()
        assert settings.level == "DEBUG"
        assert settings.json_console is False


class TestLogFile:
    def test_structlog_events_written_as_json(self, tmp_path, restore_root_logger):
        directory = tmp_path / "logs"
        configure_logging(LogSettings(env="test", level="INFO", json_console=True, directory=directory))

        structlog.get_logger("playground.ledger.file-test").info("Stock reserved", equipment_id="eq-1", quantity=2)

        entry = _file_lines(directory)[-1]
        assert entry["event"] == "Stock reserved"
        assert entry["equipment_id"] == "eq-1"
        assert entry["quantity"] == 2
        assert entry["level"] == "info"
        assert entry["logger"] == "playground.ledger.file-test"

    def test_stdlib_records_share_the_format(self, tmp_path, restore_root_logger):
        directory = tmp_path / "logs"
        configure_logging(LogSettings(env="test", level="INFO", json_console=True, directory=directory))

        logging.getLogger("protean.file-test").warning("Provider ready")

        entry = _file_lines(directory)[-1]
        assert entry["event"] == "Provider ready"
        assert entry["level"] == "warning"
        assert entry["logger"] == "protean.file-test"

    def test_level_filters_records(self, tmp_path, restore_root_logger):
        directory = tmp_path / "logs"
        configure_logging(LogSettings(env="test", level="WARNING", json_console=True, directory=directory))

        structlog.get_logger("playground.quiet-test").info("Not written")
        structlog.get_logger("playground.quiet-test").warning("Written")

        assert [entry["event"] for entry in _file_lines(directory)] == ["Written"]
