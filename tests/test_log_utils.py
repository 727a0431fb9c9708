import logging

import pytest
from xmlstruct.utils.log_utils import init_logging, parse_log_level, LOG_ENV_VAR


class TestParseLogLevel:
    @pytest.mark.parametrize("name,level", [
        ("trace", logging.DEBUG),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("warning", logging.WARNING),
        ("error", logging.ERROR),
    ])
    def test_known_levels(self, name, level):
        assert parse_log_level(name) == level

    def test_unknown_falls_back_to_info(self, capsys):
        assert parse_log_level("chatty") == logging.INFO
        assert "defaulting to INFO" in capsys.readouterr().err


class TestInitLogging:
    def test_sets_level(self, restore_root_logger, monkeypatch):
        monkeypatch.delenv(LOG_ENV_VAR, raising=False)
        init_logging("error")
        assert restore_root_logger.level == logging.ERROR

    def test_environment_overrides_level(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv(LOG_ENV_VAR, "debug")
        init_logging("error")
        assert restore_root_logger.level == logging.DEBUG

    def test_log_file_receives_messages(self, restore_root_logger, monkeypatch, temp_dir):
        monkeypatch.delenv(LOG_ENV_VAR, raising=False)
        log_file = temp_dir / "logs" / "run.log"
        init_logging("info", log_file)

        logging.getLogger("xmlstruct.test").info("hello from test")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "hello from test" in content
        assert "INFO" in content
        assert "xmlstruct.test" in content
