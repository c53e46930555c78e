"""Unit tests for logging setup."""

import logging

from servicebus_tui.logging_config import (
    LOGGER_NAME,
    ColoredFormatter,
    default_log_path,
    log_timing,
    setup_logging,
)


class TestSetupLogging:

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "nested" / "debug.log"
        logger = setup_logging(verbose=True, log_file=log_file)

        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0], logging.FileHandler)
        logger.info("peeked 3 messages")
        logger.handlers[0].flush()
        assert "peeked 3 messages" in log_file.read_text()

    def test_stderr_handler(self, capsys):
        logger = setup_logging()

        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0], logging.FileHandler)
        logger.warning("namespace is empty")
        assert "WARNING: namespace is empty" in capsys.readouterr().err

    def test_replaces_previous_handlers(self, tmp_path):
        setup_logging(log_file=tmp_path / "a.log")
        logger = setup_logging(debug=True)

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_default_log_path_honours_xdg(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
        assert default_log_path() == tmp_path / "servicebus-tui" / "debug.log"


class TestColoredFormatter:

    def test_colors_level_and_restores_record(self):
        record = logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "boom", None, None)
        text = ColoredFormatter("%(levelname)s: %(message)s").format(record)

        assert text == "\033[31mERROR\033[0m: boom"
        assert record.levelname == "ERROR"


class TestLogTiming:

    def test_logs_start_and_completion(self, caplog):
        logger = logging.getLogger(f"{LOGGER_NAME}.test")
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            with log_timing("list topics", logger):
                pass

        assert caplog.messages[0] == "Starting: list topics"
        assert caplog.messages[1].startswith("list topics completed in ")
