"""Tests for logging setup."""

import logging
from pathlib import Path

from gnss_sitemeta.stations.models import Site, SiteWarning
from gnss_sitemeta.utils.logging import LOG_FILE_NAME, get_logger, log_warnings, setup_logging


class RecordingLogger:
    def __init__(self):
        self.calls = []

    def warning(self, event, **kw):
        self.calls.append((event, kw))


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_file_logging(self, tmp_path: Path):
        setup_logging(level="debug", log_dir=tmp_path / "logs", log_to_file=True, log_to_console=False)
        get_logger("gnss_sitemeta.test").info("file_logging_checked", value=42)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text()
        assert "file_logging_checked" in content
        assert logging.getLogger().level == logging.DEBUG

    def test_json_format(self, tmp_path: Path):
        setup_logging(log_dir=tmp_path, log_to_file=True, log_to_console=False, json_format=True)
        get_logger("gnss_sitemeta.test").warning("json_checked")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / LOG_FILE_NAME).read_text()
        assert '"event": "json_checked"' in content

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(log_to_console=True)
        setup_logging(log_to_console=True)
        assert len(logging.getLogger().handlers) == 1


class TestLogWarnings:
    def test_site_warnings_logged(self):
        site = Site()
        site.identification.nine_character_id = "BRUX00BEL"
        site.warnings.append(SiteWarning("bad DOMES number", line=31, block=1))
        site.warnings.append(SiteWarning("receiver 1 with empty 'Date Removed'", block=3))

        logger = RecordingLogger()
        assert log_warnings(logger, site, "brux.log") == 2

        event, kw = logger.calls[0]
        assert event == "bad DOMES number"
        assert kw == {"station": "BRUX00BEL", "source": "brux.log", "line": 31, "block": 1}
        assert logger.calls[1][1]["line"] is None

    def test_no_warnings(self):
        assert log_warnings(RecordingLogger(), Site()) == 0
