"""
Tests for logging setup.

Run: python3 -m pytest tests/test_logging_config.py -v
"""

import io
import logging
import logging.handlers

import pytest

from kubepreflight.utils import logging_config


@pytest.fixture
def root_logger(monkeypatch):
    """Restore the root logger after setup_logging reconfigures it."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    monkeypatch.setattr(logging_config, '_initialized', False)
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handler(self, root_logger):
        logging_config.setup_logging(level=logging.INFO, use_colors=False)

        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], logging.StreamHandler)

    def test_only_once_without_force(self, root_logger):
        logging_config.setup_logging(level=logging.INFO)
        logging_config.setup_logging(level=logging.ERROR)

        assert root_logger.level == logging.INFO

        logging_config.setup_logging(level=logging.ERROR, force=True)
        assert root_logger.level == logging.ERROR

    def test_log_file_gets_debug_records(self, root_logger, tmp_path):
        log_file = tmp_path / 'logs' / 'kubepreflight.log'

        logging_config.setup_logging(level=logging.WARNING, log_file=str(log_file))
        logging.getLogger('kubepreflight.test').debug("validating swap")
        for handler in root_logger.handlers:
            handler.flush()

        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers)
        assert "validating swap" in log_file.read_text()

    def test_noisy_libraries_quieted(self, root_logger):
        logging_config.setup_logging(level=logging.DEBUG)
        assert logging.getLogger('urllib3').level == logging.WARNING


class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_no_colors_off_terminal(self):
        formatter = logging_config.ColoredFormatter("%(levelname)s %(message)s", stream=io.StringIO())
        record = logging.makeLogRecord({'levelname': 'ERROR', 'msg': 'boom'})

        assert formatter.format(record) == "ERROR boom"


class TestLevelFromName:
    """Tests for level_from_name."""

    def test_known(self):
        assert logging_config.level_from_name('debug') == logging.DEBUG

    def test_unknown(self):
        assert logging_config.level_from_name('LOUD') == logging.WARNING
