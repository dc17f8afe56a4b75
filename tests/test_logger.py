# File: tests/test_logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from site_crawler.logger import LOGGER_NAME, configure, enable_diagnostics


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    configure(debug=False)


def test_configure_defaults(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    lg = configure()
    assert lg is logging.getLogger(LOGGER_NAME)
    assert lg.level == logging.INFO
    assert lg.propagate is False
    assert len(lg.handlers) == 1
    assert lg.handlers[0].stream is sys.stderr


def test_configure_replaces_handlers(tmp_path):
    configure(log_file=tmp_path / "crawl.log")
    lg = configure(log_file=tmp_path / "crawl.log")
    assert len(lg.handlers) == 2
    assert isinstance(lg.handlers[1], RotatingFileHandler)


def test_debug_forces_debug_level(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    assert configure(level="WARNING", debug=True).level == logging.DEBUG
    assert configure(level="WARNING").level == logging.WARNING


def test_debug_from_environment(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    assert configure(level="INFO").level == logging.DEBUG
    assert configure(level="INFO", debug=False).level == logging.INFO


def test_enable_diagnostics_only_lowers():
    lg = configure(level="ERROR", debug=False)
    enable_diagnostics()
    assert lg.level == logging.DEBUG

    lg.setLevel(5)
    enable_diagnostics()
    assert lg.level == 5


def test_file_handler_writes(tmp_path):
    log_file = tmp_path / "crawl.log"
    lg = configure(log_file=log_file, log_format="%(levelname)s %(message)s", debug=False)
    lg.info("crawling %s", "https://a.com")
    for handler in lg.handlers:
        handler.flush()
    assert "INFO crawling https://a.com" in log_file.read_text(encoding="utf-8")
