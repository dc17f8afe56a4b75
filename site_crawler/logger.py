# === FILE: site_crawler/logger.py ===
"""Logging for **SiteCrawler**.

Everything goes through one project logger, ``SiteCrawler``:

* progress of a crawl (``crawling``/``crawled``, prefix skips, limit, summary)
  is logged at INFO;
* network failures of crawl fetches are logged at WARNING;
* per-link diagnostics (unresolvable links, skipped fetches, sitemap
  problems) are logged at DEBUG, and only by components whose ``debug`` flag
  is set. Such a component calls :func:`enable_diagnostics`, so the records
  pass even when the logger was configured for INFO.

The ``debug`` flag of every component defaults to the ``DEBUG=true``
environment variable, see :func:`resolve_debug`::

    from site_crawler.logger import logger
    logger.info("Crawl started")
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteCrawler"

_LevelT = Union[int, str]


def debug_from_env() -> bool:
    """Отладочный режим включается переменной окружения ``DEBUG=true``."""
    return os.environ.get("DEBUG", "").strip().lower() == "true"


def resolve_debug(debug: Optional[bool]) -> bool:
    """Явное значение флага или, если оно не задано, значение из окружения."""
    return debug_from_env() if debug is None else debug


def _handlers(log_file: Path | str | None, log_format: str) -> List[logging.Handler]:
    # stdout занят выводом команд CLI
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    debug: Optional[bool] = None,
) -> logging.Logger:
    """(Re)configure the project logger, replacing its handlers.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"WARNING"``).
    log_file
        Path to a rotating logfile. *None* means stderr only.
    log_format
        Format string for :class:`logging.Formatter`.
    debug
        Diagnostics mode; forces ``DEBUG`` regardless of *level*.
        *None* reads ``DEBUG=true`` from the environment.
    """
    lg = logging.getLogger(LOGGER_NAME)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    for handler in _handlers(log_file, log_format):
        lg.addHandler(handler)

    lg.setLevel(logging.DEBUG if resolve_debug(debug) else level)
    lg.propagate = False
    return lg


def enable_diagnostics() -> None:
    """Lower the project logger to DEBUG unless it already lets DEBUG through."""
    lg = logging.getLogger(LOGGER_NAME)
    if lg.getEffectiveLevel() > logging.DEBUG:
        lg.setLevel(logging.DEBUG)


logger: logging.Logger = configure()

__all__ = [
    "logger",
    "configure",
    "enable_diagnostics",
    "debug_from_env",
    "resolve_debug",
    "LOGGER_NAME",
    "DEFAULT_FORMAT",
]
