# stockwatch/config/logging_config.py

"""Per-run logging for stockwatch.

Every launch writes one DEBUG-level file under ``logs/`` named after the
launch time (``logs/stockwatch_20260214_153045.log``), so a scrape cycle
and its diff, notify and persist decisions can be read back together.
The console only shows records at ``LOG_CONSOLE_LEVEL`` and above, which
keeps stdout free for the JSON catalog in collect mode.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from stockwatch.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: int | str | None) -> int:
    """Turn a level name or number into a logging level, WARNING if unknown."""
    if level is None:
        level = Settings.LOG_CONSOLE_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(console_level: int | str | None = None) -> Path:
    """Attach the run-log file handler and the console handler.

    Args:
        console_level: Threshold for stderr output. Defaults to
            ``Settings.LOG_CONSOLE_LEVEL``.

    Returns:
        Path of the log file for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"{Settings.LOG_FILE_PREFIX}_{timestamp}.log"
    level = _resolve_level(console_level)

    root_logger = logging.getLogger("stockwatch")
    root_logger.setLevel(logging.DEBUG)

    if root_logger.handlers:
        # Already configured this process; only move the console threshold
        for handler in root_logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Run log %s (console level %s, navigation timeout %d ms)",
        log_file,
        logging.getLevelName(level),
        Settings.NAVIGATION_TIMEOUT_MS,
    )
    return log_file
