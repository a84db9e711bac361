"""Centralized logging configuration for the filecache application.

Sets up standard Python logging with appropriate levels, formatters,
and handlers (console, optional file).
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = None

logger = logging.getLogger(__name__)


def resolve_log_level(level_name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name such as 'debug' to its logging constant."""
    if not level_name:
        return default
    level = logging.getLevelName(str(level_name).upper())
    return level if isinstance(level, int) else default


def _make_handler(handler: logging.Handler, log_level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = DEFAULT_LOG_FILE,
    source: str = "default",
) -> None:
    """Configures the root logger for the filecache CLI.

    Existing root handlers are replaced. Messages go to stderr so that values
    printed by ``filecache get`` can be piped, and optionally to a file.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output.
        source: Where the level came from ('default', 'config' or '--verbose'),
            reported once logging is up.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    targets = ["stderr"]
    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), log_level, formatter))

    if log_file:
        try:
            root_logger.addHandler(_make_handler(logging.FileHandler(log_file, encoding='utf-8'), log_level, formatter))
            targets.append(str(log_file))
        except OSError as e:
            logger.error(f"Cannot open log file {log_file}, logging to stderr only: {e}")

    logger.debug(
        f"Logging configured: level={logging.getLevelName(log_level)} (from {source}), "
        f"targets={', '.join(targets)}"
    )
