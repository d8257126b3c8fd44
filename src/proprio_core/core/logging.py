"""Package logger setup.

All engine modules log under the ``proprio_core`` logger. Applications
embedding the engine attach their own handlers; `setup_logging` is for
the bundled scripts and interactive use.
"""

import logging
import sys
from pathlib import Path

from proprio_core.core.config import LoggingSettings

PACKAGE_LOGGER = "proprio_core"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    settings: LoggingSettings | None = None,
    level: str | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Calling again replaces the handlers from the previous call.

    Args:
        settings: Logging section (uses defaults if None)
        level: Level name overriding settings.level

    Returns:
        The package logger

    Raises:
        ValueError: If the level name is not a logging level
    """
    settings = settings or LoggingSettings()
    level_name = (level or settings.level).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), log_level))

    if settings.file:
        path = Path(settings.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(_make_handler(logging.FileHandler(path), log_level))

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger below the package logger.

    Args:
        name: Module name (typically __name__)
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler
