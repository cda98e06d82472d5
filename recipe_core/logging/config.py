# =============================================================================
# recipe_core/logging/config.py
# Logging Configuration for the Recipe Catalog
# =============================================================================

import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_DIR = Path("logs")
LEVEL_ENV_VAR = "RECIPE_LOG_LEVEL"

# Chatty libraries: HTTP pool messages on every probe, file watcher on every rerun
NOISY_LOGGERS = ("urllib3", "requests", "watchdog", "fsevents")


def resolve_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level name or number into a logging level.

    ``None`` falls back to RECIPE_LOG_LEVEL, then INFO. Unknown names give INFO.
    """
    if level is None:
        level = os.getenv(LEVEL_ENV_VAR, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str, None] = None,
    log_to_file: bool = False,
    log_filename: Optional[str] = None,
    log_dir: Path = LOG_DIR,
) -> None:
    """
    Configure logging for the Streamlit process.

    Args:
        level: Level name or number (default: RECIPE_LOG_LEVEL or INFO)
        log_to_file: Also write to ``log_dir``
        log_filename: Custom log filename (default: recipes_YYYY-MM-DD.log)
        log_dir: Directory for the log file
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_filename = log_filename or f"recipes_{datetime.now():%Y-%m-%d}.log"
        handlers.append(logging.FileHandler(log_dir / log_filename, encoding="utf-8"))

    resolved = resolve_level(level)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,  # Streamlit installs its own root handler first
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("recipe_core").info(
        f"Logging initialized at {logging.getLevelName(resolved)}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Module logger.

    Usage:
        from recipe_core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """
    Logs how long an operation took and whether it failed.

    Recoverable catalog errors (anything with ``recoverable = True``, such as a
    remote timeout that the caller falls back from) are logged as warnings
    without a traceback; everything else is an error with the traceback.

    Usage:
        with LogContext(logger, "Fetching recipes from remote store"):
            connector.fetch_recipes()
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.elapsed_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000

        if exc_type is None:
            self.logger.info(f"{self.operation}... done in {self.elapsed_ms:.0f} ms")
        elif getattr(exc_val, "recoverable", False):
            self.logger.warning(f"{self.operation}... failed after {self.elapsed_ms:.0f} ms: {exc_val}")
        else:
            self.logger.error(
                f"{self.operation}... failed after {self.elapsed_ms:.0f} ms: {exc_val}",
                exc_info=True,
            )

        return False
