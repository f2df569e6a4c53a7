"""
Logging configuration for research-feed.

Provides centralized logging configuration with:
- Log level taken from FeedSettings.log_level (RESEARCH_FEED_LOG_LEVEL)
- Console and optional rotating file handlers on the root logger
- Timing of remote calls via PerformanceMonitor
"""

from datetime import datetime
import logging
import logging.handlers
from pathlib import Path
import sys
from typing import Any

# -------------------- Configuration --------------------


LOG_DIR = Path.home() / ".cache" / "research-feed" / "logs"

CONSOLE_FORMAT = "%(name)s %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LEVEL = logging.INFO


# -------------------- Utility Functions --------------------


def get_log_level(level_name: str | None) -> int:
    """
    Map a level name ("debug", "WARNING", ...) to its logging constant.

    Returns:
        The level, or DEFAULT_LEVEL for an empty or unknown name
    """
    if not level_name:
        return DEFAULT_LEVEL
    return logging.getLevelNamesMapping().get(level_name.upper(), DEFAULT_LEVEL)


def get_log_file_path() -> Path:
    """
    Get the path to today's log file, creating the log directory.
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y-%m-%d")
    return LOG_DIR / f"research-feed-{today}.log"


# -------------------- Performance Monitoring --------------------


class PerformanceMonitor:
    """
    Context manager for monitoring operation performance.

    Example:
        >>> with PerformanceMonitor(logger, "GET /feed"):
        ...     response = await client.get("/feed")
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation_name: str,
        log_level: int = logging.DEBUG,
        **metadata: Any,
    ) -> None:
        self.logger = logger
        self.operation_name = operation_name
        self.log_level = log_level
        self.metadata = metadata
        self.start_time: datetime | None = None
        self.elapsed: float | None = None

    def __enter__(self) -> "PerformanceMonitor":
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is None:
            return

        self.elapsed = (datetime.now() - self.start_time).total_seconds()

        status = "failed" if exc_type else "completed"
        msg = f"{self.operation_name} {status} in {self.elapsed:.2f}s"

        if self.metadata:
            metadata_str = ", ".join(f"{k}={v}" for k, v in self.metadata.items())
            msg = f"{msg} ({metadata_str})"

        self.logger.log(self.log_level, msg)


# -------------------- Initialization --------------------


def initialize_logging(level: int | None = None, log_file: bool = False) -> None:
    """
    Initialize logging for the command-line application.

    Sets up the root logger; should be called once at startup.
    """
    if level is None:
        level = DEFAULT_LEVEL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            get_log_file_path(),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        f"Logging initialized. Level: {logging.getLevelName(level)}"
    )
