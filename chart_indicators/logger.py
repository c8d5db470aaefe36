"""
Loguru logger configuration with runtime level control and deduplication
"""
from loguru import logger
import sys
import time
import threading
from pathlib import Path
from collections import deque
from typing import Dict, Any, List, Optional

from chart_indicators.config import settings
from chart_indicators.core.exceptions import ConfigurationError

VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogDeduplicationFilter:
    """Filter to suppress duplicate log messages from the same location.

    A record is dropped when a record from the same file and line was let
    through less than ``time_threshold_seconds`` ago. Redrawing a chart calls
    every indicator once per frame, so warm-up messages would otherwise flood
    the console.
    """

    def __init__(self, max_history: int = 5, time_threshold_seconds: float = 1.0):
        """Initialize deduplication filter.

        Args:
            max_history: Number of recent logs to track (default 5)
            time_threshold_seconds: Suppress duplicates within this time window (default 1.0s)
        """
        self.max_history = max_history
        self.time_threshold = time_threshold_seconds
        # Each entry: {"file": str, "line": int, "timestamp": float}
        self.recent_logs = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def __call__(self, record: Dict[str, Any]) -> bool:
        """Return True to emit the record, False to suppress it."""
        current_file = record["file"].path
        current_line = record["line"]
        current_time = time.time()

        with self._lock:
            for recent in self.recent_logs:
                if recent["line"] == current_line and recent["file"] == current_file:
                    if current_time - recent["timestamp"] < self.time_threshold:
                        return False

            self.recent_logs.append({
                "file": current_file,
                "line": current_line,
                "timestamp": current_time
            })
            return True


class LoggerManager:
    """Manages library logging with runtime level control"""

    def __init__(self, config=None):
        config = config or settings.LOGGER
        self.current_level = config.default_level.upper()
        self.log_file_path: Optional[Path] = Path(config.file_path) if config.file_path else None
        self.log_rotation = config.rotation
        self.log_retention = config.retention

        self._handler_ids: List[int] = []
        self._default_removed = False
        self.dedup_filter = None
        if config.filter_enabled:
            self.dedup_filter = LogDeduplicationFilter(
                max_history=config.filter_max_history,
                time_threshold_seconds=config.filter_time_threshold_seconds
            )

        self.setup_logger()

    def setup_logger(self):
        """Configure logger with a console handler and an optional file handler"""
        # Only our own sinks; sinks added by the host application stay in place
        for handler_id in self._handler_ids:
            logger.remove(handler_id)
        self._handler_ids = []
        if not self._default_removed:
            # loguru pre-installs a DEBUG stderr sink (id 0); ours replaces it
            try:
                logger.remove(0)
            except ValueError:
                pass  # already removed by the host application
            self._default_removed = True

        console_id = logger.add(
            sys.stderr,
            level=self.current_level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=self.dedup_filter
        )
        self._handler_ids.append(console_id)

        if self.log_file_path is not None:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_id = logger.add(
                str(self.log_file_path),
                level="DEBUG",  # File always keeps DEBUG and above
                format=(
                    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                    "{level: <8} | "
                    "{name}:{function}:{line} - "
                    "{message}"
                ),
                rotation=self.log_rotation,
                retention=self.log_retention,
                compression="zip",
                backtrace=True,
                diagnose=False,
                enqueue=True,
                filter=self.dedup_filter
            )
            self._handler_ids.append(file_id)

        logger.debug(f"Logger initialized with level: {self.current_level}")

    def set_level(self, level: str) -> str:
        """
        Change log level at runtime

        Args:
            level: New log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)

        Returns:
            The new log level

        Raises:
            ConfigurationError: If level is invalid
        """
        level_upper = level.upper()
        if level_upper not in VALID_LEVELS:
            raise ConfigurationError(f"Invalid level '{level}'. Choose from: {', '.join(VALID_LEVELS)}")

        old_level = self.current_level
        self.current_level = level_upper
        self.setup_logger()

        logger.debug(f"Log level changed from {old_level} to {level_upper}")
        return self.current_level

    def get_level(self) -> str:
        """Get current log level"""
        return self.current_level

    def get_available_levels(self) -> list[str]:
        """Get list of available log levels"""
        return list(VALID_LEVELS)


# Global logger manager instance
logger_manager = LoggerManager()

__all__ = ["logger", "logger_manager", "LoggerManager", "LogDeduplicationFilter"]
