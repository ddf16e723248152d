"""Logging configuration and utilities."""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if enabled."""
        levelname = record.levelname

        if self.use_colors and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        result = super().format(record)
        record.levelname = levelname
        return result


class ProgressLogger:
    """Logs progress of a batch at a fixed interval."""

    def __init__(self, logger: logging.Logger, total: int, operation: str = "Processing",
                 interval: int = 1000):
        """
        Initialize progress logger.

        Args:
            logger: Logger instance to use
            total: Total number of items
            operation: Operation description
            interval: Log every N items
        """
        self.logger = logger
        self.total = total
        self.operation = operation
        self.interval = max(1, interval)
        self.processed = 0
        self.start_time = datetime.now()

    def update(self, processed: int, total: Optional[int] = None):
        """Record progress; matches the ParallelProcessor progress callback."""
        self.processed = processed
        if total is not None:
            self.total = total

        if processed % self.interval and processed != self.total:
            return

        progress = (self.processed / self.total) * 100 if self.total > 0 else 0
        elapsed = (datetime.now() - self.start_time).total_seconds()
        if self.processed > 0 and elapsed > 0:
            rate = self.processed / elapsed
            remaining = (self.total - self.processed) / rate if rate > 0 else 0
            eta = f", ETA: {int(remaining)}s"
        else:
            eta = ""

        self.logger.info(
            f"{self.operation}: {self.processed}/{self.total} ({progress:.1f}%){eta}"
        )

    def complete(self, failed: int = 0):
        """Log completion summary."""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        success_rate = ((self.processed - failed) / self.processed * 100) if self.processed > 0 else 0

        self.logger.info(
            f"{self.operation} complete: {self.processed} items in {elapsed:.1f}s "
            f"({success_rate:.1f}% success rate)"
        )


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console: bool = True,
    colors: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    quiet: bool = False
) -> Dict[str, logging.Logger]:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file name; no file logging when neither this nor log_dir is set
        log_dir: Directory for log files
        console: Enable console output (stderr)
        colors: Enable colored console output
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup files to keep
        quiet: Suppress all but error logs to console

    Returns:
        Dictionary of configured loggers
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    log_path = None
    if log_file or log_dir:
        directory = Path(log_dir or ".prositometry_logs")
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / (log_file or f"prositometry_{datetime.now().strftime('%Y%m%d')}.log")

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR if quiet else level)
        console_handler.setFormatter(ColoredFormatter('%(levelname)s - %(message)s', use_colors=colors))
        root_logger.addHandler(console_handler)

    loggers = {
        'main': logging.getLogger('prositometry'),
        'pipeline': logging.getLogger('prositometry.pipeline'),
        'performance': logging.getLogger('prositometry.performance'),
    }

    loggers['main'].debug(f"Logging initialized - Level: {log_level}, File: {log_path}")
    return loggers


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"prositometry.{name}")


class LogTimer:
    """Context manager for timing operations."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        self.operation = operation
        self.logger = logger or logging.getLogger('prositometry.performance')
        self.start_time = None
        self.elapsed = 0.0

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            self.elapsed = (datetime.now() - self.start_time).total_seconds()
            if exc_type is None:
                self.logger.info(f"{self.operation} completed in {self.elapsed:.2f}s")
            else:
                self.logger.error(f"{self.operation} failed after {self.elapsed:.2f}s")
