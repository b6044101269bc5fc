"""
Structured logging for the jobboard data-access layer.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for the statements sent to the store.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from . import config


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics about executed statements and raised errors.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        # Metrics tracking
        self.metrics = {
            "queries_executed": 0,
            "rows_returned": 0,
            "statements_by_kind": {},
            "errors_by_type": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_query(self, kind: str, rows: int):
        """Record an executed statement and the number of rows it returned."""
        self.metrics["queries_executed"] += 1
        self.metrics["rows_returned"] += rows
        by_kind = self.metrics["statements_by_kind"]
        by_kind[kind] = by_kind.get(kind, 0) + 1

    def record_error(self, error_type: str):
        """Record a raised domain error."""
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        return {
            "queries_executed": self.metrics["queries_executed"],
            "rows_returned": self.metrics["rows_returned"],
            "statements_by_kind": dict(self.metrics["statements_by_kind"]),
            "errors_by_type": dict(self.metrics["errors_by_type"]),
        }

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Store Session Metrics ===")
        self.info(f"Queries: {metrics['queries_executed']} ({metrics['rows_returned']} rows)")

        if metrics["statements_by_kind"]:
            self.info("Statements:")
            for kind, count in sorted(metrics["statements_by_kind"].items()):
                self.info(f"  {kind}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and log directory default to the environment configuration;
    without JOBBOARD_LOG_DIR no file handler is installed.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if "log_dir" not in kwargs and "enable_file" not in kwargs:
            log_dir = config.get_log_dir()
            kwargs["log_dir"] = log_dir
            kwargs["enable_file"] = log_dir is not None
        _global_logger = StructuredLogger(
            name=name, level=level or config.get_log_level(), **kwargs
        )

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
