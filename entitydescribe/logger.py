"""
Structured logging for entitydescribe.

Wraps a stdlib logger with console/file outputs and keeps counters of
collaborator failures that were absorbed while rendering, so a degraded
describe page can be traced back to the provider that caused it.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks how many documents were rendered and which collaborators failed.
    """

    def __init__(
        self,
        name: str = "entitydescribe",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
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

        self._lock = threading.Lock()
        self.metrics = {
            "documents_rendered": 0,
            "prefixes_described": 0,
            "collaborator_failures": 0,
            "failures_by_type": {},
            "failures_by_prefix": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
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

            log_file = log_dir / f"entitydescribe_{datetime.now().strftime('%Y%m%d')}.log"
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

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_document(self, prefix_count: int):
        """Record a rendered document covering prefix_count prefixes."""
        with self._lock:
            self.metrics["documents_rendered"] += 1
            self.metrics["prefixes_described"] += prefix_count

    def record_collaborator_failure(self, prefix: str, section: str, error_type: str):
        """Record a collaborator failure absorbed while describing a prefix."""
        with self._lock:
            self.metrics["collaborator_failures"] += 1

            by_type = self.metrics["failures_by_type"]
            by_type[error_type] = by_type.get(error_type, 0) + 1

            sections = self.metrics["failures_by_prefix"].setdefault(prefix, {})
            sections[section] = sections.get(section, 0) + 1

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics."""
        with self._lock:
            return json.loads(json.dumps(self.metrics))

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Describe Session Metrics ===")
        self.info(f"Documents: {metrics['documents_rendered']}")
        self.info(f"Prefixes described: {metrics['prefixes_described']}")
        self.info(f"Collaborator failures: {metrics['collaborator_failures']}")

        if metrics["failures_by_prefix"]:
            self.info("Degraded prefixes:")
            for prefix, sections in sorted(metrics["failures_by_prefix"].items()):
                detail = ", ".join(f"{s}={n}" for s, n in sorted(sections.items()))
                self.info(f"  {prefix}: {detail}")

        if metrics["failures_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["failures_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "entitydescribe",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
