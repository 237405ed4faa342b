"""
Structured logging for tripmate.

Centralizes console/file output and keeps counters for API health
and reconciliation throughput so a feed refresh can be summarized.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def parse_level(level) -> Optional[int]:
    """Numeric level for a name like 'debug' or 'WARNING', or None if unknown."""
    numeric = logging.getLevelName(str(level).strip().upper())
    return numeric if isinstance(numeric, int) else None


class StructuredLogger:
    """
    Logger with console and optional file output.
    Tracks request and reconciliation metrics.
    """

    def __init__(
        self,
        name: str = "tripmate",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown
                names fall back to INFO with a warning
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        numeric = parse_level(level)
        effective = logging.INFO if numeric is None else numeric
        self.logger = logging.getLogger(name)
        self.logger.setLevel(effective)
        self.logger.handlers.clear()
        self.logger.propagate = False
        self._file_handler: Optional[logging.FileHandler] = None

        self.metrics = {
            "api_calls": 0,
            "requests_attempted": 0,
            "requests_successful": 0,
            "requests_failed": 0,
            "errors_by_type": {},
            "endpoint_success_rate": {},
            "candidates_processed": 0,
            "entries_emitted": 0,
            "duplicates_dropped": 0,
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(effective)
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            self._add_file_handler(log_dir or Path("logs"))

        if numeric is None:
            self.warning("Unknown log level, using INFO", level=level)

    def _add_file_handler(self, log_dir: Path):
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"tripmate_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(file_handler)
        self._file_handler = file_handler

    def configure(self, level: Optional[str] = None, log_dir: Optional[Path] = None):
        """
        Apply settings that became known after the logger was created,
        e.g. values loaded from .env. Console handlers follow the new level;
        a file handler is added if log_dir is given and none exists yet.
        """
        if level:
            numeric = parse_level(level)
            if numeric is None:
                self.warning("Unknown log level, keeping current level", level=level)
            else:
                self.logger.setLevel(numeric)
                for handler in self.logger.handlers:
                    if handler is not self._file_handler:
                        handler.setLevel(numeric)
        if log_dir is not None and self._file_handler is None:
            self._add_file_handler(Path(log_dir))

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if not self.logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False, default=str)}"
        self.logger.log(level, message)

    # Request metrics

    def record_api_call(self):
        self.metrics["api_calls"] += 1

    def record_request_attempt(self, endpoint: str):
        """Record a request against an endpoint label such as 'posts'."""
        self.metrics["requests_attempted"] += 1
        stats = self.metrics["endpoint_success_rate"].setdefault(
            endpoint, {"attempts": 0, "successes": 0}
        )
        stats["attempts"] += 1

    def record_request_success(self, endpoint: str):
        self.metrics["requests_successful"] += 1
        if endpoint in self.metrics["endpoint_success_rate"]:
            self.metrics["endpoint_success_rate"][endpoint]["successes"] += 1

    def record_request_failure(self, endpoint: str, error_type: str):
        self.metrics["requests_failed"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    # Reconciliation metrics

    def record_reconciliation(self, candidates: int, entries: int, duplicates: int):
        """Accumulate the outcome of one reconcile run."""
        self.metrics["candidates_processed"] += candidates
        self.metrics["entries_emitted"] += entries
        self.metrics["duplicates_dropped"] += duplicates

    def get_metrics(self) -> dict:
        """Return current metrics with per-endpoint success rates filled in."""
        metrics_copy = self.metrics.copy()
        for stats in metrics_copy["endpoint_success_rate"].values():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(stats["successes"] / stats["attempts"], 3)
        return metrics_copy

    def log_metrics_summary(self):
        metrics = self.get_metrics()

        total_attempts = metrics["requests_attempted"]
        total_successes = metrics["requests_successful"]
        overall_rate = 0
        if total_attempts > 0:
            overall_rate = round(total_successes / total_attempts * 100, 1)

        self.info("=== Feed Session Metrics ===")
        self.info(f"API Calls: {metrics['api_calls']}")
        self.info(f"Requests: {total_successes}/{total_attempts} ({overall_rate}% success)")
        self.info(
            f"Candidates: {metrics['candidates_processed']} -> "
            f"{metrics['entries_emitted']} entries ({metrics['duplicates_dropped']} duplicates dropped)"
        )

        if metrics["endpoint_success_rate"]:
            self.info("Endpoint Success Rates:")
            for endpoint, stats in metrics["endpoint_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {endpoint}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "tripmate",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and file output default to TRIPMATE_LOG_LEVEL and TRIPMATE_LOG_DIR;
    file logging is off unless a log directory is configured.
    """
    global _global_logger

    if _global_logger is None:
        log_dir = os.getenv("TRIPMATE_LOG_DIR")
        kwargs.setdefault("log_dir", Path(log_dir) if log_dir else None)
        kwargs.setdefault("enable_file", bool(log_dir))
        _global_logger = StructuredLogger(
            name=name,
            level=level or os.getenv("TRIPMATE_LOG_LEVEL", "INFO"),
            **kwargs,
        )

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
