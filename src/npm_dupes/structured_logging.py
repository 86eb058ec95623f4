"""
Structured logging configuration for npm-dupes.

Scan lifecycle events are logged as key/value records, either as plain text
or as one JSON object per line. Everything goes to standard error so the
report on standard output stays machine-consumable.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .error_handling import DEFAULT_LOG_FORMAT, StderrHandler

PACKAGE_LOGGER = "npm_dupes"

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class ScanLogger:
    """Logger for scan lifecycle events."""

    def __init__(self, name: str = f"{PACKAGE_LOGGER}.scan"):
        self.logger = logging.getLogger(name)
        self.scan_context: Dict[str, Any] = {}

    def set_scan_context(self, **context: Any) -> None:
        self.scan_context = dict(context)

    def clear_scan_context(self) -> None:
        self.scan_context.clear()

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.scan_context, **kwargs}
        fields = " ".join(f"{k}={v}" for k, v in log_data.items() if k != "event_type")
        message = f"{event_type} {fields}" if fields else event_type
        self.logger.log(level, message, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        self._log(logging.INFO, event_type, **kwargs)

    def debug(self, event_type: str, **kwargs) -> None:
        self._log(logging.DEBUG, event_type, **kwargs)


def configure_logging(
    log_level: str = "WARNING",
    enable_json: bool = False,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR)
        enable_json: Emit one JSON object per record instead of plain text
        log_format: Format string for plain-text records

    Returns:
        The configured package logger
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not logger.handlers:
        logger.addHandler(StderrHandler())

    formatter: logging.Formatter
    if enable_json:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(log_format or DEFAULT_LOG_FORMAT)

    for handler in logger.handlers:
        handler.setFormatter(formatter)

    return logger


def log_scan_start(logger: ScanLogger, root: str, manifest_name: str) -> None:
    logger.set_scan_context(root=root)
    logger.info("scan_started", manifest_name=manifest_name)


def log_scan_complete(
    logger: ScanLogger,
    duration_ms: int,
    manifests_found: int,
    manifests_parsed: int,
    duplicates: int,
    ignored: int,
) -> None:
    """Log scan completion event and drop the scan context."""
    logger.info(
        "scan_completed",
        scan_duration_ms=duration_ms,
        manifests_found=manifests_found,
        manifests_parsed=manifests_parsed,
        duplicates=duplicates,
        ignored=ignored,
    )
    logger.clear_scan_context()
