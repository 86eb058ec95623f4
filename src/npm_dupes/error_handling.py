"""
Error types and central error reporting for npm-dupes.

Fatal conditions are raised as exceptions; recoverable ones (a single bad
manifest, an unreadable subdirectory) are reported through an ErrorHandler
so the scan can continue while every skip still reaches standard error.
"""

import logging
import sys
import traceback
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"


class NpmDupesError(Exception):
    """Base class for all npm-dupes errors."""


class ScanIOError(NpmDupesError):
    """A file or directory could not be read."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class RootFolderError(ScanIOError):
    """The folder to scan is missing, not a directory, or unreadable."""


class ManifestIOError(ScanIOError):
    """A single manifest could not be read."""


class IgnoreFileError(ScanIOError):
    """The ignore file exists but could not be read."""


class ManifestParseError(NpmDupesError):
    """A manifest is not a well-formed JSON object."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ErrorLevel(Enum):
    """Error severity levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """Error categories for better classification."""

    PARSING = "PARSING"
    FILESYSTEM = "FILESYSTEM"


@dataclass
class ErrorContext:
    """Structured error context information."""

    level: ErrorLevel
    category: ErrorCategory
    message: str
    module: str
    function: str
    details: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None
    traceback_info: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error context to dictionary for logging."""
        return {
            "level": self.level.value,
            "category": self.category.value,
            "message": self.message,
            "module": self.module,
            "function": self.function,
            "details": self.details,
            "exception_type": type(self.exception).__name__ if self.exception else None,
            "exception_message": str(self.exception) if self.exception else None,
            "traceback": self.traceback_info,
        }


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever sys.stderr is at emit time."""

    def __init__(self, level: int = logging.NOTSET):
        super().__init__(sys.stderr)
        self.setLevel(level)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


class ErrorLogger:
    """Writes error contexts to standard error through the logging module."""

    def __init__(self, name: str, level: int = logging.WARNING):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = StderrHandler()
            handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
            self.logger.addHandler(handler)

    def log_error_context(self, context: ErrorContext) -> None:
        log_message = context.message
        if context.details:
            details = ", ".join(f"{k}={v}" for k, v in context.details.items())
            log_message = f"{log_message} ({details})"

        level = getattr(logging, context.level.value)
        self.logger.log(level, log_message, extra={"error_context": context.to_dict()})


# Error callback type
ErrorCallback = Callable[[ErrorContext], None]


class ErrorHandler:
    """
    Centralized handler for recoverable errors.

    Logs each error, keeps per-category statistics and notifies any
    registered callbacks.
    """

    def __init__(
        self,
        logger_name: str = "npm_dupes",
        log_level: int = logging.WARNING,
        enable_callbacks: bool = True,
    ):
        self.logger = ErrorLogger(logger_name, log_level)
        self.enable_callbacks = enable_callbacks
        self.error_callbacks: Dict[ErrorCategory, List[ErrorCallback]] = {}
        self.global_callbacks: List[ErrorCallback] = []
        self.error_stats: Dict[str, int] = {}

    def register_callback(
        self, callback: ErrorCallback, category: Optional[ErrorCategory] = None
    ) -> None:
        """
        Register error callback.

        Args:
            callback: Function to call on errors
            category: Error category to filter, None for all errors
        """
        if not self.enable_callbacks:
            return

        if category is None:
            self.global_callbacks.append(callback)
        else:
            self.error_callbacks.setdefault(category, []).append(callback)

    def handle_error(
        self,
        level: ErrorLevel,
        category: ErrorCategory,
        message: str,
        module: str,
        function: str,
        exception: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ErrorContext:
        """
        Handle an error with logging and callbacks.

        Args:
            level: Error severity level
            category: Error category
            message: Error message
            module: Module where error occurred
            function: Function where error occurred
            exception: Optional exception object
            details: Additional error details

        Returns:
            ErrorContext: The created error context
        """
        context = ErrorContext(
            level=level,
            category=category,
            message=message,
            module=module,
            function=function,
            details=details or {},
            exception=exception,
            traceback_info=(
                "".join(traceback.format_exception_only(type(exception), exception))
                if exception
                else None
            ),
        )

        stat_key = f"{category.value}_{level.value}"
        self.error_stats[stat_key] = self.error_stats.get(stat_key, 0) + 1

        self.logger.log_error_context(context)

        if self.enable_callbacks:
            for callback in self.error_callbacks.get(category, []):
                callback(context)
            for callback in self.global_callbacks:
                callback(context)

        return context

    def warning(
        self,
        category: ErrorCategory,
        message: str,
        module: str,
        function: str,
        **kwargs,
    ) -> ErrorContext:
        """Handle warning level error."""
        return self.handle_error(
            ErrorLevel.WARNING, category, message, module, function, **kwargs
        )

    def get_error_stats(self) -> Dict[str, int]:
        """Get error statistics."""
        return self.error_stats.copy()


_default_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Return the shared handler used when callers do not supply their own."""
    global _default_error_handler
    if _default_error_handler is None:
        _default_error_handler = ErrorHandler()
    return _default_error_handler


def log_parsing_error(
    message: str,
    module: str,
    function: str,
    file_path: Optional[Path] = None,
    exception: Optional[Exception] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> ErrorContext:
    """
    Report a manifest that could not be parsed and is being skipped.

    Args:
        message: Error message
        module: Module name
        function: Function name
        file_path: Manifest being parsed
        exception: Optional exception
        error_handler: Handler to report through (defaults to the shared one)
    """
    details = {}
    if file_path is not None:
        details["file_path"] = str(file_path)

    return (error_handler or get_error_handler()).warning(
        ErrorCategory.PARSING,
        message,
        module,
        function,
        details=details,
        exception=exception,
    )


def log_filesystem_error(
    message: str,
    module: str,
    function: str,
    path: Optional[Path] = None,
    exception: Optional[Exception] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> ErrorContext:
    """Report an unreadable file or directory that is being skipped."""
    details = {}
    if path is not None:
        details["path"] = str(path)

    return (error_handler or get_error_handler()).warning(
        ErrorCategory.FILESYSTEM,
        message,
        module,
        function,
        details=details,
        exception=exception,
    )
