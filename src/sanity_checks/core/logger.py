# src/sanity_checks/core/logger.py
"""
Structured Logging for the Sanity Check Library

This module provides:
- Structured JSON (or console) logging through structlog
- Correlation and test IDs carried through context variables
- Performance timing of every check
- Standardized assertion logging

All loggers live under the "sanity_checks" stdlib logger, so an
embedding test suite can route or silence them with ordinary logging
configuration. The root logger is never touched.
"""

import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

LOGGER_NAMESPACE = "sanity_checks"

# Context variables for correlation tracking
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')
test_id_var: ContextVar[str] = ContextVar('test_id', default='')


class PerformanceTimer:
    """
    Time a check (or other operation) and log its outcome.

    A failed assertion (any AssertionError) is logged as a warning with
    outcome="failed"; anything else escaping the block is an error with
    outcome="error". Neither is suppressed.

    Example:
        >>> with PerformanceTimer("check_page_found") as timer:
        ...     timer.add_metric("status_code", response.status)
    """

    def __init__(self, operation_name: str, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.metrics: Dict[str, Any] = {}
        self._started: Optional[float] = None
        self._elapsed: Optional[float] = None

    def __enter__(self) -> "PerformanceTimer":
        self._started = time.perf_counter()
        self.logger.debug("Operation started", operation=self.operation_name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._elapsed = time.perf_counter() - self._started
        fields = dict(self.metrics, operation=self.operation_name, duration_ms=round(self._elapsed * 1000, 1))

        if exc_type is None:
            self.logger.info("Operation passed", outcome="passed", **fields)
        elif issubclass(exc_type, AssertionError):
            self.logger.warning("Operation failed an assertion", outcome="failed", reason=str(exc_val), **fields)
        else:
            self.logger.error("Operation errored", outcome="error", error_type=exc_type.__name__,
                              reason=str(exc_val), **fields)

    def add_metric(self, key: str, value: Any) -> None:
        self.metrics[key] = value

    @property
    def duration(self) -> Optional[float]:
        """Elapsed seconds so far, or in total once the block has exited."""
        if self._started is None:
            return None
        if self._elapsed is not None:
            return self._elapsed
        return time.perf_counter() - self._started


class LoggingManager:
    """
    Central logging management.

    Configures structlog once and hands out cached bound loggers.
    """

    def __init__(self):
        self._configured = False
        self._loggers: Dict[str, structlog.stdlib.BoundLogger] = {}
        self._handlers: List[logging.Handler] = []

    @property
    def configured(self) -> bool:
        return self._configured

    def configure_logging(
            self,
            log_level: str = "INFO",
            enable_console: bool = True,
            enable_file: bool = False,
            log_file_path: Optional[Path] = None,
            enable_json_format: bool = True,
            enable_correlation_id: bool = True,
            max_file_size_mb: int = 10,
            backup_count: int = 3
    ) -> None:
        """
        Configure the logging system.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            enable_console: Log to stdout
            enable_file: Log to a rotating file
            log_file_path: Path to log file (default: logs/sanity_checks.log)
            enable_json_format: Render JSON instead of console-friendly lines
            enable_correlation_id: Add correlation/test IDs to every entry
            max_file_size_mb: Maximum log file size in MB
            backup_count: Number of backup log files to keep
        """
        if self._configured:
            return

        processors: List[Any] = [structlog.stdlib.add_logger_name]

        if enable_correlation_id:
            processors.append(self._add_correlation_context)

        processors.extend([
            self._add_timestamp,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
        ])

        if enable_json_format:
            processors.append(structlog.processors.JSONRenderer(default=str))
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        package_logger = logging.getLogger(LOGGER_NAMESPACE)
        package_logger.setLevel(getattr(logging, log_level.upper()))

        if enable_console:
            self._add_handler(package_logger, logging.StreamHandler(sys.stdout))

        if enable_file:
            log_path = log_file_path or Path("logs/sanity_checks.log")
            log_path.parent.mkdir(parents=True, exist_ok=True)
            self._add_handler(package_logger, logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding='utf-8'
            ))

        self._configured = True

        self.get_logger("logging_manager").debug(
            "Logging system configured",
            log_level=log_level,
            console_enabled=enable_console,
            file_enabled=enable_file,
            json_format=enable_json_format,
        )

    def configure_from_settings(self) -> None:
        """Configure from get_settings().logging."""
        from sanity_checks.config.settings import get_settings

        config = get_settings().logging
        self.configure_logging(
            log_level=config.level,
            enable_console=config.console_enabled,
            enable_file=config.file_enabled,
            log_file_path=config.file_path,
            enable_json_format=config.format_type == "json",
            enable_correlation_id=config.correlation_id_enabled,
            max_file_size_mb=config.max_file_size_mb,
            backup_count=config.backup_count,
        )

    def reset(self) -> None:
        """Remove handlers installed by this manager and forget the configuration."""
        package_logger = logging.getLogger(LOGGER_NAMESPACE)
        for handler in self._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._loggers.clear()
        structlog.reset_defaults()
        self._configured = False

    def _add_handler(self, logger: logging.Logger, handler: logging.Handler) -> None:
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)
        self._handlers.append(handler)

    def _add_correlation_context(self, logger, method_name, event_dict):
        correlation_id = correlation_id_var.get()
        if correlation_id:
            event_dict['correlation_id'] = correlation_id

        test_id = test_id_var.get()
        if test_id:
            event_dict['test_id'] = test_id

        return event_dict

    def _add_timestamp(self, logger, method_name, event_dict):
        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        return event_dict

    def get_logger(self, name: str = "checks") -> structlog.stdlib.BoundLogger:
        """
        Get a configured logger instance named "sanity_checks.<name>".

        Configures logging from settings on first use.
        """
        if not self._configured:
            self.configure_from_settings()

        if name not in self._loggers:
            self._loggers[name] = structlog.get_logger(f"{LOGGER_NAMESPACE}.{name}")

        return self._loggers[name]

    def get_log_file_paths(self) -> List[Path]:
        """Get paths to all active log files."""
        return [
            Path(handler.baseFilename)
            for handler in self._handlers
            if isinstance(handler, logging.FileHandler)
        ]


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(
        log_level: str = "INFO",
        enable_console: bool = True,
        enable_file: bool = False,
        log_file_path: Optional[Path] = None,
        enable_json_format: bool = True,
        enable_correlation_id: bool = True,
        max_file_size_mb: int = 10,
        backup_count: int = 3
) -> None:
    """
    Set up logging explicitly instead of from settings.

    Has no effect if logging is already configured; call reset_logging()
    first to reconfigure.

    Example:
        >>> setup_logging(log_level="DEBUG", enable_file=True,
        ...               log_file_path=Path("logs/run.log"))
    """
    _logging_manager.configure_logging(
        log_level=log_level,
        enable_console=enable_console,
        enable_file=enable_file,
        log_file_path=log_file_path,
        enable_json_format=enable_json_format,
        enable_correlation_id=enable_correlation_id,
        max_file_size_mb=max_file_size_mb,
        backup_count=backup_count
    )


def reset_logging() -> None:
    _logging_manager.reset()


def get_logger(name: str = "checks") -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> logger = get_logger("checks.load")
        >>> logger.info("Page ready", url="https://example.com")
    """
    return _logging_manager.get_logger(name)


def get_log_file_paths() -> List[Path]:
    return _logging_manager.get_log_file_paths()


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for tracking related operations.

    Returns:
        str: The correlation ID that was set (generated if None was passed)
    """
    if correlation_id is None:
        correlation_id = str(uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def set_test_id(test_id: str) -> None:
    """Set test ID for the current test execution."""
    test_id_var.set(test_id)


def get_performance_timer(operation_name: str) -> PerformanceTimer:
    """
    Create a performance timer for measuring operation duration.

    Example:
        >>> with get_performance_timer("check_page_found") as timer:
        ...     timer.add_metric("status", 200)
    """
    return PerformanceTimer(operation_name)


class LoggingContext:
    """
    Scope correlation and test IDs to a block.

    An existing correlation ID is inherited unless one is given; if there
    is none, a new one is generated. Both IDs are restored on exit.

    Example:
        >>> with LoggingContext(test_id="test_home_page"):
        ...     await check_page_is_loaded(page)  # log entries carry test_id
    """

    def __init__(self, correlation_id: Optional[str] = None, test_id: Optional[str] = None):
        self.correlation_id = correlation_id
        self.test_id = test_id
        self._tokens: List[Token] = []

    def __enter__(self) -> "LoggingContext":
        self.correlation_id = self.correlation_id or correlation_id_var.get() or str(uuid4())
        self._tokens.append(correlation_id_var.set(self.correlation_id))
        if self.test_id is not None:
            self._tokens.append(test_id_var.set(self.test_id))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        while self._tokens:
            token = self._tokens.pop()
            token.var.reset(token)


def log_assertion(assertion_type: str, expected: Any, actual: Any, passed: bool, **kwargs) -> None:
    """
    Log an assertion result with standardized fields.

    Example:
        >>> log_assertion("equal", "complete", ready_state, ready_state == "complete")
    """
    logger = get_logger("assertions")
    log_method = logger.info if passed else logger.error

    log_method(
        f"Assertion {assertion_type}: {'PASSED' if passed else 'FAILED'}",
        assertion_type=assertion_type,
        expected=expected,
        actual=actual,
        passed=passed,
        event_type="assertion",
        **kwargs
    )
