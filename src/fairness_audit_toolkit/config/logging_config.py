"""Configures structured JSON logging to provide consistent, machine-readable output.

This module sets up formatters and loggers so that audit events, metric values
and errors can be parsed, filtered, and ingested by monitoring systems.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """A custom logging formatter that outputs log records as a single JSON object.

    This approach ensures that log entries are self-contained and machine-readable,
    which is essential for reliable parsing and querying in log management systems.
    It includes core metadata by default and allows for adding extra context fields.
    """

    EXTRA_FIELDS = (
        "component",
        "stage",
        "metric_name",
        "metric_value",
        "threshold",
        "passed",
        "error_type",
        "status",
        "details",
    )

    def format(self, record: logging.LogRecord) -> str:
        """Formats a log record into a JSON string.

        The base log data includes standard fields like timestamp and level. It also
        includes the known extra fields passed to the logger. Per-call context
        from the AuditLogger helpers is nested under ``details``.
        """
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    structured: bool = True,
    console_output: bool = True,
) -> logging.Logger:
    """Initializes and configures the root logger for the entire application.

    This function provides a central entry point for setting up logging handlers
    (for console or file output) and formatters (structured JSON or plain text).

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        structured: Use structured JSON logging
        console_output: Enable console output

    Returns:
        Configured logger instance
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    if structured:
        formatter = StructuredFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handlers = []

    if console_output:
        # stdout is reserved for report output
        handlers.append(logging.StreamHandler(sys.stderr))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    audit_logger = logging.getLogger("fairness_audit")
    audit_logger.setLevel(numeric_level)

    logging.getLogger("sklearn").setLevel(logging.WARNING)

    return audit_logger


class AuditLogger:
    """A wrapper class providing a context-aware logger for audit components.

    This logger automatically injects component and stage information into log
    records and provides helpers for common logging patterns, such as
    starting/ending stages, metric values and errors, so that log structure is
    consistent across the toolkit.
    """

    def __init__(self, component_name: str):
        self.logger = logging.getLogger(f"fairness_audit.{component_name}")
        self.component = component_name

    def log_stage_start(self, stage: str, details: Dict[str, Any] = None) -> None:
        """Log the start of an audit stage."""
        extra = {"component": self.component, "stage": stage, "status": "start"}
        if details:
            extra["details"] = details

        self.logger.info(f"Starting {stage}", extra=extra)

    def log_stage_complete(self, stage: str, details: Dict[str, Any] = None) -> None:
        """Log the completion of an audit stage."""
        extra = {"component": self.component, "stage": stage, "status": "complete"}
        if details:
            extra["details"] = details

        self.logger.info(f"Completed {stage}", extra=extra)

    def log_warning(self, message: str, details: Dict[str, Any] = None) -> None:
        """Log a warning with structured data."""
        extra = {"component": self.component}
        if details:
            extra["details"] = details

        self.logger.warning(message, extra=extra)

    def log_error(
        self, message: str, error: Exception = None, details: Dict[str, Any] = None
    ) -> None:
        """Log an error with structured data."""
        extra = {"component": self.component}
        if error:
            extra["error_type"] = type(error).__name__
        if details:
            extra["details"] = details

        if error:
            self.logger.error(message, exc_info=True, extra=extra)
        else:
            self.logger.error(message, extra=extra)

    def log_config_validation(self, errors: list) -> None:
        """Log configuration validation results."""
        if errors:
            self.logger.error(
                f"Configuration validation failed with {len(errors)} errors",
                extra={
                    "component": self.component,
                    "stage": "validation",
                    "details": {"error_count": len(errors), "errors": errors},
                },
            )
        else:
            self.logger.info(
                "Configuration validation passed",
                extra={"component": self.component, "stage": "validation"},
            )

    def log_metric(
        self,
        metric_name: str,
        metric_value: float,
        threshold: float,
        passed: bool,
        stage: str = "evaluation",
    ) -> None:
        """Log a fairness metric with its threshold and verdict."""
        status = "OK" if passed else "VIOLATION"
        self.logger.info(
            f"{metric_name}: {metric_value:.4f} ({status})",
            extra={
                "component": self.component,
                "stage": stage,
                "metric_name": metric_name,
                "metric_value": metric_value,
                "threshold": threshold,
                "passed": passed,
            },
        )


def get_audit_logger(component_name: str) -> AuditLogger:
    """A factory function to get a configured AuditLogger instance.

    This ensures that all components get a logger with a consistent naming
    scheme (fairness_audit.<component_name>) without needing to instantiate
    the AuditLogger directly.
    """
    return AuditLogger(component_name)
