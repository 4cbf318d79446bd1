"""Unit tests for structured logging configuration."""

import json
import logging

import pytest

from fairness_audit_toolkit.config.logging_config import (
    AuditLogger,
    StructuredFormatter,
    get_audit_logger,
    setup_logging,
)


class TestStructuredFormatter:
    """Test cases for the JSON formatter."""

    def test_format_includes_extra_fields(self):
        """Test known extra fields are copied into the JSON record."""
        record = logging.LogRecord(
            name="fairness_audit.auditor",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="disparate_impact_ratio: %.4f",
            args=(0.5882,),
            exc_info=None,
        )
        record.component = "auditor"
        record.metric_name = "disparate_impact_ratio"
        record.metric_value = 0.5882
        record.passed = False

        data = json.loads(StructuredFormatter().format(record))
        assert data["message"] == "disparate_impact_ratio: 0.5882"
        assert data["level"] == "INFO"
        assert data["logger"] == "fairness_audit.auditor"
        assert data["component"] == "auditor"
        assert data["metric_value"] == 0.5882
        assert data["passed"] is False
        assert "stage" not in data


class TestSetupLogging:
    """Test cases for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        """Restore root logger handlers after each test."""
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_returns_audit_logger(self):
        """Test the package logger is returned at the requested level."""
        logger = setup_logging(level="DEBUG", console_output=False)
        assert logger.name == "fairness_audit"
        assert logger.level == logging.DEBUG

    def test_log_file(self, tmp_path):
        """Test structured records are written to the log file."""
        log_file = tmp_path / "logs" / "audit.log"
        setup_logging(level="INFO", log_file=str(log_file), console_output=False)

        get_audit_logger("test").log_stage_start("fairness_audit")
        for handler in logging.getLogger().handlers:
            handler.flush()

        line = log_file.read_text().strip().splitlines()[-1]
        data = json.loads(line)
        assert data["message"] == "Starting fairness_audit"
        assert data["component"] == "test"
        assert data["stage"] == "fairness_audit"

    def test_stage_details_reach_log_file(self, tmp_path):
        """Test per-call details are written as a nested JSON object."""
        log_file = tmp_path / "audit.log"
        setup_logging(level="INFO", log_file=str(log_file), console_output=False)

        get_audit_logger("auditor").log_stage_complete(
            "fairness_audit", {"overall_fairness_score": 73, "violations": 4}
        )
        for handler in logging.getLogger().handlers:
            handler.flush()

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["status"] == "complete"
        assert data["details"] == {"overall_fairness_score": 73, "violations": 4}


class TestAuditLogger:
    """Test cases for AuditLogger."""

    def test_logger_name(self):
        """Test component loggers live under the package namespace."""
        logger = get_audit_logger("runner")
        assert isinstance(logger, AuditLogger)
        assert logger.logger.name == "fairness_audit.runner"

    def test_log_metric(self, caplog):
        """Test metric records carry the verdict."""
        with caplog.at_level(logging.INFO, logger="fairness_audit"):
            get_audit_logger("auditor").log_metric(
                "statistical_parity_difference", 0.35, 0.1, False
            )

        record = caplog.records[-1]
        assert record.getMessage() == "statistical_parity_difference: 0.3500 (VIOLATION)"
        assert record.metric_name == "statistical_parity_difference"
        assert record.threshold == 0.1

    def test_log_error_records_type(self, caplog):
        """Test errors record the exception type."""
        with caplog.at_level(logging.ERROR, logger="fairness_audit"):
            try:
                raise KeyError("group")
            except KeyError as e:
                get_audit_logger("runner").log_error("Audit run failed", e)

        assert caplog.records[-1].error_type == "KeyError"
