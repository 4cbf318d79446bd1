"""
Configuration-driven execution of fairness audits.

The runner turns a validated audit configuration into a result: it loads the
configured outcome data (or inline confusion matrices), runs the auditor under
the configured thresholds and score weights, and renders the report as rich
tables or JSON.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd
from rich.console import Console

from .config import AuditConfig, ConfigParser, ScoreWeights, get_audit_logger, setup_logging
from .measurement.confusion_matrix import ConfusionMatrix
from .measurement.fairness_auditor import AuditResult, FairnessAuditor


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value).replace("inf", "Infinity")
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def result_to_json(result: AuditResult, indent: Optional[int] = 2) -> str:
    """Serialize an audit result as strict JSON.

    An unbounded disparate impact ratio is written as the string "Infinity".
    """
    return json.dumps(_json_safe(result.to_dict()), indent=indent)


class AuditRunner:
    """
    Executes a fairness audit described by a configuration dictionary.

    The configuration is validated up front so that a misconfigured audit fails
    before any data is read.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        verbose: bool = False,
        enable_logging: bool = True,
        console: Optional[Console] = None,
    ):
        """
        Initialize with configuration and observability settings.

        Raises:
            ValueError: If the configuration fails security checks.
            pydantic.ValidationError: If the configuration fails schema validation.
        """
        if enable_logging:
            log_level = "DEBUG" if verbose else "INFO"
            setup_logging(level=log_level, structured=True, console_output=verbose)

        self.logger = get_audit_logger("runner")
        self.config: AuditConfig = ConfigParser.parse(config)

        if "scoring" in config:
            weights = self.config.scoring
        else:
            weights = ScoreWeights.from_pyproject()

        self.console = console or Console(force_terminal=True, width=120)
        self.auditor = FairnessAuditor(
            thresholds=self.config.thresholds, weights=weights, console=self.console
        )

    def run(self) -> AuditResult:
        """Load the configured inputs and audit them."""
        self.logger.log_stage_start(
            "audit_run",
            {"input_source": "data" if self.config.data is not None else "matrices"},
        )

        try:
            if self.config.data is not None:
                result = self._audit_data()
            else:
                matrices = self.config.matrices
                result = self.auditor.audit(
                    ConfusionMatrix(**matrices.protected.model_dump()),
                    ConfusionMatrix(**matrices.privileged.model_dump()),
                )
        except Exception as e:
            self.logger.log_error("Audit run failed", e)
            raise

        self.logger.log_stage_complete(
            "audit_run",
            {
                "overall_fairness_score": result.overall_fairness_score,
                "passed": result.passed,
            },
        )
        return result

    def _audit_data(self) -> AuditResult:
        data_config = self.config.data
        data_path = Path(data_config.input_path)

        if not data_path.exists():
            raise FileNotFoundError(f"Outcome data file not found: {data_path}")

        self.logger.log_stage_start("data_loading", {"data_path": str(data_path)})
        frame = pd.read_csv(data_path)
        self.logger.log_stage_complete(
            "data_loading", {"rows": len(frame), "columns": len(frame.columns)}
        )

        return self.auditor.audit_outcomes(
            frame,
            data_config.group_column,
            data_config.protected_group,
            data_config.privileged_group,
            predicted_column=data_config.predicted_column,
            actual_column=data_config.actual_column,
            positive_label=data_config.positive_label,
        )

    def render(self, result: AuditResult, output_format: Optional[str] = None) -> None:
        """Render a result in the requested or configured output format."""
        output_format = output_format or self.config.report.output_format
        if output_format == "json":
            print(result_to_json(result))
        else:
            self.auditor.print_report(result, title=self.config.report.title)
