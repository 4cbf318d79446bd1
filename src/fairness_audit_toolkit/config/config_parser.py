"""Configuration parsing and validation utilities for fairness audits.

This module contains Pydantic models for audit configuration and a parser that
performs several validation steps.
These steps include schema validation
using Pydantic models (shape, types, ranges), security controls for paths
and command-like strings, and limits on policy values such as thresholds
and score weights.

Thresholds and score weights are policy parameters rather than constants of
the metrics themselves, so they live here and can be overridden per audit.
"""

import math
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

WEIGHT_SUM_TOLERANCE = 1e-9


class ThresholdsConfig(BaseModel):
    """Pass/fail thresholds for the fairness metrics.

    Attributes:
      disparate_impact_threshold (float): Minimum acceptable disparate impact
        ratio. Defaults to the EEOC four-fifths rule.
      parity_threshold (float): Maximum acceptable absolute difference for
        statistical parity, equalized odds and predictive parity.
    """

    disparate_impact_threshold: float = Field(
        0.8, gt=0, le=1.0, description="Minimum disparate impact ratio"
    )
    parity_threshold: float = Field(
        0.1, gt=0, le=1.0, description="Maximum parity difference"
    )


class ScoreWeights(BaseModel):
    """Weights of each metric in the overall fairness score.

    Disparate impact carries the largest default weight because it is the only
    metric with explicit regulatory codification (29 CFR 1607.4D). The split is
    a policy choice and can be recalibrated without code changes, either in an
    audit config or in pyproject.toml.

    Attributes:
      disparate_impact (float): Weight of the disparate impact deviation.
      statistical_parity (float): Weight of the statistical parity difference.
      equalized_odds (float): Weight of the equalized odds difference.
      predictive_parity (float): Weight of the predictive parity difference.
    """

    disparate_impact: float = Field(0.30, ge=0, le=1.0)
    statistical_parity: float = Field(0.25, ge=0, le=1.0)
    equalized_odds: float = Field(0.25, ge=0, le=1.0)
    predictive_parity: float = Field(0.20, ge=0, le=1.0)

    @model_validator(mode="after")
    def validate_weight_sum(self):
        """Require the weights to partition the score exactly.

        Raises:
          ValueError: If the weights do not sum to 1.0.

        Returns:
          ScoreWeights: The validated weights.
        """
        total = (
            self.disparate_impact
            + self.statistical_parity
            + self.equalized_odds
            + self.predictive_parity
        )
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_SUM_TOLERANCE):
            raise ValueError(f"Score weights must sum to 1.0, got: {total}")
        return self

    @classmethod
    def from_pyproject(cls, pyproject_path: Optional[Path] = None) -> "ScoreWeights":
        """Load score weights from a pyproject.toml.

        The method searches upward from the current working directory for the
        closest pyproject.toml.
        If found, it reads settings under:
        [tool.fairness_audit_toolkit.scoring].

        Args:
          pyproject_path (Optional[Path]): Optional explicit path to
            pyproject.toml.
            If not provided, a parent search is performed.

        Raises:
          ValidationError: If the table is present but the weights are invalid.

        Returns:
          ScoreWeights:
          Weights populated from the file, or defaults if none found or the
          file cannot be read.
        """
        if pyproject_path is None:
            current_dir = Path.cwd()
            for parent in [current_dir] + list(current_dir.parents):
                candidate = parent / "pyproject.toml"
                if candidate.exists():
                    pyproject_path = candidate
                    break

        if pyproject_path and pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    config_data = tomllib.load(f)
            except (IOError, tomllib.TOMLDecodeError):
                # Unreadable project files fall back to defaults.
                return cls()

            scoring = (
                config_data.get("tool", {})
                .get("fairness_audit_toolkit", {})
                .get("scoring", {})
            )
            if scoring:
                return cls(**scoring)

        return cls()


class ConfusionMatrixConfig(BaseModel):
    """Inline confusion matrix counts for one group.

    The metrics engine accepts any counts; the config boundary is where
    negative counts are rejected.
    """

    true_positives: int = Field(..., ge=0)
    false_positives: int = Field(..., ge=0)
    true_negatives: int = Field(..., ge=0)
    false_negatives: int = Field(..., ge=0)


class MatricesConfig(BaseModel):
    """Pre-aggregated confusion matrices for the two audited groups."""

    protected: ConfusionMatrixConfig
    privileged: ConfusionMatrixConfig


class DataConfig(BaseModel):
    """Raw outcome data configuration.

    Attributes:
      input_path (str): Path to a CSV file of outcome records.
      group_column (str): Column holding the group identifier.
      protected_group (Union[str, int]): Value of the protected group.
      privileged_group (Union[str, int]): Value of the privileged group.
      predicted_column (str): Column holding the predicted outcome.
      actual_column (str): Column holding the actual outcome.
      positive_label (Union[str, int]): Label counted as a positive outcome.
    """

    input_path: str = Field(..., description="Path to outcome records CSV")
    group_column: str = Field(..., description="Name of group column")
    protected_group: Union[str, int] = Field(..., description="Protected group value")
    privileged_group: Union[str, int] = Field(
        ..., description="Privileged group value"
    )
    predicted_column: str = Field("predicted", description="Predicted outcome column")
    actual_column: str = Field("actual", description="Actual outcome column")
    positive_label: Union[str, int] = Field(1, description="Positive outcome label")

    @model_validator(mode="after")
    def validate_distinct_groups(self):
        """Reject audits that compare a group with itself.

        Raises:
          ValueError: If protected and privileged groups are the same value.

        Returns:
          DataConfig: The validated configuration.
        """
        if self.protected_group == self.privileged_group:
            raise ValueError("protected_group and privileged_group must differ")
        return self


class ReportConfig(BaseModel):
    """Report rendering options.

    Attributes:
      title (str): Heading printed above the report tables.
      output_format (str): ``table`` for rich tables, ``json`` for JSON.
    """

    title: str = Field("Fairness Audit", max_length=200)
    output_format: Literal["table", "json"] = "table"

    @field_validator("title")
    def validate_title(cls, v):
        """Reject titles containing rich markup brackets.

        Args:
          v (str): Provided title.

        Raises:
          ValueError: If the title contains square brackets.

        Returns:
          str: The validated title.
        """
        if re.search(r"[\[\]]", v):
            raise ValueError("title must not contain square brackets")
        return v


class AuditConfig(BaseModel):
    """Top-level audit configuration.

    Exactly one input source must be configured: ``data`` for raw outcome
    records, or ``matrices`` for pre-aggregated counts.

    Attributes:
      thresholds (ThresholdsConfig): Pass/fail thresholds.
      scoring (ScoreWeights): Overall score weights.
      data (Optional[DataConfig]): Raw outcome data settings.
      matrices (Optional[MatricesConfig]): Inline confusion matrices.
      report (ReportConfig): Report rendering options.
    """

    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    scoring: ScoreWeights = Field(default_factory=ScoreWeights)
    data: Optional[DataConfig] = None
    matrices: Optional[MatricesConfig] = None
    report: ReportConfig = Field(default_factory=ReportConfig)

    @model_validator(mode="after")
    def validate_input_source(self):
        """Require exactly one of ``data`` and ``matrices``.

        Raises:
          ValueError: If neither or both input sources are configured.

        Returns:
          AuditConfig: The validated configuration.
        """
        if (self.data is None) == (self.matrices is None):
            raise ValueError("Exactly one of 'data' or 'matrices' must be configured")
        return self


class ConfigParser:
    """Parse and validate audit configuration safely.

    This class provides a YAML loader with additional security and resource
    checks.
    It prevents dangerous paths, command-like strings, or out-of-range policy
    values from slipping into downstream components.
    """

    @staticmethod
    def load(config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load and security-check a YAML configuration file.

        This method performs several layers of checks:
        - Path resolution and allowlist checks for safety.
        - File size limits to avoid loading unexpectedly large files.
        - YAML parsing and type checks.
        - Security validations on values (paths, commands, limits).

        Args:
          config_path (Union[str, Path]):
          Path to the YAML configuration file.

        Raises:
          ValueError: If the path is invalid,
          unsafe, file too large, YAML is
            invalid, or the contents fail security validations.
          FileNotFoundError: If the path does not exist.

        Returns:
          Dict[str, Any]: The parsed configuration dictionary.
        """
        config_path = Path(config_path)

        try:
            config_path = config_path.resolve()
        except (OSError, RuntimeError) as e:
            raise ValueError(f"Invalid configuration path: {e}")

        if not ConfigParser._is_safe_path(config_path):
            raise ValueError(f"Potentially unsafe configuration path: {config_path}")

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        file_size = config_path.stat().st_size
        if file_size > 10 * 1024 * 1024:
            raise ValueError(
                f"Configuration file too large: {file_size} bytes (max 10MB)"
            )

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except UnicodeDecodeError as e:
            raise ValueError(f"Configuration file encoding error: {e}")

        if config is None:
            raise ValueError("Empty or invalid YAML configuration file")

        if not isinstance(config, dict):
            raise ValueError("Configuration must be a YAML dictionary")

        ConfigParser._validate_security(config)

        return config

    @staticmethod
    def parse(config: Dict[str, Any]) -> AuditConfig:
        """Build a validated AuditConfig from a configuration dict.

        Raises:
          ValueError: If the security checks fail.
          ValidationError: If the schema validation fails.
        """
        ConfigParser._validate_security(config)
        return AuditConfig(**config)

    @staticmethod
    def _is_safe_path(path: Path) -> bool:
        """Return whether a path is considered safe to read.

        The safety policy rejects references to system directories and commonly
        sensitive locations.
        Assumes the path is already resolved and absolute.

        Args:
          path (Path): Absolute path to check.

        Returns:
          bool: True if the path is considered safe, False otherwise.
        """
        dangerous_paths = [
            "/etc",
            "/proc",
            "/sys",
            "/dev",
            "/usr/bin",
            "/bin",
            "/sbin",
            "/boot",
        ]

        path_str = str(path).lower()
        for dangerous in dangerous_paths:
            if path_str == dangerous or path_str.startswith(dangerous + "/"):
                return False

        suspicious_patterns = [
            r"\.ssh/",
            r"\.aws/",
            r"\.gnupg/",
        ]

        for pattern in suspicious_patterns:
            if re.search(pattern, path_str):
                return False

        return True

    @staticmethod
    def _validate_security(config: Dict[str, Any]) -> None:
        """Run security-focused validations on the configuration.

        This includes:
        - File path checks to avoid sensitive directories.
        - Command injection checks against common patterns.
        - Policy limit checks to keep thresholds and weights within bounds.

        Args:
          config (Dict[str, Any]): Parsed configuration dictionary.

        Raises:
          ValueError: If any validation fails.
        """
        ConfigParser._check_strings(config)
        ConfigParser._check_policy_limits(config)

    @staticmethod
    def _check_strings(config: Dict[str, Any], path: str = "") -> None:
        """Recursively validate string values for unsafe paths and commands.

        Args:
          config (Dict[str, Any]): Configuration subtree to validate.
          path (str): Dot-delimited path used for error context.

        Raises:
          ValueError: If an unsafe path or command-like string is detected.
        """
        for key, value in config.items():
            current_path = f"{path}.{key}" if path else str(key)

            if isinstance(value, dict):
                ConfigParser._check_strings(value, current_path)
            elif isinstance(value, str):
                ConfigParser._check_string_value(value, current_path)
            elif isinstance(value, list):
                for i, item in enumerate(value):
                    if isinstance(item, str):
                        ConfigParser._check_string_value(item, f"{current_path}[{i}]")

    @staticmethod
    def _check_string_value(value: str, location: str) -> None:
        path_patterns = [
            r"/etc/passwd",
            r"/etc/shadow",
            r"\.\./",
            r"\\\.\\\.\\",
            r"/proc/",
            r"/sys/",
            r"/dev/",
            r"~/.ssh",
            r"~/.aws",
            r"file://",
            r"ftp://",
            r"sftp://",
        ]
        command_patterns = [
            r";.*rm\s",
            r"`.*`",
            r"\$\(.*\)",
            r"&&.*rm\s",
            r"exec\s*\(",
            r"eval\s*\(",
            r"os\.system",
            r"subprocess",
            r"__import__",
            r"curl\s+",
            r"wget\s+",
        ]

        value_lower = value.lower()
        for pattern in path_patterns:
            if re.search(pattern, value_lower):
                raise ValueError(f"Suspicious file path detected in {location}: {value}")

        for pattern in command_patterns:
            if re.search(pattern, value, re.IGNORECASE):
                raise ValueError(f"Potential command injection in {location}: {value}")

    @staticmethod
    def _check_policy_limits(config: Dict[str, Any]) -> None:
        """Validate threshold and weight ranges with readable messages.

        Args:
          config (Dict[str, Any]): Parsed configuration dictionary.

        Raises:
          ValueError: If a limit is violated.
        """
        thresholds = config.get("thresholds") or {}
        for name in ("disparate_impact_threshold", "parity_threshold"):
            if name in thresholds:
                value = thresholds[name]
                if (
                    isinstance(value, bool)
                    or not isinstance(value, (int, float))
                    or value <= 0
                    or value > 1.0
                ):
                    raise ValueError(f"{name} must be positive and <= 1.0")

        scoring = config.get("scoring") or {}
        for name, value in scoring.items():
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or not (0.0 <= value <= 1.0)
            ):
                raise ValueError(f"Score weight {name} must be between 0.0 and 1.0")

    @staticmethod
    def validate(config: Dict[str, Any]) -> list[str]:
        """Validate a configuration dict against the schema and security rules.

        Args:
          config (Dict[str, Any]): Parsed configuration dictionary.

        Returns:
          list[str]: An empty list if valid,
          or a list of human-readable error
          messages describing validation failures.
        """
        try:
            ConfigParser.parse(config)
            return []
        except ValidationError as e:
            errors = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                errors.append(f"{location}: {error['msg']}" if location else error["msg"])
            return errors
        except ValueError as e:
            return [f"Validation error: {str(e)}"]
