"""Fairness audit orchestration and reporting.

``run_fairness_audit`` is the pure core: it evaluates all four group fairness
metrics for a protected/privileged pair of confusion matrices, scores them and
derives recommendations. ``FairnessAuditor`` wraps it with configured policy,
structured logging and rich report rendering.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

import pandas as pd
from rich import box
from rich.console import Console
from rich.table import Table

from ..config.config_parser import ScoreWeights, ThresholdsConfig
from ..config.logging_config import get_audit_logger
from .confusion_matrix import (
    ConfusionMatrix,
    false_positive_rate,
    positive_predictive_value,
    true_positive_rate,
)
from .fairness_metrics import (
    DEFAULT_DISPARATE_IMPACT_THRESHOLD,
    DEFAULT_PARITY_THRESHOLD,
    FairnessMetrics,
)
from .outcomes import group_confusion_matrices

ALL_WITHIN_THRESHOLD = "All fairness metrics within acceptable thresholds."


@dataclass(frozen=True)
class GroupAnalysis:
    """Per-group breakdown row of an audit."""

    group: str
    selection_rate: float
    positive_rate: float
    true_positive_rate: float
    false_positive_rate: float
    positive_predictive_value: float
    sample_size: int

    @classmethod
    def from_matrix(cls, group: str, cm: ConfusionMatrix) -> "GroupAnalysis":
        rate = cm.selection_rate
        return cls(
            group=group,
            selection_rate=rate,
            positive_rate=rate,
            true_positive_rate=true_positive_rate(cm),
            false_positive_rate=false_positive_rate(cm),
            positive_predictive_value=positive_predictive_value(cm),
            sample_size=cm.total,
        )


@dataclass(frozen=True)
class AuditResult:
    """Outcome of a single fairness audit.

    Attributes:
        disparate_impact_ratio: Protected over privileged selection rate.
        disparate_impact_pass: Whether the ratio meets the minimum threshold.
        statistical_parity_difference: Absolute selection rate gap.
        statistical_parity_pass: Whether the gap is within the parity threshold.
        equalized_odds_difference: Larger of the TPR and FPR gaps.
        equalized_odds_pass: Whether the gap is within the parity threshold.
        predictive_parity_difference: Absolute precision gap.
        predictive_parity_pass: Whether the gap is within the parity threshold.
        overall_fairness_score: Weighted score in [0, 100].
        protected_class_analysis: Protected and privileged breakdown rows.
        recommendations: Remediation guidance in metric evaluation order.
    """

    disparate_impact_ratio: float
    disparate_impact_pass: bool
    statistical_parity_difference: float
    statistical_parity_pass: bool
    equalized_odds_difference: float
    equalized_odds_pass: bool
    predictive_parity_difference: float
    predictive_parity_pass: bool
    overall_fairness_score: int
    protected_class_analysis: Tuple[GroupAnalysis, ...]
    recommendations: Tuple[str, ...]

    @property
    def passed(self) -> bool:
        return (
            self.disparate_impact_pass
            and self.statistical_parity_pass
            and self.equalized_odds_pass
            and self.predictive_parity_pass
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["protected_class_analysis"] = [
            asdict(row) for row in self.protected_class_analysis
        ]
        data["recommendations"] = list(self.recommendations)
        return data


def overall_fairness_score(
    disparate_impact: float,
    statistical_parity: float,
    equalized_odds: float,
    predictive_parity: float,
    weights: Optional[ScoreWeights] = None,
) -> int:
    """Combine the four metric values into a weighted score in [0, 100].

    Each metric contributes ``max(0, 1 - deviation) * 100`` times its weight,
    where the deviation is ``|1 - ratio|`` for disparate impact and the raw
    difference for the other metrics. The sum is rounded half-up.
    """
    weights = weights or ScoreWeights()
    deviations = [
        (abs(1 - disparate_impact), weights.disparate_impact),
        (statistical_parity, weights.statistical_parity),
        (equalized_odds, weights.equalized_odds),
        (predictive_parity, weights.predictive_parity),
    ]
    score = sum(max(0.0, 1 - deviation) * 100 * weight for deviation, weight in deviations)
    return int(math.floor(score + 0.5))


def build_recommendations(
    di_ratio: float,
    di_pass: bool,
    sp_diff: float,
    sp_pass: bool,
    eo_diff: float,
    eo_pass: bool,
    pp_diff: float,
    pp_pass: bool,
    disparate_impact_threshold: float,
    parity_threshold: float,
) -> Tuple[str, ...]:
    """Build remediation sentences for failed metrics, in evaluation order."""
    parity_pct = f"{parity_threshold * 100:g}%"
    recommendations = []

    if not di_pass:
        recommendations.append(
            f"Disparate Impact ratio ({di_ratio:.3f}) is below "
            f"{disparate_impact_threshold:g} threshold. Review selection criteria "
            "for adverse impact on protected class."
        )
    if not sp_pass:
        recommendations.append(
            f"Statistical Parity difference ({sp_diff * 100:.1f}%) exceeds "
            f"{parity_pct} threshold. Outcome rates differ significantly between groups."
        )
    if not eo_pass:
        recommendations.append(
            f"Equalized Odds difference ({eo_diff * 100:.1f}%) exceeds "
            f"{parity_pct} threshold. True/false positive rates differ between groups."
        )
    if not pp_pass:
        recommendations.append(
            f"Predictive Parity difference ({pp_diff * 100:.1f}%) exceeds "
            f"{parity_pct} threshold. Precision differs between groups."
        )

    if not recommendations:
        recommendations.append(ALL_WITHIN_THRESHOLD)

    return tuple(recommendations)


def run_fairness_audit(
    protected_group: ConfusionMatrix,
    privileged_group: ConfusionMatrix,
    disparate_impact_threshold: float = DEFAULT_DISPARATE_IMPACT_THRESHOLD,
    parity_threshold: float = DEFAULT_PARITY_THRESHOLD,
    weights: Optional[ScoreWeights] = None,
) -> AuditResult:
    """Run all four group fairness metrics and aggregate them into one result.

    Args:
        protected_group: Confusion matrix of the group checked for adverse treatment.
        privileged_group: Confusion matrix of the reference group.
        disparate_impact_threshold: Minimum acceptable disparate impact ratio.
        parity_threshold: Maximum acceptable difference for the other metrics.
        weights: Overall score weights; defaults to 0.30/0.25/0.25/0.20.

    Returns:
        The audit result. Degenerate inputs never raise; they fall back to the
        neutral defaults of the individual metrics.
    """
    protected_positives = protected_group.predicted_positives
    protected_total = protected_group.total
    privileged_positives = privileged_group.predicted_positives
    privileged_total = privileged_group.total

    di_ratio = FairnessMetrics.disparate_impact_ratio(
        protected_positives, protected_total, privileged_positives, privileged_total
    )
    sp_diff = FairnessMetrics.statistical_parity_difference(
        protected_positives, protected_total, privileged_positives, privileged_total
    )
    eo_diff = FairnessMetrics.equalized_odds_difference(protected_group, privileged_group)
    pp_diff = FairnessMetrics.predictive_parity_difference(
        protected_group, privileged_group
    )

    di_pass = di_ratio >= disparate_impact_threshold
    sp_pass = sp_diff <= parity_threshold
    eo_pass = eo_diff <= parity_threshold
    pp_pass = pp_diff <= parity_threshold

    return AuditResult(
        disparate_impact_ratio=di_ratio,
        disparate_impact_pass=di_pass,
        statistical_parity_difference=sp_diff,
        statistical_parity_pass=sp_pass,
        equalized_odds_difference=eo_diff,
        equalized_odds_pass=eo_pass,
        predictive_parity_difference=pp_diff,
        predictive_parity_pass=pp_pass,
        overall_fairness_score=overall_fairness_score(
            di_ratio, sp_diff, eo_diff, pp_diff, weights
        ),
        protected_class_analysis=(
            GroupAnalysis.from_matrix("Protected", protected_group),
            GroupAnalysis.from_matrix("Privileged", privileged_group),
        ),
        recommendations=build_recommendations(
            di_ratio,
            di_pass,
            sp_diff,
            sp_pass,
            eo_diff,
            eo_pass,
            pp_diff,
            pp_pass,
            disparate_impact_threshold,
            parity_threshold,
        ),
    )


class FairnessAuditor:
    """Run fairness audits under a fixed policy and report on them."""

    def __init__(
        self,
        thresholds: Optional[ThresholdsConfig] = None,
        weights: Optional[ScoreWeights] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the auditor with thresholds and score weights."""
        self.thresholds = thresholds or ThresholdsConfig()
        self.weights = weights or ScoreWeights()
        self.logger = get_audit_logger("auditor")
        self.console = console or Console(force_terminal=True, width=100)

    def audit(
        self, protected_group: ConfusionMatrix, privileged_group: ConfusionMatrix
    ) -> AuditResult:
        """Audit a protected/privileged pair of confusion matrices."""
        self.logger.log_stage_start(
            "fairness_audit",
            {
                "protected_sample_size": protected_group.total,
                "privileged_sample_size": privileged_group.total,
            },
        )

        self._warn_on_degenerate_group("protected", protected_group)
        self._warn_on_degenerate_group("privileged", privileged_group)

        result = run_fairness_audit(
            protected_group,
            privileged_group,
            disparate_impact_threshold=self.thresholds.disparate_impact_threshold,
            parity_threshold=self.thresholds.parity_threshold,
            weights=self.weights,
        )

        for name, value, passed, threshold in self._metric_rows(result):
            self.logger.log_metric(name, value, threshold, passed)

        violations = [name for name, _, passed, _ in self._metric_rows(result) if not passed]
        if violations:
            self.logger.log_warning(
                f"Fairness violations detected: {', '.join(violations)}",
                {"violations": violations, "violation_count": len(violations)},
            )

        self.logger.log_stage_complete(
            "fairness_audit",
            {"overall_fairness_score": result.overall_fairness_score},
        )
        return result

    def audit_outcomes(
        self,
        frame: pd.DataFrame,
        group_column: str,
        protected_group: Any,
        privileged_group: Any,
        predicted_column: str = "predicted",
        actual_column: str = "actual",
        positive_label: Any = 1,
    ) -> AuditResult:
        """Aggregate raw outcome records per group, then audit the two groups.

        A group value with no rows is audited as an empty matrix.
        """
        matrices = group_confusion_matrices(
            frame,
            group_column,
            predicted_column=predicted_column,
            actual_column=actual_column,
            positive_label=positive_label,
        )

        for label, value in (("protected", protected_group), ("privileged", privileged_group)):
            if value not in matrices:
                self.logger.log_warning(
                    f"No outcome records for {label} group {value!r}",
                    {"group_column": group_column, "available_groups": list(matrices)},
                )

        return self.audit(
            matrices.get(protected_group, ConfusionMatrix()),
            matrices.get(privileged_group, ConfusionMatrix()),
        )

    def _warn_on_degenerate_group(self, label: str, cm: ConfusionMatrix) -> None:
        if cm.total == 0:
            self.logger.log_warning(
                f"The {label} group is empty; metrics fall back to neutral defaults",
                {"group": label},
            )
            return

        empty_denominators = []
        if cm.actual_positives == 0:
            empty_denominators.append("true_positive_rate")
        if cm.actual_negatives == 0:
            empty_denominators.append("false_positive_rate")
        if cm.predicted_positives == 0:
            empty_denominators.append("positive_predictive_value")

        if empty_denominators:
            self.logger.log_warning(
                f"The {label} group has empty denominators; "
                f"{', '.join(empty_denominators)} default to 0",
                {"group": label, "defaulted_rates": empty_denominators},
            )

    def _metric_rows(self, result: AuditResult):
        di_threshold = self.thresholds.disparate_impact_threshold
        parity_threshold = self.thresholds.parity_threshold
        return [
            (
                "disparate_impact_ratio",
                result.disparate_impact_ratio,
                result.disparate_impact_pass,
                di_threshold,
            ),
            (
                "statistical_parity_difference",
                result.statistical_parity_difference,
                result.statistical_parity_pass,
                parity_threshold,
            ),
            (
                "equalized_odds_difference",
                result.equalized_odds_difference,
                result.equalized_odds_pass,
                parity_threshold,
            ),
            (
                "predictive_parity_difference",
                result.predictive_parity_difference,
                result.predictive_parity_pass,
                parity_threshold,
            ),
        ]

    def print_report(self, result: AuditResult, title: str = "Fairness Audit"):
        """Print a formatted audit report using Rich tables."""
        self.console.print(
            f"\n[bold blue]{title.upper()} REPORT[/bold blue]", style="bold blue"
        )

        fairness_table = Table(
            title="Fairness Metrics",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold blue",
        )
        fairness_table.add_column(
            "Metric", style="cyan", no_wrap=False, min_width=20, max_width=30
        )
        fairness_table.add_column(
            "Value", style="magenta", justify="right", min_width=8, max_width=12
        )
        fairness_table.add_column(
            "Status", style="bold", justify="center", min_width=12, max_width=18
        )
        fairness_table.add_column(
            "Threshold", style="dim", justify="right", min_width=8, max_width=15
        )

        for name, value, passed, threshold in self._metric_rows(result):
            status = "✅ OK" if passed else "❌ VIOLATION"
            status_style = "green" if passed else "red"
            comparator = "≥" if name == "disparate_impact_ratio" else "≤"
            fairness_table.add_row(
                name.replace("_", " ").title(),
                f"{value:.4f}",
                f"[{status_style}]{status}[/{status_style}]",
                f"{comparator} {threshold}",
            )

        self.console.print(fairness_table)

        group_table = Table(
            title="Group Analysis",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold blue",
        )
        group_table.add_column("Group", style="cyan", no_wrap=True)
        for column in ("Selection Rate", "TPR", "FPR", "PPV", "Sample Size"):
            group_table.add_column(column, style="magenta", justify="right")

        for row in result.protected_class_analysis:
            group_table.add_row(
                row.group,
                f"{row.selection_rate:.4f}",
                f"{row.true_positive_rate:.4f}",
                f"{row.false_positive_rate:.4f}",
                f"{row.positive_predictive_value:.4f}",
                str(row.sample_size),
            )

        self.console.print(group_table)

        score_table = Table(
            title="Overall Assessment",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold blue",
        )
        score_table.add_column(
            "Metric", style="cyan", no_wrap=True, min_width=18, max_width=25
        )
        score_table.add_column(
            "Score", style="bold green", justify="right", min_width=10, max_width=20
        )
        score_table.add_row("Overall Fairness Score", f"{result.overall_fairness_score}/100")
        self.console.print(score_table)

        style = "green" if result.passed else "red"
        self.console.print("[bold]Recommendations[/bold]")
        for recommendation in result.recommendations:
            # markup disabled so bracketed text in a sentence is printed verbatim
            self.console.print(f"  • {recommendation}", style=style, markup=False)

        self.console.print("")
