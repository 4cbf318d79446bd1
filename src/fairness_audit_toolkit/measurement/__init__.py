"""Measurement module for confusion matrices, fairness metrics and audits."""

from .confusion_matrix import (
    ConfusionMatrix,
    false_positive_rate,
    positive_predictive_value,
    true_positive_rate,
)
from .fairness_auditor import AuditResult, FairnessAuditor, GroupAnalysis, run_fairness_audit
from .fairness_metrics import (
    FairnessMetrics,
    disparate_impact_ratio,
    equalized_odds_difference,
    gini_coefficient,
    passes_80_percent_rule,
    predictive_parity_difference,
    statistical_parity_difference,
)
from .outcomes import (
    confusion_matrix_from_labels,
    confusion_matrix_from_outcomes,
    group_confusion_matrices,
)

__all__ = [
    "AuditResult",
    "ConfusionMatrix",
    "FairnessAuditor",
    "FairnessMetrics",
    "GroupAnalysis",
    "confusion_matrix_from_labels",
    "confusion_matrix_from_outcomes",
    "disparate_impact_ratio",
    "equalized_odds_difference",
    "false_positive_rate",
    "gini_coefficient",
    "group_confusion_matrices",
    "passes_80_percent_rule",
    "positive_predictive_value",
    "predictive_parity_difference",
    "run_fairness_audit",
    "statistical_parity_difference",
    "true_positive_rate",
]
