"""Fairness Audit Toolkit.

Computes the canonical group fairness metrics (disparate impact, statistical
parity, equalized odds, predictive parity) for a protected and a privileged
group, scores them, and renders a pass/fail verdict with recommendations.
"""

from .measurement import (
    AuditResult,
    ConfusionMatrix,
    FairnessAuditor,
    FairnessMetrics,
    GroupAnalysis,
    disparate_impact_ratio,
    equalized_odds_difference,
    false_positive_rate,
    gini_coefficient,
    passes_80_percent_rule,
    positive_predictive_value,
    predictive_parity_difference,
    run_fairness_audit,
    statistical_parity_difference,
    true_positive_rate,
)

__version__ = "1.0.0"
__author__ = "FairML Consulting"

__all__ = [
    "AuditResult",
    "ConfusionMatrix",
    "FairnessAuditor",
    "FairnessMetrics",
    "GroupAnalysis",
    "disparate_impact_ratio",
    "equalized_odds_difference",
    "false_positive_rate",
    "gini_coefficient",
    "passes_80_percent_rule",
    "positive_predictive_value",
    "predictive_parity_difference",
    "run_fairness_audit",
    "statistical_parity_difference",
    "true_positive_rate",
]
