"""Provides a collection of functions for calculating group fairness metrics.

This module centralizes the mathematical implementations of the canonical
group-fairness statistics so they are calculated consistently throughout the
toolkit:

- Disparate Impact Ratio and the four-fifths rule (EEOC, 29 CFR 1607.4D;
  Feldman et al., 2015)
- Statistical Parity Difference
- Equalized Odds Difference (Hardt et al., 2016)
- Predictive Parity Difference (Chouldechova, 2017)
- Gini coefficient for arbitrary non-negative distributions

Every numeric edge case (empty group, empty denominator, zero total) degrades
to a neutral "no evidence of disparity" value instead of raising.
"""

import math
from typing import Sequence

import numpy as np

from .confusion_matrix import (
    ConfusionMatrix,
    false_positive_rate,
    positive_predictive_value,
    true_positive_rate,
)

DEFAULT_DISPARATE_IMPACT_THRESHOLD = 0.8
DEFAULT_PARITY_THRESHOLD = 0.1


class FairnessMetrics:
    """A container for static methods that calculate group fairness metrics.

    This class acts as a namespace to group related metric calculations. All
    methods are pure functions of their arguments, so the class never needs to
    be instantiated.
    """

    @staticmethod
    def disparate_impact_ratio(
        protected_positives: int,
        protected_total: int,
        privileged_positives: int,
        privileged_total: int,
    ) -> float:
        """Calculates the ratio of protected to privileged positive-outcome rates.

        A ratio of 1.0 means both groups are selected at the same rate. When
        either group is empty there is no evidence of disparity and 1.0 is
        returned. When the privileged group has no positive outcomes at all but
        the protected group does, the ratio is unbounded and ``math.inf`` is
        returned.
        """
        if protected_total == 0 or privileged_total == 0:
            return 1.0

        protected_rate = protected_positives / protected_total
        privileged_rate = privileged_positives / privileged_total

        if privileged_rate == 0:
            return math.inf if protected_rate > 0 else 1.0
        return protected_rate / privileged_rate

    @staticmethod
    def passes_80_percent_rule(
        protected_positives: int,
        protected_total: int,
        privileged_positives: int,
        privileged_total: int,
        threshold: float = DEFAULT_DISPARATE_IMPACT_THRESHOLD,
    ) -> bool:
        """Checks the four-fifths rule: disparate impact ratio >= threshold."""
        ratio = FairnessMetrics.disparate_impact_ratio(
            protected_positives, protected_total, privileged_positives, privileged_total
        )
        return ratio >= threshold

    @staticmethod
    def statistical_parity_difference(
        group_a_positives: int,
        group_a_total: int,
        group_b_positives: int,
        group_b_total: int,
    ) -> float:
        """Calculates the absolute difference in positive-outcome rates.

        The metric ignores ground truth entirely. It is symmetric in its two
        groups and returns 0.0 when either group is empty, consistent with the
        disparate impact edge policy.
        """
        if group_a_total == 0 or group_b_total == 0:
            return 0.0

        rate_a = group_a_positives / group_a_total
        rate_b = group_b_positives / group_b_total
        return abs(rate_a - rate_b)

    @staticmethod
    def equalized_odds_difference(
        group_a: ConfusionMatrix, group_b: ConfusionMatrix
    ) -> float:
        """Calculates the larger of the TPR gap and the FPR gap between groups.

        Taking the maximum rather than the mean keeps a close TPR match from
        masking a large FPR gap (and vice versa).
        """
        tpr_diff = abs(true_positive_rate(group_a) - true_positive_rate(group_b))
        fpr_diff = abs(false_positive_rate(group_a) - false_positive_rate(group_b))
        return max(tpr_diff, fpr_diff)

    @staticmethod
    def predictive_parity_difference(
        group_a: ConfusionMatrix, group_b: ConfusionMatrix
    ) -> float:
        """Calculates the absolute difference in precision between groups."""
        return abs(
            positive_predictive_value(group_a) - positive_predictive_value(group_b)
        )

    @staticmethod
    def gini_coefficient(values: Sequence[float]) -> float:
        """Calculates the Gini coefficient of a distribution of non-negative values.

        Values are sorted ascending and combined as
        ``sum((2 * rank - n - 1) * value) / (n * sum(value))`` with 1-based
        ranks. 0.0 means perfect equality. An empty input or a distribution
        that sums to zero is treated as perfectly equal.
        """
        sorted_values = np.sort(np.asarray(values, dtype=float))
        n = sorted_values.size
        if n == 0:
            return 0.0

        total = sorted_values.sum()
        if total == 0:
            return 0.0

        ranks = np.arange(1, n + 1)
        weighted_sum = np.sum((2 * ranks - n - 1) * sorted_values)
        return float(weighted_sum / (n * total))


disparate_impact_ratio = FairnessMetrics.disparate_impact_ratio
passes_80_percent_rule = FairnessMetrics.passes_80_percent_rule
statistical_parity_difference = FairnessMetrics.statistical_parity_difference
equalized_odds_difference = FairnessMetrics.equalized_odds_difference
predictive_parity_difference = FairnessMetrics.predictive_parity_difference
gini_coefficient = FairnessMetrics.gini_coefficient
