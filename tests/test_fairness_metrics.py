"""Unit tests for fairness metric calculators."""

import math

import pytest

from fairness_audit_toolkit.measurement.confusion_matrix import ConfusionMatrix
from fairness_audit_toolkit.measurement.fairness_metrics import (
    FairnessMetrics,
    disparate_impact_ratio,
    equalized_odds_difference,
    gini_coefficient,
    passes_80_percent_rule,
    predictive_parity_difference,
    statistical_parity_difference,
)


class TestDisparateImpactRatio:
    """Test cases for the disparate impact ratio and four-fifths rule."""

    def test_ratio_of_selection_rates(self):
        """Test ratio of protected to privileged selection rates."""
        assert disparate_impact_ratio(50, 100, 85, 100) == pytest.approx(0.5 / 0.85)

    @pytest.mark.parametrize("positives,total", [(1, 2), (3, 10), (7, 7)])
    def test_equal_rates_give_one(self, positives, total):
        """Test identical nonzero rates give a ratio of exactly 1."""
        assert disparate_impact_ratio(positives, total, positives * 3, total * 3) == 1.0

    def test_reciprocal_when_groups_swapped(self):
        """Test swapping the groups inverts the ratio."""
        forward = disparate_impact_ratio(30, 100, 60, 120)
        backward = disparate_impact_ratio(60, 120, 30, 100)
        assert forward * backward == pytest.approx(1.0)

    def test_empty_group_is_neutral(self):
        """Test an empty group yields 1."""
        assert disparate_impact_ratio(0, 0, 10, 20) == 1.0
        assert disparate_impact_ratio(10, 20, 0, 0) == 1.0

    def test_zero_privileged_rate(self):
        """Test a zero privileged rate yields infinity or 1."""
        assert disparate_impact_ratio(5, 10, 0, 10) == math.inf
        assert disparate_impact_ratio(0, 10, 0, 10) == 1.0

    def test_zero_protected_rate(self):
        """Test a zero protected rate yields 0."""
        assert disparate_impact_ratio(0, 10, 5, 10) == 0.0

    def test_four_fifths_rule(self):
        """Test the default threshold of 0.8 is inclusive."""
        assert passes_80_percent_rule(40, 100, 50, 100)
        assert not passes_80_percent_rule(39, 100, 50, 100)

    def test_custom_threshold(self):
        """Test a stricter threshold can be supplied."""
        assert not passes_80_percent_rule(40, 100, 50, 100, threshold=0.9)
        assert passes_80_percent_rule(45, 100, 50, 100, threshold=0.9)


class TestStatisticalParityDifference:
    """Test cases for statistical parity difference."""

    def test_absolute_difference(self):
        """Test absolute difference in positive rates."""
        assert statistical_parity_difference(50, 100, 85, 100) == pytest.approx(0.35)

    def test_symmetric(self):
        """Test swapping groups gives the same value."""
        assert statistical_parity_difference(
            3, 10, 9, 20
        ) == statistical_parity_difference(9, 20, 3, 10)

    def test_empty_group(self):
        """Test an empty group yields 0."""
        assert statistical_parity_difference(0, 0, 5, 10) == 0.0
        assert statistical_parity_difference(5, 10, 0, 0) == 0.0


class TestEqualizedOddsDifference:
    """Test cases for equalized odds difference."""

    def test_takes_larger_gap(self):
        """Test the larger of TPR and FPR gaps is returned."""
        group_a = ConfusionMatrix(
            true_positives=40, false_positives=10, true_negatives=40, false_negatives=10
        )
        group_b = ConfusionMatrix(
            true_positives=80, false_positives=5, true_negatives=10, false_negatives=5
        )
        tpr_gap = abs(40 / 50 - 80 / 85)
        fpr_gap = abs(10 / 50 - 5 / 15)
        assert equalized_odds_difference(group_a, group_b) == pytest.approx(
            max(tpr_gap, fpr_gap)
        )

    def test_fpr_gap_not_masked(self):
        """Test a matching TPR does not hide an FPR gap."""
        group_a = ConfusionMatrix(
            true_positives=8, false_positives=1, true_negatives=9, false_negatives=2
        )
        group_b = ConfusionMatrix(
            true_positives=8, false_positives=5, true_negatives=5, false_negatives=2
        )
        assert equalized_odds_difference(group_a, group_b) == pytest.approx(0.4)

    def test_self_comparison_is_zero(self):
        """Test a matrix compared to itself has no gap."""
        cm = ConfusionMatrix(7, 3, 11, 2)
        assert equalized_odds_difference(cm, cm) == 0.0


class TestPredictiveParityDifference:
    """Test cases for predictive parity difference."""

    def test_precision_gap(self):
        """Test absolute precision difference."""
        group_a = ConfusionMatrix(true_positives=40, false_positives=10)
        group_b = ConfusionMatrix(true_positives=80, false_positives=5)
        assert predictive_parity_difference(group_a, group_b) == pytest.approx(
            abs(0.8 - 80 / 85)
        )

    def test_no_predicted_positives(self):
        """Test groups without selections have PPV 0."""
        group_a = ConfusionMatrix(true_negatives=10)
        group_b = ConfusionMatrix(true_positives=9, false_positives=1)
        assert predictive_parity_difference(group_a, group_b) == pytest.approx(0.9)


class TestGiniCoefficient:
    """Test cases for the Gini coefficient."""

    def test_empty_input(self):
        """Test empty input is treated as perfectly equal."""
        assert gini_coefficient([]) == 0.0

    def test_zero_total(self):
        """Test an all-zero distribution is treated as perfectly equal."""
        assert gini_coefficient([0, 0, 0]) == 0.0

    @pytest.mark.parametrize("value", [1, 10, 2.5])
    def test_constant_values(self, value):
        """Test constant distributions have no inequality."""
        assert gini_coefficient([value] * 3) == 0.0
        assert gini_coefficient([value] * 4) == 0.0

    def test_maximal_inequality(self):
        """Test one holder of everything gives (n - 1) / n."""
        assert gini_coefficient([0, 0, 0, 100]) == pytest.approx(0.75)

    def test_known_value(self):
        """Test a hand-computed distribution."""
        assert gini_coefficient([4, 1, 3, 2]) == pytest.approx(0.25)

    def test_scale_invariant(self):
        """Test uniform positive scaling leaves the coefficient unchanged."""
        values = [3, 1, 7, 2, 9]
        scaled = [v * 12.5 for v in values]
        assert gini_coefficient(scaled) == pytest.approx(gini_coefficient(values))

    def test_order_invariant(self):
        """Test input order does not matter."""
        assert gini_coefficient([5, 1, 3]) == pytest.approx(gini_coefficient([1, 3, 5]))

    def test_returns_python_float(self):
        """Test the result is a plain float."""
        assert isinstance(gini_coefficient([1, 2, 3]), float)


class TestFairnessMetricsNamespace:
    """Test cases for the FairnessMetrics namespace class."""

    def test_module_functions_match_static_methods(self):
        """Test module-level functions are the static methods."""
        assert disparate_impact_ratio is FairnessMetrics.disparate_impact_ratio
        assert gini_coefficient is FairnessMetrics.gini_coefficient

    def test_static_methods_without_instance(self):
        """Test metrics can be called on the class directly."""
        assert FairnessMetrics.statistical_parity_difference(1, 2, 1, 2) == 0.0
