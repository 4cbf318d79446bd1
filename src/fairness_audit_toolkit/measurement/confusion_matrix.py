"""Confusion matrix container and the per-group rate calculators built on it.

A confusion matrix is the minimal sufficient statistic for one group's binary
classification outcomes. The rate calculators in this module share a single
zero-denominator policy: an empty denominator yields a rate of 0.0 rather than
NaN or an exception, so downstream arithmetic in the aggregate fairness score
always stays finite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfusionMatrix:
    """Outcome counts for a single group.

    Counts are taken as given. Rejecting negative or non-integer counts is the
    responsibility of whoever builds the matrix.

    Attributes:
        true_positives: Predicted positive, actually positive.
        false_positives: Predicted positive, actually negative.
        true_negatives: Predicted negative, actually negative.
        false_negatives: Predicted negative, actually positive.
    """

    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0

    @property
    def predicted_positives(self) -> int:
        """Number of positive outcomes (selections) the classifier produced."""
        return self.true_positives + self.false_positives

    @property
    def actual_positives(self) -> int:
        return self.true_positives + self.false_negatives

    @property
    def actual_negatives(self) -> int:
        return self.false_positives + self.true_negatives

    @property
    def total(self) -> int:
        """Group sample size."""
        return (
            self.true_positives
            + self.false_positives
            + self.true_negatives
            + self.false_negatives
        )

    @property
    def selection_rate(self) -> float:
        """Share of the group that received a positive outcome, 0.0 if empty."""
        return _safe_rate(self.predicted_positives, self.total)

    def __add__(self, other: "ConfusionMatrix") -> "ConfusionMatrix":
        if not isinstance(other, ConfusionMatrix):
            return NotImplemented
        return ConfusionMatrix(
            true_positives=self.true_positives + other.true_positives,
            false_positives=self.false_positives + other.false_positives,
            true_negatives=self.true_negatives + other.true_negatives,
            false_negatives=self.false_negatives + other.false_negatives,
        )

    def to_dict(self) -> dict:
        return {
            "true_positives": self.true_positives,
            "false_positives": self.false_positives,
            "true_negatives": self.true_negatives,
            "false_negatives": self.false_negatives,
        }


def _safe_rate(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def true_positive_rate(cm: ConfusionMatrix) -> float:
    """True positive rate (sensitivity, recall): TP / (TP + FN)."""
    return _safe_rate(cm.true_positives, cm.true_positives + cm.false_negatives)


def false_positive_rate(cm: ConfusionMatrix) -> float:
    """False positive rate (fall-out): FP / (FP + TN)."""
    return _safe_rate(cm.false_positives, cm.false_positives + cm.true_negatives)


def positive_predictive_value(cm: ConfusionMatrix) -> float:
    """Positive predictive value (precision): TP / (TP + FP)."""
    return _safe_rate(cm.true_positives, cm.true_positives + cm.false_positives)
