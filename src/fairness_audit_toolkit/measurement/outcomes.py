"""Aggregation of raw classification outcomes into per-group confusion matrices."""

from typing import Any, Dict, Iterable, Sequence, Set, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from ..config.logging_config import get_audit_logger
from .confusion_matrix import ConfusionMatrix

OutcomeLabel = Union[str, bool, int]

POSITIVE = "positive"
NEGATIVE = "negative"

logger = get_audit_logger("outcomes")


def _is_positive(label: OutcomeLabel) -> bool:
    if isinstance(label, str):
        normalized = label.strip().lower()
        if normalized not in (POSITIVE, NEGATIVE):
            raise ValueError(
                f"Outcome label must be '{POSITIVE}' or '{NEGATIVE}', got: {label!r}"
            )
        return normalized == POSITIVE
    return bool(label)


def _is_outcome_record(values: np.ndarray, positive_label: Any) -> bool:
    """Whether a label column uses the ``"positive"``/``"negative"`` record format.

    A column that contains ``positive_label`` is always read by equality.
    """
    if values.size == 0 or any(value == positive_label for value in values):
        return False
    return all(
        isinstance(value, str) and value.strip().lower() in (POSITIVE, NEGATIVE)
        for value in values
    )


def _to_indicator(values: np.ndarray, positive_label: Any) -> np.ndarray:
    if _is_outcome_record(values, positive_label):
        return np.array([_is_positive(value) for value in values], dtype=int)
    return np.array([value == positive_label for value in values], dtype=int)


def _plain_labels(values: np.ndarray, positive_label: Any) -> Set[Any]:
    if _is_outcome_record(values, positive_label):
        return set()
    return set(values.tolist())


def confusion_matrix_from_labels(
    y_true: Sequence[Any], y_pred: Sequence[Any], positive_label: Any = 1
) -> ConfusionMatrix:
    """Build a confusion matrix from actual and predicted label arrays.

    Labels are binary: ``positive_label`` and a single negative label. A column
    made only of ``"positive"``/``"negative"`` strings (case-insensitive) that
    never contains ``positive_label`` is read in that record format instead.
    Labels are fixed to both classes so a group with no positives (or no
    negatives) still gets a full matrix with zero counts instead of a
    collapsed 1x1 result.

    Raises:
        ValueError: If a label is missing, or the labels hold more than one
            value besides ``positive_label``.
    """
    actual = np.asarray(y_true)
    predicted = np.asarray(y_pred)

    if actual.size == 0 and predicted.size == 0:
        return ConfusionMatrix()

    if pd.isna(actual).any() or pd.isna(predicted).any():
        raise ValueError("Outcome labels contain missing values")

    labels = _plain_labels(actual, positive_label) | _plain_labels(
        predicted, positive_label
    )
    if len(labels - {positive_label}) > 1:
        raise ValueError(
            f"Expected binary outcome labels with positive label "
            f"{positive_label!r}, got: {sorted(labels, key=repr)}"
        )

    tn, fp, fn, tp = confusion_matrix(
        _to_indicator(actual, positive_label),
        _to_indicator(predicted, positive_label),
        labels=[0, 1],
    ).ravel()

    return ConfusionMatrix(
        true_positives=int(tp),
        false_positives=int(fp),
        true_negatives=int(tn),
        false_negatives=int(fn),
    )


def confusion_matrix_from_outcomes(
    outcomes: Iterable[Tuple[OutcomeLabel, OutcomeLabel]],
) -> ConfusionMatrix:
    """Build a confusion matrix from ``(predicted, actual)`` outcome pairs.

    Labels may be the strings ``"positive"``/``"negative"`` (case-insensitive),
    booleans, or 0/1 integers.

    Raises:
        ValueError: If a string label is neither positive nor negative.
    """
    pairs = [(_is_positive(pred), _is_positive(actual)) for pred, actual in outcomes]
    if not pairs:
        return ConfusionMatrix()

    predicted, actual = zip(*pairs)
    return confusion_matrix_from_labels(
        np.array(actual), np.array(predicted), positive_label=True
    )


def group_confusion_matrices(
    frame: pd.DataFrame,
    group_column: str,
    predicted_column: str = "predicted",
    actual_column: str = "actual",
    positive_label: Any = 1,
) -> Dict[Any, ConfusionMatrix]:
    """Aggregate an outcome table into one confusion matrix per group.

    Rows missing a predicted or actual label are dropped with a warning.

    Raises:
        KeyError: If any of the required columns is missing from ``frame``.
        ValueError: If ``positive_label`` occurs in neither label column, or a
            group holds labels that are not binary.
    """
    required = [group_column, predicted_column, actual_column]
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise KeyError(f"Outcome data is missing required columns: {missing}")

    complete = frame.dropna(subset=[predicted_column, actual_column])
    dropped = len(frame) - len(complete)
    if dropped:
        logger.log_warning(
            f"Dropped {dropped} outcome records with missing labels",
            {"dropped_rows": dropped, "columns": [predicted_column, actual_column]},
        )

    label_columns = [
        complete[column].to_numpy() for column in (predicted_column, actual_column)
    ]
    if not complete.empty and not any(
        _to_indicator(values, positive_label).any() for values in label_columns
    ):
        raise ValueError(
            f"positive_label {positive_label!r} matches no value in "
            f"'{predicted_column}' or '{actual_column}'"
        )

    return {
        group: confusion_matrix_from_labels(
            group_frame[actual_column].to_numpy(),
            group_frame[predicted_column].to_numpy(),
            positive_label=positive_label,
        )
        for group, group_frame in complete.groupby(group_column, sort=True)
    }
