"""
Classification metrics.

Labels may be numbers, strings or booleans; y_true and y_pred must be 1D
and of equal length. Labels of different element types never match, so
True and 1 are distinct labels.
"""

from typing import Any, List, Optional, Tuple

import numpy as np

from kalimdor.ops import ElementType, element_type_of, validate_matrix_1d, validate_matrix_type
from kalimdor.utils.general import distinct

LabelKey = Tuple[ElementType, Any]


def _label_key(label: Any) -> LabelKey:
    return element_type_of(label), label


def _check_targets(y_true: Any, y_pred: Any) -> Tuple[List[LabelKey], List[LabelKey]]:
    validate_matrix_1d(y_true)
    validate_matrix_1d(y_pred)
    validate_matrix_type(y_true, ElementType)
    validate_matrix_type(y_pred, ElementType)

    if len(y_true) != len(y_pred):
        raise ValueError(
            f"y_true and y_pred have different lengths: {len(y_true)} and {len(y_pred)}"
        )
    return [_label_key(t) for t in y_true], [_label_key(p) for p in y_pred]


def accuracy_score(y_true: Any, y_pred: Any, normalize: bool = True) -> float:
    """
    Fraction (or number) of correctly classified samples.

    Args:
        y_true: Ground truth labels
        y_pred: Predicted labels
        normalize: Return the fraction if True, otherwise the count

    Returns:
        Accuracy
    """
    true_labels, pred_labels = _check_targets(y_true, y_pred)
    correct = sum(1 for t, p in zip(true_labels, pred_labels) if t == p)

    if not normalize:
        return float(correct)
    if not true_labels:
        return 0.0
    return correct / len(true_labels)


def zero_one_loss(y_true: Any, y_pred: Any, normalize: bool = True) -> float:
    """
    Fraction (or number) of misclassified samples.

    Args:
        y_true: Ground truth labels
        y_pred: Predicted labels
        normalize: Return the fraction if True, otherwise the count

    Returns:
        Loss
    """
    true_labels, _ = _check_targets(y_true, y_pred)
    score = accuracy_score(y_true, y_pred, normalize=normalize)

    if normalize:
        return 1.0 - score if true_labels else 0.0
    return float(len(true_labels)) - score


def confusion_matrix(y_true: Any, y_pred: Any, labels: Optional[List[Any]] = None) -> List[List[int]]:
    """
    Confusion matrix with true labels as rows and predictions as columns.

    Args:
        y_true: Ground truth labels
        y_pred: Predicted labels
        labels: Label order; defaults to the observed labels grouped by
            element type (boolean, number, string) and sorted within each

    Returns:
        Square nested list of counts
    """
    true_labels, pred_labels = _check_targets(y_true, y_pred)

    if labels is None:
        keys = sorted(distinct(true_labels + pred_labels))
    else:
        validate_matrix_1d(labels)
        validate_matrix_type(labels, ElementType)
        keys = distinct(_label_key(label) for label in labels)

    index = {key: i for i, key in enumerate(keys)}
    matrix = np.zeros((len(keys), len(keys)), dtype=int)

    for t, p in zip(true_labels, pred_labels):
        if t in index and p in index:
            matrix[index[t], index[p]] += 1

    return matrix.tolist()
