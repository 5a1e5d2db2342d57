"""
Regression metrics.
"""

from typing import Any, Optional, Tuple

import numpy as np

from kalimdor.ops import infer_shape, render, size_of, validate_matrix_1d
from kalimdor.ops.errors import RankMismatchError, format_shape
from kalimdor.utils.general import as_numeric_array, weighted_mean


def _check_reg_targets(y_true: Any, y_pred: Any) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate a pair of regression targets and return them as 2D arrays.

    Both must be 1D or 2D numeric tensors of the same shape. 1D targets are
    treated as a single output column.
    """
    shapes = []
    for name, value in (('y_true', y_true), ('y_pred', y_pred)):
        shape = infer_shape(value)
        if len(shape) not in (1, 2):
            raise RankMismatchError(
                f"{name} must be a 1D or 2D matrix: {render(value)} of {format_shape(shape)}",
                shape,
                1 if not shape else 2
            )
        shapes.append(shape)

    true_shape, pred_shape = shapes
    if true_shape != pred_shape:
        raise ValueError(
            f"y_true and y_pred have different shapes: "
            f"{format_shape(true_shape)} and {format_shape(pred_shape)}"
        )
    if size_of(true_shape) == 0:
        raise ValueError("y_true and y_pred cannot be empty")

    y_true_arr = as_numeric_array(y_true)
    y_pred_arr = as_numeric_array(y_pred)
    if y_true_arr.ndim == 1:
        y_true_arr = y_true_arr.reshape(-1, 1)
        y_pred_arr = y_pred_arr.reshape(-1, 1)
    return y_true_arr, y_pred_arr


def _check_sample_weight(sample_weight: Any, n_samples: int) -> np.ndarray:
    validate_matrix_1d(sample_weight)
    weights = as_numeric_array(sample_weight)
    if weights.shape[0] != n_samples:
        raise ValueError(
            f"sample_weight has {weights.shape[0]} elements, expected {n_samples}"
        )
    return weights


def _average_errors(errors: np.ndarray, sample_weight: Optional[Any]) -> float:
    # errors has one row per sample and one column per output
    weights = None
    if sample_weight is not None:
        weights = _check_sample_weight(sample_weight, errors.shape[0])

    per_output = [weighted_mean(errors[:, j], weights) for j in range(errors.shape[1])]
    return float(np.mean(per_output))


def mean_absolute_error(y_true: Any, y_pred: Any, sample_weight: Optional[Any] = None) -> float:
    """
    Mean absolute error, averaged uniformly over outputs.

    Args:
        y_true: Ground truth, 1D or 2D
        y_pred: Estimates, same shape as y_true
        sample_weight: Optional 1D weights, one per sample

    Returns:
        Non-negative float
    """
    y_true_arr, y_pred_arr = _check_reg_targets(y_true, y_pred)
    return _average_errors(np.abs(y_pred_arr - y_true_arr), sample_weight)


def mean_squared_error(y_true: Any, y_pred: Any, sample_weight: Optional[Any] = None) -> float:
    """
    Mean squared error, averaged uniformly over outputs.

    Args:
        y_true: Ground truth, 1D or 2D
        y_pred: Estimates, same shape as y_true
        sample_weight: Optional 1D weights, one per sample

    Returns:
        Non-negative float
    """
    y_true_arr, y_pred_arr = _check_reg_targets(y_true, y_pred)
    return _average_errors((y_pred_arr - y_true_arr) ** 2, sample_weight)
