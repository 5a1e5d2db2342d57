"""
General utility functions for the kalimdor package.

Small helpers shared by the estimators, transforms and metrics.
"""

import numpy as np
from typing import Any, Hashable, Iterable, List, Optional, TypeVar

from kalimdor.ops import ElementType, validate_matrix_type

T = TypeVar('T', bound=Hashable)


def distinct(coll: Iterable[T]) -> List[T]:
    """
    Return a list with duplicates removed, preserving order.

    Args:
        coll: Collection to process

    Returns:
        List with duplicates removed
    """
    seen = set()
    result = []
    for item in coll:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def as_numeric_array(tensor: Any) -> np.ndarray:
    """
    Convert a tensor whose shape has already been validated into a float array.

    Args:
        tensor: Non-ragged nested sequence

    Returns:
        Float numpy array with the same shape

    Raises:
        ElementTypeError: If any leaf is not a number
    """
    if len(tensor) > 0:
        validate_matrix_type(tensor, ElementType.NUMBER)
    return np.asarray(tensor, dtype=float)


def weighted_mean(values: List[float], weights: Optional[List[float]] = None) -> float:
    """
    Calculate the weighted mean of a list of values.

    Args:
        values: Values to average
        weights: Weights for each value (defaults to equal weights)

    Returns:
        Weighted mean
    """
    values_array = np.array(values)

    if weights is None:
        return float(np.mean(values_array))
    else:
        weights_array = np.array(weights)
        return float(np.average(values_array, weights=weights_array))


def weighted_means(values_matrix: List[List[float]],
                  weights: Optional[List[float]] = None) -> List[float]:
    """
    Calculate the weighted means of each column in a matrix.

    Args:
        values_matrix: Matrix of values (rows are observations, columns are variables)
        weights: Weights for each row (defaults to equal weights)

    Returns:
        List of weighted means for each column
    """
    values_array = np.array(values_matrix)

    if weights is None:
        return np.mean(values_array, axis=0).tolist()
    else:
        weights_array = np.array(weights)
        # Reshape weights for broadcasting
        weights_array = weights_array.reshape(-1, 1)

        # Calculate weighted sum and sum of weights for each column
        weighted_sum = np.sum(values_array * weights_array, axis=0)
        sum_weights = np.sum(weights_array)

        return (weighted_sum / sum_weights).tolist()
