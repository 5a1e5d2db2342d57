"""
Scalers, binarization, polynomial expansion and row normalization.

All transforms accept nested lists (or numpy arrays) and return nested lists.
"""

import logging
import numbers
from itertools import combinations_with_replacement
from typing import Any, List, Optional, Sequence

import numpy as np

from kalimdor.ops import infer_shape, size_of, validate_matrix_1d, validate_matrix_2d
from kalimdor.utils.general import as_numeric_array

logger = logging.getLogger(__name__)

NORMS = ('l1', 'l2', 'max')


def _check_matrix(X: Any) -> np.ndarray:
    """
    Validate a non-empty 2D numeric matrix and return it as a float array.
    """
    if infer_shape(X) == (0,):
        raise ValueError("X cannot be empty")
    validate_matrix_2d(X)
    return as_numeric_array(X)


def add_dummy_feature(X: Any, value: float = 1.0) -> List[List[float]]:
    """
    Prepend a constant column to a 2D matrix.

    Args:
        X: 2D numeric matrix
        value: Value of the new column

    Returns:
        Matrix with one extra leading column
    """
    validate_matrix_2d(X)
    data = as_numeric_array(X)
    dummy = np.full((data.shape[0], 1), value, dtype=float)
    return np.hstack([dummy, data]).tolist()


def normalize(X: Any, norm: str = 'l2') -> List[List[float]]:
    """
    Scale each row of X to unit norm. All-zero rows are left unchanged.

    Args:
        X: 2D numeric matrix
        norm: 'l1', 'l2' or 'max'

    Returns:
        Row-normalized matrix
    """
    if norm not in NORMS:
        raise ValueError(f"{norm} is not a recognised normalization method")

    data = _check_matrix(X)
    if norm == 'l1':
        norms = np.abs(data).sum(axis=1)
    elif norm == 'l2':
        norms = np.sqrt((data ** 2).sum(axis=1))
    else:
        norms = np.abs(data).max(axis=1)

    norms[norms == 0] = 1.0
    return (data / norms[:, np.newaxis]).tolist()


class Binarizer:
    """
    Map values above a threshold to 1 and all others to 0.
    """

    def __init__(self, threshold: float = 0.0):
        self.threshold = threshold

    def fit(self, X: Any) -> 'Binarizer':
        """Validate X. Binarizer is stateless, so nothing is learned."""
        _check_matrix(X)
        return self

    def transform(self, X: Any) -> List[List[int]]:
        data = _check_matrix(X)
        return (data > self.threshold).astype(int).tolist()

    def fit_transform(self, X: Any) -> List[List[int]]:
        return self.fit(X).transform(X)


class MinMaxScaler:
    """
    Scale values linearly into `feature_range`.

    The data minimum and maximum are taken over every element of the fitted
    tensor, whatever its rank; transforms then apply to 1D inputs.
    """

    def __init__(self, feature_range: Sequence[float] = (0, 1)):
        validate_matrix_1d(feature_range)
        if len(feature_range) != 2:
            raise ValueError(f"feature_range must have two elements, got {list(feature_range)}")
        low, high = as_numeric_array(feature_range)
        if low >= high:
            raise ValueError(
                f"Minimum of desired feature range must be smaller than maximum, got {list(feature_range)}"
            )

        self.feature_range = (float(low), float(high))
        self.data_min_: Optional[float] = None
        self.data_max_: Optional[float] = None
        self.scale_: Optional[float] = None
        self.min_: Optional[float] = None

    def fit(self, X: Any) -> 'MinMaxScaler':
        """
        Learn the global minimum and maximum of X.

        Args:
            X: Numeric tensor of any rank

        Returns:
            self
        """
        shape = infer_shape(X)
        if not shape or size_of(shape) == 0:
            raise ValueError("Cannot fit with an empty value")
        data = as_numeric_array(X)

        self.data_min_ = float(np.min(data))
        self.data_max_ = float(np.max(data))

        low, high = self.feature_range
        data_range = self.data_max_ - self.data_min_
        if data_range == 0:
            # Constant input maps onto the range minimum
            data_range = 1.0
        self.scale_ = (high - low) / data_range
        self.min_ = low - self.data_min_ * self.scale_

        logger.debug(f"MinMaxScaler fit: min={self.data_min_}, max={self.data_max_}")
        return self

    def _check_fitted(self) -> None:
        if self.scale_ is None:
            raise RuntimeError("MinMaxScaler must be fit before transforming")

    def transform(self, X: Any) -> List[float]:
        """
        Scale a 1D tensor using the fitted range.
        """
        validate_matrix_1d(X)
        self._check_fitted()
        data = as_numeric_array(X)
        return (data * self.scale_ + self.min_).tolist()

    def fit_transform(self, X: Any) -> List[float]:
        validate_matrix_1d(X)
        return self.fit(X).transform(X)

    def inverse_transform(self, X: Any) -> List[float]:
        """
        Undo `transform` on a 1D tensor.
        """
        validate_matrix_1d(X)
        self._check_fitted()
        data = as_numeric_array(X)
        return ((data - self.min_) / self.scale_).tolist()


class PolynomialFeatures:
    """
    Polynomial expansion of the columns of a 2D matrix.

    For columns [a, b] and degree 2 each row becomes
    [1, a, b, a*a, a*b, b*b].
    """

    def __init__(self, degree: int = 2):
        if isinstance(degree, bool) or not isinstance(degree, numbers.Integral):
            raise ValueError("Degree must be a number")
        if degree < 0:
            raise ValueError(f"Degree must be non-negative, got {degree}")
        self.degree = int(degree)
        self.n_features_in_: Optional[int] = None

    def _powers(self, n_features: int) -> List[tuple]:
        return [
            combo
            for d in range(self.degree + 1)
            for combo in combinations_with_replacement(range(n_features), d)
        ]

    def fit(self, X: Any) -> 'PolynomialFeatures':
        data = _check_matrix(X)
        self.n_features_in_ = data.shape[1]
        return self

    def transform(self, X: Any) -> List[List[float]]:
        """
        Expand X into all monomials up to `degree`.

        Args:
            X: Non-empty 2D numeric matrix

        Returns:
            Expanded matrix
        """
        data = _check_matrix(X)
        n_samples, n_features = data.shape
        if self.n_features_in_ is not None and n_features != self.n_features_in_:
            raise ValueError(
                f"X has {n_features} features, but PolynomialFeatures was fit with {self.n_features_in_}"
            )

        columns = []
        for combo in self._powers(n_features):
            column = np.ones(n_samples)
            for j in combo:
                column = column * data[:, j]
            columns.append(column)

        return np.column_stack(columns).tolist()

    def fit_transform(self, X: Any) -> List[List[float]]:
        return self.fit(X).transform(X)
