"""
Tests for the regression and classification metrics.
"""

import pytest
import numpy as np
import sys
import os

from sklearn import metrics as sk_metrics

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kalimdor.metrics import (
    mean_absolute_error, mean_squared_error, accuracy_score, zero_one_loss,
    confusion_matrix
)
from kalimdor.ops import ElementTypeError, RankMismatchError, TypeContractError


Y_TRUE1 = [3, -0.5, 2, 7]
Y_PRED1 = [2.5, 0.0, 2, 8]
Y_TRUE2 = [[0.5, 1], [-1, 1], [7, -6]]
Y_PRED2 = [[0, 2], [-1, 2], [8, -5]]


class TestMeanAbsoluteError:
    """Tests for mean_absolute_error."""

    def test_1d(self):
        """Test a single output."""
        assert mean_absolute_error(Y_TRUE1, Y_PRED1) == pytest.approx(0.5)

    def test_2d(self):
        """Outputs are averaged uniformly."""
        assert mean_absolute_error(Y_TRUE2, Y_PRED2) == pytest.approx(0.75)

    def test_sample_weight(self):
        """Test per-sample weights."""
        error = mean_absolute_error(Y_TRUE1, Y_PRED1, sample_weight=[1, 2, 3, 4])
        assert error == pytest.approx(0.55)

    def test_matches_sklearn(self):
        """Results agree with scikit-learn."""
        weights = [0.5, 1, 2]
        expected = sk_metrics.mean_absolute_error(Y_TRUE2, Y_PRED2, sample_weight=weights)
        assert mean_absolute_error(Y_TRUE2, Y_PRED2, sample_weight=weights) == pytest.approx(expected)

    def test_invalid_inputs(self):
        """Test rejected inputs."""
        with pytest.raises(TypeContractError):
            mean_absolute_error(None, None)
        with pytest.raises(RankMismatchError, match=r'y_true must be a 1D or 2D matrix: 1 of \[\]'):
            mean_absolute_error(1, 2)
        with pytest.raises(RankMismatchError):
            mean_absolute_error('test', 'zz')
        with pytest.raises(ValueError, match='different shapes'):
            mean_absolute_error([1, 2, 3], [4, 5])
        with pytest.raises(ValueError, match='sample_weight has 1 elements'):
            mean_absolute_error([1, 2], [3, 4], sample_weight=[1])

    def test_non_numeric(self):
        """Targets must be numbers."""
        with pytest.raises(ElementTypeError):
            mean_absolute_error(['a', 'b'], ['a', 'b'])

    def test_empty(self):
        """Empty targets have no mean."""
        with pytest.raises(ValueError, match='cannot be empty'):
            mean_absolute_error([], [])
        with pytest.raises(ValueError, match='cannot be empty'):
            mean_absolute_error([[]], [[]])
        with pytest.raises(ValueError, match='cannot be empty'):
            mean_squared_error([[], []], [[], []])


class TestMeanSquaredError:
    """Tests for mean_squared_error."""

    def test_1d(self):
        """Test a single output."""
        assert mean_squared_error(Y_TRUE1, Y_PRED1) == pytest.approx(0.375)

    def test_2d(self):
        """Outputs are averaged uniformly."""
        assert mean_squared_error(Y_TRUE2, Y_PRED2) == pytest.approx(0.7083333, abs=1e-6)

    def test_matches_sklearn(self):
        """Results agree with scikit-learn."""
        weights = [1, 2, 3, 4]
        expected = sk_metrics.mean_squared_error(Y_TRUE1, Y_PRED1, sample_weight=weights)
        assert mean_squared_error(Y_TRUE1, Y_PRED1, sample_weight=weights) == pytest.approx(expected)

    def test_numpy_input(self):
        """numpy arrays are accepted."""
        assert mean_squared_error(np.array(Y_TRUE1), np.array(Y_PRED1)) == pytest.approx(0.375)

    def test_shape_mismatch(self):
        """Shapes must agree exactly."""
        with pytest.raises(ValueError, match=r'\[3,2\] and \[2\]'):
            mean_squared_error(Y_TRUE2, [1, 2])
        with pytest.raises(ValueError):
            mean_squared_error([1, 2], Y_TRUE2)
        with pytest.raises(ValueError):
            mean_squared_error(Y_TRUE1, Y_TRUE2)
        with pytest.raises(TypeContractError):
            mean_squared_error(None, None)

    def test_rank_3(self):
        """Rank-3 targets are rejected."""
        with pytest.raises(RankMismatchError, match='y_true must be a 1D or 2D matrix'):
            mean_squared_error([[[1]]], [[[1]]])


class TestClassificationMetrics:
    """Tests for accuracy_score, zero_one_loss and confusion_matrix."""

    def test_accuracy(self):
        """Test fraction and count."""
        y_true = [0, 1, 2, 3]
        y_pred = [0, 2, 1, 3]

        assert accuracy_score(y_true, y_pred) == 0.5
        assert accuracy_score(y_true, y_pred, normalize=False) == 2.0

    def test_accuracy_labels(self):
        """Labels may be strings or booleans."""
        assert accuracy_score(['a', 'b', 'c'], ['a', 'b', 'b']) == pytest.approx(2 / 3)
        assert accuracy_score([True, False], [True, True]) == 0.5

    def test_accuracy_empty(self):
        """Empty targets score zero."""
        assert accuracy_score([], []) == 0.0

    def test_zero_one_loss(self):
        """Test fraction and count."""
        y_true = [0, 1, 2, 3]
        y_pred = [0, 2, 1, 3]

        assert zero_one_loss(y_true, y_pred) == 0.5
        assert zero_one_loss(y_true, y_pred, normalize=False) == 2.0
        assert zero_one_loss([], []) == 0.0

    def test_confusion_matrix(self):
        """Results agree with scikit-learn."""
        y_true = [2, 0, 2, 2, 0, 1]
        y_pred = [0, 0, 2, 2, 0, 2]

        result = confusion_matrix(y_true, y_pred)

        assert result == [[2, 0, 0], [0, 0, 1], [1, 0, 2]]
        assert result == sk_metrics.confusion_matrix(y_true, y_pred).tolist()

    def test_confusion_matrix_labels(self):
        """An explicit label order sets the rows and columns."""
        y_true = ['cat', 'ant', 'cat', 'cat', 'ant', 'bird']
        y_pred = ['ant', 'ant', 'cat', 'cat', 'ant', 'cat']

        result = confusion_matrix(y_true, y_pred, labels=['ant', 'bird', 'cat'])
        assert result == [[2, 0, 0], [0, 0, 1], [1, 0, 2]]

        # Labels outside the list are ignored
        result = confusion_matrix(y_true, y_pred, labels=['cat', 'ant'])
        assert result == [[2, 1], [0, 2]]

    def test_confusion_matrix_mixed_labels(self):
        """Observed labels are grouped by element type, then sorted."""
        result = confusion_matrix([1, 'a'], [1, 1])
        assert result == [[1, 0], [1, 0]]

        result = confusion_matrix(['b', 2, 'a'], ['a', 1, 'a'])
        assert result == [[0, 0, 0, 0], [1, 0, 0, 0], [0, 0, 1, 0], [0, 0, 1, 0]]

    def test_booleans_are_not_numbers(self):
        """True and 1 are different labels."""
        assert confusion_matrix([1, True, 0], [True, 1, False]) == [
            [0, 0, 0, 0],
            [0, 0, 0, 1],
            [1, 0, 0, 0],
            [0, 1, 0, 0]
        ]
        assert accuracy_score([1, True], [True, 1]) == 0.0
        assert accuracy_score([1, True], [1, True]) == 1.0

        result = confusion_matrix([1, True], [True, True], labels=[True, 1])
        assert result == [[1, 0], [1, 0]]

    def test_invalid_targets(self):
        """Targets must be 1D label vectors of equal length."""
        with pytest.raises(ValueError, match='different lengths'):
            accuracy_score([1, 2, 3], [1, 2])
        with pytest.raises(RankMismatchError):
            accuracy_score([[1], [2]], [[1], [2]])
        with pytest.raises(ElementTypeError):
            confusion_matrix([1, None], [1, 1])
