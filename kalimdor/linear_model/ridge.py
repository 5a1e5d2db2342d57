"""
Ridge regression fitted by batch gradient descent.
"""

import logging
import numbers
from typing import Any, List, Optional

import numpy as np

from kalimdor.components.config import Config
from kalimdor.ops import validate_fit_inputs, validate_matrix_2d
from kalimdor.utils.general import as_numeric_array

logger = logging.getLogger(__name__)


class Ridge:
    """
    Linear least squares with an L2 penalty on the coefficients.

    Minimizes mean((X w + b - y)^2) + alpha * ||w||^2. The intercept is not
    penalized.
    """

    def __init__(self,
                 alpha: float = 1.0,
                 epochs: int = 1000,
                 learning_rate: float = 0.001):
        if alpha is None:
            raise ValueError("Ridge cannot be initiated with null alpha")
        if not isinstance(alpha, numbers.Real) or isinstance(alpha, bool) or alpha < 0:
            raise ValueError(f"alpha must be a non-negative number, got {alpha!r}")
        if isinstance(epochs, bool) or not isinstance(epochs, numbers.Integral) or epochs < 1:
            raise ValueError(f"epochs must be a positive integer, got {epochs!r}")
        if not isinstance(learning_rate, numbers.Real) or learning_rate <= 0:
            raise ValueError(f"learning_rate must be a positive number, got {learning_rate!r}")

        self.alpha = float(alpha)
        self.epochs = int(epochs)
        self.learning_rate = float(learning_rate)

        self.coef_: Optional[np.ndarray] = None
        self.intercept_: Optional[float] = None

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> 'Ridge':
        """
        Build an estimator from the 'ridge' configuration section.

        Args:
            config: Configuration
            **kwargs: Explicit arguments, taking precedence over the config

        Returns:
            Ridge instance
        """
        params = {
            'alpha': config.get('ridge.alpha', 1.0),
            'epochs': config.get('ridge.epochs', 1000),
            'learning_rate': config.get('ridge.learning-rate', 0.001),
        }
        params.update(kwargs)
        return cls(**params)

    def fit(self, X: Any, y: Any) -> 'Ridge':
        """
        Fit the model.

        Args:
            X: 2D numeric feature matrix
            y: 1D numeric targets, one per row of X

        Returns:
            self
        """
        validate_fit_inputs(X, y)
        features = as_numeric_array(X)
        targets = as_numeric_array(y)

        n_samples, n_features = features.shape
        if n_samples == 0:
            raise ValueError("X cannot be empty")
        if targets.shape[0] != n_samples:
            raise ValueError(
                f"X has {n_samples} samples, but y has {targets.shape[0]}"
            )

        coef = np.zeros(n_features)
        intercept = 0.0

        for epoch in range(self.epochs):
            residual = features @ coef + intercept - targets
            grad_coef = 2.0 * (features.T @ residual) / n_samples + 2.0 * self.alpha * coef
            grad_intercept = 2.0 * np.mean(residual)

            coef = coef - self.learning_rate * grad_coef
            intercept = intercept - self.learning_rate * grad_intercept

            if not np.all(np.isfinite(coef)):
                raise FloatingPointError(
                    f"Ridge diverged at epoch {epoch}; lower the learning_rate "
                    f"(currently {self.learning_rate})"
                )

        self.coef_ = coef
        self.intercept_ = float(intercept)
        logger.debug(f"Ridge fit on {n_samples} samples, final loss {self._loss(features, targets):.6f}")
        return self

    def _loss(self, features: np.ndarray, targets: np.ndarray) -> float:
        residual = features @ self.coef_ + self.intercept_ - targets
        return float(np.mean(residual ** 2) + self.alpha * np.sum(self.coef_ ** 2))

    def predict(self, X: Any) -> List[float]:
        """
        Predict targets for X.

        Args:
            X: 2D numeric matrix with the fitted number of columns

        Returns:
            List of predictions
        """
        if self.coef_ is None:
            raise RuntimeError("Ridge must be fit before calling predict")

        validate_matrix_2d(X)
        features = as_numeric_array(X)
        if features.shape[1] != self.coef_.shape[0]:
            raise ValueError(
                f"X has {features.shape[1]} features, but Ridge was fit with {self.coef_.shape[0]}"
            )

        return (features @ self.coef_ + self.intercept_).tolist()

    def __repr__(self) -> str:
        return f"Ridge(alpha={self.alpha}, epochs={self.epochs}, learning_rate={self.learning_rate})"
