"""
kalimdor: classical machine learning primitives on nested arrays.

Clustering, linear models, preprocessing transforms and metrics, all built
on a shared tensor validation and reshape engine (kalimdor.ops).
"""

__version__ = '0.1.0'

from kalimdor.ops import (
    ElementType, infer_shape, validate_matrix_1d, validate_matrix_2d,
    validate_matrix_type, validate_fit_inputs, flatten, reshape
)
from kalimdor.components.config import Config, ConfigManager
