"""
Tensor validation and reshape engine.

This package provides the shape inference, validation and reshape
operations every kalimdor algorithm runs on its inputs.
"""

from kalimdor.ops.errors import (
    TensorOpsError, TypeContractError, RaggedShapeError, RankMismatchError,
    ElementTypeError, ReshapeSizeError
)
from kalimdor.ops.tensor_ops import (
    ElementType, element_type_of, infer_shape, size_of, render,
    validate_matrix_1d, validate_matrix_2d, validate_matrix_type,
    validate_fit_inputs, flatten, reshape
)

__all__ = [
    'TensorOpsError',
    'TypeContractError',
    'RaggedShapeError',
    'RankMismatchError',
    'ElementTypeError',
    'ReshapeSizeError',
    'ElementType',
    'element_type_of',
    'infer_shape',
    'size_of',
    'render',
    'validate_matrix_1d',
    'validate_matrix_2d',
    'validate_matrix_type',
    'validate_fit_inputs',
    'flatten',
    'reshape',
]
