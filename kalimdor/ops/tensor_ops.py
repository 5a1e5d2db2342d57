"""
Tensor validation and reshape engine.

Every estimator, transform and metric in kalimdor passes its inputs through
this module before doing any numeric work. A tensor here is a plain nested
sequence (list, tuple or numpy array) of numbers, strings or booleans; its
shape is never stored, only derived from the nesting.

The functions are pure: they never mutate or retain their inputs, and they
raise on the first violation found in depth-first, left-to-right order.
"""

import math
import numbers
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from kalimdor.ops.errors import (
    ElementTypeError, RaggedShapeError, RankMismatchError, ReshapeSizeError,
    TypeContractError, format_path, format_shape
)

Shape = Tuple[int, ...]
IndexPath = Tuple[int, ...]


class ElementType(str, Enum):
    """Recognised kinds of leaf value."""

    NUMBER = 'number'
    STRING = 'string'
    BOOLEAN = 'boolean'


ALL_ELEMENT_TYPES = frozenset(ElementType)


def _is_sequence(value: Any) -> bool:
    # Strings and 0-d arrays are leaves
    if isinstance(value, (list, tuple)):
        return True
    return isinstance(value, np.ndarray) and value.ndim > 0


def element_type_of(value: Any) -> Optional[ElementType]:
    """
    Classify a leaf value.

    bool is checked before number since it is an int subclass.

    Args:
        value: Leaf value

    Returns:
        The matching ElementType, or None if the value is not a recognised leaf
    """
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value.item()
    if isinstance(value, (bool, np.bool_)):
        return ElementType.BOOLEAN
    if isinstance(value, numbers.Number):
        return ElementType.NUMBER
    if isinstance(value, str):
        return ElementType.STRING
    return None


def render(tensor: Any) -> str:
    """
    Compact bracketed rendering of a tensor for error messages.

    Args:
        tensor: Tensor or leaf

    Returns:
        String such as '[[1,2],[3,4]]'
    """
    if _is_sequence(tensor):
        return '[' + ','.join(render(item) for item in tensor) + ']'
    if isinstance(tensor, (np.generic, np.ndarray)):
        tensor = tensor.item()
    return repr(tensor)


# Shape inference

def infer_shape(tensor: Any) -> Shape:
    """
    Infer the per-axis extents of a nested sequence.

    Args:
        tensor: Nested sequence (or a leaf)

    Returns:
        Shape tuple, outermost axis first. An empty sequence is (0,) and a
        leaf is ().

    Raises:
        TypeContractError: If tensor is None
        RaggedShapeError: If sibling elements disagree in length or kind
    """
    if tensor is None:
        raise TypeContractError("Cannot infer the shape of None", tensor)
    if not _is_sequence(tensor):
        return ()
    return _infer(tensor, ())


def _is_dense_array(node: Any) -> bool:
    return isinstance(node, np.ndarray) and node.dtype != object


def _infer(node: Sequence[Any], path: IndexPath) -> Shape:
    if _is_dense_array(node):
        return tuple(node.shape)

    n = len(node)
    if n == 0:
        return (0,)

    if not _is_sequence(node[0]):
        for i in range(1, n):
            if _is_sequence(node[i]):
                raise RaggedShapeError(path + (i,), None, len(node[i]))
        return (n,)

    # Element 0 defines the sub-shape every sibling must match
    sub_shape = _infer(node[0], path + (0,))
    for i in range(1, n):
        _conform(node[i], sub_shape, path + (i,))
    return (n,) + sub_shape


def _conform(node: Any, shape: Shape, path: IndexPath) -> None:
    if not _is_sequence(node):
        raise RaggedShapeError(path, shape[0], None)
    if _is_dense_array(node) and node.shape == shape:
        return
    if len(node) != shape[0]:
        raise RaggedShapeError(path, shape[0], len(node))

    inner = shape[1:]
    for i, child in enumerate(node):
        if inner:
            _conform(child, inner, path + (i,))
        elif _is_sequence(child):
            raise RaggedShapeError(path + (i,), None, len(child))


def size_of(shape: Sequence[int]) -> int:
    """Number of elements a tensor of the given shape holds."""
    return math.prod(shape)


# Validation

def _validate_rank(tensor: Any, rank: int) -> Shape:
    shape = infer_shape(tensor)
    if len(shape) != rank:
        raise RankMismatchError(
            f"The matrix is not {rank}D shaped: {render(tensor)} of {format_shape(shape)}",
            shape,
            rank
        )
    return shape


def validate_matrix_1d(tensor: Any) -> None:
    """
    Require a rank-1 tensor.

    Args:
        tensor: Tensor to check

    Raises:
        RankMismatchError: If the inferred rank is not exactly 1
    """
    _validate_rank(tensor, 1)


def validate_matrix_2d(tensor: Any) -> None:
    """
    Require a rank-2 tensor.

    Args:
        tensor: Tensor to check

    Raises:
        RankMismatchError: If the inferred rank is not exactly 2
    """
    _validate_rank(tensor, 2)


def _normalize_types(allowed_types: Union[str, ElementType, Iterable[Any]]) -> frozenset:
    if isinstance(allowed_types, (str, ElementType)):
        allowed_types = [allowed_types]
    try:
        return frozenset(ElementType(t) for t in allowed_types)
    except TypeError as e:
        raise TypeContractError(
            f"Allowed types must be an iterable of element types, got {allowed_types!r}",
            allowed_types
        ) from e


def _iter_leaves(node: Any, path: IndexPath) -> Iterator[Tuple[IndexPath, Any]]:
    for i, child in enumerate(node):
        if _is_sequence(child):
            yield from _iter_leaves(child, path + (i,))
        else:
            yield path + (i,), child


def validate_matrix_type(tensor: Any,
                         allowed_types: Union[str, ElementType, Iterable[Any]]) -> None:
    """
    Require every leaf of a tensor to belong to an allowed element type.

    Args:
        tensor: Tensor of any rank
        allowed_types: ElementType members or their names ('number',
            'string', 'boolean'), singly or as an iterable

    Raises:
        TypeContractError: If tensor is not a sequence
        ElementTypeError: At the first leaf outside allowed_types
    """
    if not _is_sequence(tensor):
        raise TypeContractError(
            f"The matrix must be a sequence to check its element types: {render(tensor)}",
            tensor
        )
    allowed = _normalize_types(allowed_types)

    for path, value in _iter_leaves(tensor, ()):
        kind = element_type_of(value)
        if kind not in allowed:
            kind_name = kind.value if kind is not None else type(value).__name__
            allowed_names = ', '.join(sorted(t.value for t in allowed))
            raise ElementTypeError(
                f"Element {format_path(path)} of type {kind_name} is not one of "
                f"[{allowed_names}]: {render(value)}",
                value,
                path,
                allowed
            )


def validate_fit_inputs(X: Any, y: Any) -> None:
    """
    Entry contract for supervised fit methods.

    Only the shape class is checked. Whether X has as many rows as y has
    elements is left to the calling estimator.

    Args:
        X: Feature matrix, must be rank 2
        y: Target vector, must be rank 1

    Raises:
        RankMismatchError: If either argument has the wrong rank
    """
    validate_matrix_2d(X)
    validate_matrix_1d(y)


# Reshape

def flatten(tensor: Any) -> List[Any]:
    """
    Flatten a tensor into a list in row-major order.

    Args:
        tensor: Nested sequence

    Returns:
        List of leaves

    Raises:
        TypeContractError: If tensor is not a sequence
        RaggedShapeError: If tensor is ragged
    """
    if not _is_sequence(tensor):
        raise TypeContractError(f"The input tensor must be a sequence: {render(tensor)}", tensor)
    infer_shape(tensor)
    return [value for _, value in _iter_leaves(tensor, ())]


def _check_target_shape(target_shape: Any) -> Shape:
    if not isinstance(target_shape, (list, tuple, np.ndarray)):
        raise TypeContractError(
            f"The target shape must be a sequence of integers, got {target_shape!r}",
            target_shape
        )
    for n in target_shape:
        if isinstance(n, (bool, np.bool_)) or not isinstance(n, numbers.Integral) or n < 0:
            raise TypeContractError(
                f"The target shape must contain non-negative integers, got {render(target_shape)}",
                target_shape
            )
    return tuple(int(n) for n in target_shape)


def _nest(leaves: Iterator[Any], shape: Shape) -> Any:
    if not shape:
        return next(leaves)
    if len(shape) == 1:
        return [next(leaves) for _ in range(shape[0])]
    return [_nest(leaves, shape[1:]) for _ in range(shape[0])]


def reshape(tensor: Any, target_shape: Sequence[int]) -> Any:
    """
    Regroup a tensor's leaves into a new shape.

    Leaves keep their row-major order; only the grouping changes.

    Args:
        tensor: Nested sequence of any rank
        target_shape: Sequence of non-negative axis extents

    Returns:
        Nested lists with the requested shape

    Raises:
        TypeContractError: If tensor is not a sequence or target_shape is not
            a sequence of non-negative integers
        RaggedShapeError: If tensor is ragged
        ReshapeSizeError: If the element counts differ
    """
    if not _is_sequence(tensor):
        raise TypeContractError(f"The input tensor must be a sequence: {render(tensor)}", tensor)
    shape = _check_target_shape(target_shape)

    source_shape = infer_shape(tensor)
    source_size = size_of(source_shape)
    target_size = size_of(shape)
    if source_size != target_size:
        raise ReshapeSizeError(source_shape, source_size, shape, target_size)

    leaves = (value for _, value in _iter_leaves(tensor, ()))
    return _nest(leaves, shape)
