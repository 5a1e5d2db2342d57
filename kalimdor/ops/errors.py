"""
Errors raised by the tensor validation and reshape engine.

Every error is terminal for the call that raised it. Each class also derives
from the builtin exception a caller would naturally catch (TypeError for
contract/type problems, ValueError for shape and size problems).
"""

from typing import Any, Iterable, Optional, Tuple


def format_path(path: Tuple[int, ...]) -> str:
    """
    Render an index path the way error messages show it.

    Args:
        path: Per-level indices, outermost first

    Returns:
        String such as 'arr[1][1][0]'
    """
    return 'arr' + ''.join(f'[{i}]' for i in path)


def format_shape(shape: Tuple[int, ...]) -> str:
    """
    Render a shape in compact bracketed form, e.g. '[3,2]' or '[]'.

    Args:
        shape: Per-axis extents

    Returns:
        Bracketed string
    """
    return '[' + ','.join(str(n) for n in shape) + ']'


class TensorOpsError(Exception):
    """Base class for all engine errors."""


class TypeContractError(TensorOpsError, TypeError):
    """
    Input is not a sequence (or not a valid shape) where one was required.
    """

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class RaggedShapeError(TensorOpsError, ValueError):
    """
    A nested sequence has inconsistent lengths at some depth.

    `expected` and `actual` are element counts. A count of None means the
    element was (or should have been) a scalar rather than a sequence.
    """

    def __init__(self,
                 path: Tuple[int, ...],
                 expected: Optional[int],
                 actual: Optional[int]):
        self.path = tuple(path)
        self.expected = expected
        self.actual = actual

        location = format_path(self.path)
        if expected is None:
            message = (f"Element {location} should be a scalar, "
                       f"but is a sequence of {actual} elements")
        elif actual is None:
            message = (f"Element {location} should have {expected} elements, "
                       f"but is a scalar")
        else:
            message = (f"Element {location} should have {expected} elements, "
                       f"but has {actual} elements")
        super().__init__(message)


class RankMismatchError(TensorOpsError, ValueError):
    """A tensor's rank differs from the rank a contract requires."""

    def __init__(self, message: str, shape: Tuple[int, ...], expected_rank: int):
        super().__init__(message)
        self.shape = tuple(shape)
        self.expected_rank = expected_rank


class ElementTypeError(TensorOpsError, TypeError):
    """A leaf's type is outside the allowed set."""

    def __init__(self,
                 message: str,
                 value: Any,
                 path: Tuple[int, ...],
                 allowed_types: Iterable[Any]):
        super().__init__(message)
        self.value = value
        self.path = tuple(path)
        self.allowed_types = frozenset(allowed_types)


class ReshapeSizeError(TensorOpsError, ValueError):
    """The target shape's element count differs from the source's."""

    def __init__(self,
                 source_shape: Tuple[int, ...],
                 source_size: int,
                 target_shape: Tuple[int, ...],
                 target_size: int):
        self.source_shape = tuple(source_shape)
        self.source_size = source_size
        self.target_shape = tuple(target_shape)
        self.target_size = target_size
        super().__init__(
            f"Tensor of shape {format_shape(self.source_shape)} with {source_size} "
            f"elements cannot be reshaped into {format_shape(self.target_shape)} "
            f"with {target_size} elements"
        )
