# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/errors.py

"""
Error taxonomy for py-generic-matrix

Every engine failure is raised as a subclass of MatrixError carrying a Status
code. Callers that prefer status values over exceptions can run any operation
through call_status().
"""

from enum import IntEnum
from typing import Any, Callable, Optional, Tuple


class Status(IntEnum):
    """Status codes reported by the engine."""

    SUCCESS = 1
    NULL_REFERENCE = -1
    OUT_OF_MEMORY = -2
    INVALID_SIZE = -5
    INVALID_INDEX = -8
    EXPECTED_VECTOR = -10
    INVALID_PERMUTATION = -11
    INCOMPATIBLE_TYPES = -12
    INCOMPATIBLE_SIZE = -13
    INVALID_ENUM_MEMBER = -14
    DIVISION_BY_ZERO = -15


_STATUS_MESSAGES = {
    Status.SUCCESS: "Operation was successful",
    Status.NULL_REFERENCE: "A required argument is missing",
    Status.OUT_OF_MEMORY: "The allocator could not provide the requested memory",
    Status.INVALID_SIZE: "Invalid size for the destination",
    Status.INVALID_INDEX: "Index out of bounds",
    Status.EXPECTED_VECTOR: "Expected a row or column vector",
    Status.INVALID_PERMUTATION: "Invalid selection index",
    Status.INCOMPATIBLE_TYPES: "Element kinds are incompatible",
    Status.INCOMPATIBLE_SIZE: "Operand shapes are incompatible",
    Status.INVALID_ENUM_MEMBER: "Unknown element kind",
    Status.DIVISION_BY_ZERO: "Integer division by zero",
}


def status_to_str(status: Status) -> str:
    """Return a human readable description of `status`."""
    return _STATUS_MESSAGES.get(status, f"Unknown status {int(status)}")


class MatrixError(Exception):
    """Base class of every error raised by the engine."""

    status = Status.SUCCESS

    def __init__(self, message: str = ""):
        super().__init__(message or status_to_str(self.status))


class NullReferenceError(MatrixError, ValueError):
    """A required matrix or element argument is absent."""

    status = Status.NULL_REFERENCE


class InvalidIndexError(MatrixError, IndexError):
    """Row or column index out of bounds."""

    status = Status.INVALID_INDEX


class IncompatibleTypesError(MatrixError, ValueError):
    """Operand kinds differ, or a requested kind does not match the tag."""

    status = Status.INCOMPATIBLE_TYPES


class IncompatibleSizeError(MatrixError, ValueError):
    """Operand shapes fail the broadcasting rule."""

    status = Status.INCOMPATIBLE_SIZE


class InvalidSizeError(MatrixError, ValueError):
    """Zero dimensions requested, or a pre-sized destination has the wrong shape."""

    status = Status.INVALID_SIZE


class OutOfMemoryError(MatrixError, MemoryError):
    """The allocator reported a failure."""

    status = Status.OUT_OF_MEMORY


class InvalidEnumMemberError(MatrixError, RuntimeError):
    """Dispatch reached an unknown element kind. Signals a defect."""

    status = Status.INVALID_ENUM_MEMBER


class ExpectedVectorError(MatrixError, ValueError):
    status = Status.EXPECTED_VECTOR


class InvalidPermutationError(MatrixError, IndexError):
    status = Status.INVALID_PERMUTATION


class DivisionByZeroError(MatrixError, ZeroDivisionError):
    status = Status.DIVISION_BY_ZERO


def call_status(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Tuple[Status, Optional[Any]]:
    """Run an engine operation and report its outcome as a status value.

    Args:
        func: Engine operation to run
        *args: Positional arguments for `func`
        **kwargs: Keyword arguments for `func`

    Returns:
        (Status.SUCCESS, result) on success, (error status, None) when the
        operation raised a MatrixError. Other exceptions propagate.

    Examples:
        >>> status, _ = call_status(matrix_add, allocator, a, b_other_kind, out)
        >>> status
        <Status.INCOMPATIBLE_TYPES: -12>
    """
    try:
        result = func(*args, **kwargs)
    except MatrixError as e:
        return e.status, None
    return Status.SUCCESS, result


__all__ = [
    "Status",
    "status_to_str",
    "MatrixError",
    "NullReferenceError",
    "InvalidIndexError",
    "IncompatibleTypesError",
    "IncompatibleSizeError",
    "InvalidSizeError",
    "OutOfMemoryError",
    "InvalidEnumMemberError",
    "ExpectedVectorError",
    "InvalidPermutationError",
    "DivisionByZeroError",
    "call_status",
]
