# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/matrix.py

"""
Matrix container for py-generic-matrix

This module provides the runtime-typed Matrix container together with its
lifecycle (init, destroy, copy), element access and conversions from and to
Python rows and numpy arrays.

Storage layout: the allocator-owned raw buffer holds rows*columns elements of
kind_width(kind) bytes, row-major. Fixed-width kinds are read and written
through a typed numpy view of that buffer. Object-backed kinds keep their
element references in a parallel object array of the same length, the raw
buffer reserving one reference slot per element.
"""

import logging
from typing import Any, List, Optional, Sequence

import numpy as np

from .allocators import Allocator
from .element_kinds import ElementKind, is_object_kind, kind_dtype, kind_from_dtype, kind_width, normalize_kind
from .errors import (
    IncompatibleTypesError, InvalidIndexError, InvalidSizeError, NullReferenceError,
)
from .kernels import get_kernel

logger = logging.getLogger(__name__)


class Matrix:
    """Runtime-typed two-dimensional matrix.

    A default-constructed Matrix is empty: no kind, no allocator, no buffer.
    Use matrix_init() to give it storage and matrix_destroy() to release it.
    """

    def __init__(self):
        self.rows = 0
        self.columns = 0
        self.kind: Optional[ElementKind] = None
        self.allocator: Optional[Allocator] = None
        self.buffer: Optional[np.ndarray] = None
        self.data: Optional[np.ndarray] = None

    @property
    def is_live(self) -> bool:
        return self.buffer is not None

    @property
    def shape(self):
        return (self.rows, self.columns)

    @property
    def size(self) -> int:
        return self.rows * self.columns

    @property
    def nbytes(self) -> int:
        return 0 if self.buffer is None else self.buffer.nbytes

    def _adopt(self, other: "Matrix") -> None:
        # Take over the storage of `other`, leaving it empty
        self.rows = other.rows
        self.columns = other.columns
        self.kind = other.kind
        self.allocator = other.allocator
        self.buffer = other.buffer
        self.data = other.data
        other._clear()

    def _clear(self) -> None:
        self.rows = 0
        self.columns = 0
        self.kind = None
        self.allocator = None
        self.buffer = None
        self.data = None

    def __repr__(self):
        if not self.is_live:
            return "Matrix(empty)"
        return f"Matrix(shape={self.shape}, kind={self.kind.value})"


def _require_live(matrix: Optional[Matrix], name: str, operation_name: str) -> Matrix:
    if matrix is None or not matrix.is_live:
        raise NullReferenceError(f"{operation_name}: {name} is missing or empty")
    return matrix


def _check_kind(matrix: Matrix, kind: Any, operation_name: str) -> None:
    if kind is not None and normalize_kind(kind) is not matrix.kind:
        raise IncompatibleTypesError(
            f"{operation_name}: Requested kind {normalize_kind(kind).value} "
            f"but matrix holds {matrix.kind.value}")


def _flat_index(row: int, column: int, matrix: Matrix, operation_name: str) -> int:
    if not (0 <= row < matrix.rows and 0 <= column < matrix.columns):
        raise InvalidIndexError(
            f"{operation_name}: Index ({row}, {column}) out of bounds for "
            f"{matrix.rows}x{matrix.columns} matrix")
    return row * matrix.columns + column


def _allocate(allocator: Optional[Allocator], rows: int, columns: int, kind: Any,
              identity: bool, operation_name: str) -> Matrix:
    if allocator is None:
        raise NullReferenceError(f"{operation_name}: allocator is required")
    kind = normalize_kind(kind)
    if rows <= 0 or columns <= 0:
        raise InvalidSizeError(f"{operation_name}: Invalid dimensions {rows}x{columns}")

    kernel = get_kernel(kind)
    size = rows * columns
    buffer = allocator.allocate(size * kind_width(kind))

    matrix = Matrix()
    matrix.rows = rows
    matrix.columns = columns
    matrix.kind = kind
    matrix.allocator = allocator
    matrix.buffer = buffer
    if is_object_kind(kind):
        matrix.data = np.empty(size, dtype=object)
    else:
        matrix.data = buffer.view(kind_dtype(kind))
    kernel.fill(matrix.data)
    if identity:
        kernel.set_identity(matrix.data, rows, columns)

    logger.debug(f"{operation_name}: initialized {rows}x{columns} {kind.value} matrix "
                 f"({buffer.nbytes} bytes, {allocator.name})")
    return matrix


def _replace(out: Optional[Matrix], fresh: Matrix) -> Matrix:
    # Release the previous storage of `out` only once `fresh` exists
    if out is None:
        return fresh
    matrix_destroy(out)
    out._adopt(fresh)
    return out


def matrix_init(allocator: Optional[Allocator], rows: int, columns: int, kind: Any,
                out: Optional[Matrix] = None) -> Matrix:
    """Initialize a rows x columns matrix of `kind`.

    Every element is set to the kind's zero, then the main diagonal is set to
    the kind's one (nested-matrix slots stay empty). When `out` is given it is
    re-initialized in place, its previous storage being released through its
    own allocator after the new buffer has been obtained.

    Args:
        allocator: Allocator providing the element buffer
        rows: Number of rows, at least 1
        columns: Number of columns, at least 1
        kind: ElementKind or any token accepted by normalize_kind()
        out: Optional matrix to (re)initialize

    Returns:
        The initialized matrix

    Raises:
        NullReferenceError: If allocator is None
        InvalidSizeError: If rows or columns is zero
        OutOfMemoryError: If the allocator fails; `out` is left untouched
    """
    return _replace(out, _allocate(allocator, rows, columns, kind, True, "matrix_init"))


def matrix_init_zeros(allocator: Optional[Allocator], rows: int, columns: int, kind: Any,
                      out: Optional[Matrix] = None) -> Matrix:
    """Same as matrix_init() without the identity diagonal."""
    return _replace(out, _allocate(allocator, rows, columns, kind, False, "matrix_init_zeros"))


def matrix_destroy(matrix: Optional[Matrix]) -> None:
    """Release a matrix and everything its elements own.

    Object-backed elements are released depth-first, then the buffer is freed
    through the matrix's own allocator and the matrix becomes empty. Destroying
    None or an empty matrix does nothing.
    """
    if matrix is None or not matrix.is_live:
        return
    kernel = get_kernel(matrix.kind)
    if is_object_kind(matrix.kind):
        for element in matrix.data:
            kernel.release(element)
    logger.debug(f"matrix_destroy: releasing {matrix.rows}x{matrix.columns} {matrix.kind.value} matrix")
    matrix.allocator.release(matrix.buffer)
    matrix._clear()


def _move_elements(source: Matrix, dest: Matrix) -> None:
    # Transfer every element of `source` into `dest`, then destroy `source`
    kernel = get_kernel(dest.kind)
    if is_object_kind(dest.kind):
        for element in dest.data:
            kernel.release(element)
        dest.data[:] = source.data
        kernel.fill(source.data)
    else:
        np.copyto(dest.data, source.data)
    matrix_destroy(source)


def _contains(candidate: Matrix, target: Matrix) -> bool:
    if candidate is target:
        return True
    if not candidate.is_live or candidate.kind is not ElementKind.MATRIX:
        return False
    return any(_contains(element, target) for element in candidate.data)


def matrix_get(row: int, column: int, matrix: Optional[Matrix], kind: Any = None):
    """Return the element at (row, column).

    Fixed-width kinds return a numpy scalar copy, object-backed kinds the
    element itself.

    Raises:
        NullReferenceError: If the matrix is missing or empty
        InvalidIndexError: If (row, column) is out of bounds
        IncompatibleTypesError: If `kind` is given and differs from the matrix kind
    """
    _require_live(matrix, "matrix", "matrix_get")
    _check_kind(matrix, kind, "matrix_get")
    return matrix.data[_flat_index(row, column, matrix, "matrix_get")]


def matrix_set(element: Any, row: int, column: int, matrix: Optional[Matrix], kind: Any = None) -> None:
    """Store `element` at (row, column).

    Integers wrap around to the kind's width; object-backed kinds coerce to
    their value type. The previous element of an object-backed slot is not
    destroyed: release it first if the matrix owned it. A nested matrix cannot
    contain itself.

    Raises:
        NullReferenceError: If the matrix or the element is missing
        InvalidIndexError: If (row, column) is out of bounds
        IncompatibleTypesError: If the element cannot be stored in this kind
    """
    _require_live(matrix, "matrix", "matrix_set")
    if element is None:
        raise NullReferenceError("matrix_set: element is missing")
    _check_kind(matrix, kind, "matrix_set")
    index = _flat_index(row, column, matrix, "matrix_set")
    value = get_kernel(matrix.kind).coerce(element)
    if matrix.kind is ElementKind.MATRIX and _contains(value, matrix):
        raise IncompatibleTypesError("matrix_set: A matrix cannot contain itself")
    matrix.data[index] = value


def element_offset(row: int, column: int, matrix: Optional[Matrix]) -> int:
    """Byte offset of element (row, column) inside the raw buffer."""
    _require_live(matrix, "matrix", "element_offset")
    return _flat_index(row, column, matrix, "element_offset") * kind_width(matrix.kind)


def matrix_get_bytes(row: int, column: int, matrix: Optional[Matrix]) -> bytes:
    """Return the raw bytes of one fixed-width element."""
    _require_live(matrix, "matrix", "matrix_get_bytes")
    if is_object_kind(matrix.kind):
        raise IncompatibleTypesError(
            f"matrix_get_bytes: {matrix.kind.value} elements have no raw representation")
    offset = element_offset(row, column, matrix)
    return matrix.buffer[offset:offset + kind_width(matrix.kind)].tobytes()


def matrix_set_bytes(raw: bytes, row: int, column: int, matrix: Optional[Matrix]) -> None:
    """Overwrite one fixed-width element with `raw`, which must be exactly one element wide."""
    _require_live(matrix, "matrix", "matrix_set_bytes")
    if raw is None:
        raise NullReferenceError("matrix_set_bytes: raw bytes are missing")
    if is_object_kind(matrix.kind):
        raise IncompatibleTypesError(
            f"matrix_set_bytes: {matrix.kind.value} elements have no raw representation")
    width = kind_width(matrix.kind)
    if len(raw) != width:
        raise InvalidSizeError(f"matrix_set_bytes: Expected {width} bytes, got {len(raw)}")
    offset = element_offset(row, column, matrix)
    matrix.buffer[offset:offset + width] = np.frombuffer(bytes(raw), dtype=np.uint8)


# Typed accessors, one pair per kind

def _make_typed_get(kind: ElementKind):
    def typed_get(row, column, matrix):
        return matrix_get(row, column, matrix, kind)
    typed_get.__name__ = typed_get.__qualname__ = f"matrix_get_{kind.value}"
    typed_get.__doc__ = f"matrix_get() restricted to {kind.value} matrices."
    return typed_get


def _make_typed_set(kind: ElementKind):
    def typed_set(element, row, column, matrix):
        matrix_set(element, row, column, matrix, kind)
    typed_set.__name__ = typed_set.__qualname__ = f"matrix_set_{kind.value}"
    typed_set.__doc__ = f"matrix_set() restricted to {kind.value} matrices."
    return typed_set


_TYPED_ACCESSORS = []
for _kind in ElementKind:
    for _factory in (_make_typed_get, _make_typed_set):
        _accessor = _factory(_kind)
        globals()[_accessor.__name__] = _accessor
        _TYPED_ACCESSORS.append(_accessor.__name__)


# Copy, comparison and conversions

def matrix_copy(allocator: Optional[Allocator], source: Optional[Matrix],
                out: Optional[Matrix] = None) -> Matrix:
    """Deep-copy `source` into storage from `allocator`.

    Nested matrices are copied recursively. On failure everything allocated
    so far is released and `out` is left untouched.
    """
    _require_live(source, "source", "matrix_copy")
    fresh = _allocate(allocator, source.rows, source.columns, source.kind, False, "matrix_copy")
    try:
        get_kernel(source.kind).gather(source, fresh, np.arange(source.size))
    except Exception:
        matrix_destroy(fresh)
        raise
    return _replace(out, fresh)


def matrix_equal(left: Optional[Matrix], right: Optional[Matrix]) -> bool:
    """True when both matrices have the same kind, shape and element values."""
    left_live = left is not None and left.is_live
    right_live = right is not None and right.is_live
    if not (left_live and right_live):
        return left_live == right_live
    if left.kind is not right.kind or left.shape != right.shape:
        return False
    return get_kernel(left.kind).equal(left.data, right.data)


def matrix_from_rows(allocator: Optional[Allocator], rows: Sequence[Sequence[Any]], kind: Any) -> Matrix:
    """Build a matrix of `kind` from a non-empty rectangular sequence of rows.

    Object-backed values are stored as given (nested matrices are adopted,
    not copied).
    """
    if rows is None:
        raise NullReferenceError("matrix_from_rows: rows are missing")
    rows = [list(row) for row in rows]
    if not rows or not rows[0]:
        raise InvalidSizeError("matrix_from_rows: Rows must be non-empty")
    columns = len(rows[0])
    for r, row in enumerate(rows):
        if len(row) != columns:
            raise InvalidSizeError(
                f"matrix_from_rows: Row {r} has {len(row)} elements, expected {columns}")

    matrix = _allocate(allocator, len(rows), columns, kind, False, "matrix_from_rows")
    try:
        for r, row in enumerate(rows):
            for c, element in enumerate(row):
                matrix_set(element, r, c, matrix)
    except Exception:
        # Elements handed in by the caller stay with the caller
        get_kernel(matrix.kind).fill(matrix.data)
        matrix_destroy(matrix)
        raise
    return matrix


def matrix_to_rows(matrix: Optional[Matrix]) -> List[List[Any]]:
    """Return the elements as a list of rows of Python values."""
    _require_live(matrix, "matrix", "matrix_to_rows")
    return matrix.data.reshape(matrix.rows, matrix.columns).tolist()


def matrix_from_numpy(allocator: Optional[Allocator], array: Any, kind: Any = None) -> Matrix:
    """Build a matrix from a 2-dimensional numpy array.

    The kind is inferred from the array dtype when not given.
    """
    array = np.asarray(array)
    if array.ndim != 2:
        raise InvalidSizeError("matrix_from_numpy: Input array must be 2-dimensional")
    if kind is None:
        kind = kind_from_dtype(array.dtype)
        if kind is None:
            raise IncompatibleTypesError(f"matrix_from_numpy: Unsupported dtype {array.dtype}")
    kind = normalize_kind(kind)

    if is_object_kind(kind) or array.dtype != kind_dtype(kind):
        return matrix_from_rows(allocator, array.tolist(), kind)

    matrix = _allocate(allocator, array.shape[0], array.shape[1], kind, False, "matrix_from_numpy")
    np.copyto(matrix.data, array.ravel())
    return matrix


def matrix_to_numpy(matrix: Optional[Matrix]) -> np.ndarray:
    """Return a 2-dimensional numpy copy of the elements."""
    _require_live(matrix, "matrix", "matrix_to_numpy")
    return matrix.data.reshape(matrix.rows, matrix.columns).copy()


__all__ = [
    "Matrix",
    "matrix_init",
    "matrix_init_zeros",
    "matrix_destroy",
    "matrix_get",
    "matrix_set",
    "element_offset",
    "matrix_get_bytes",
    "matrix_set_bytes",
    "matrix_copy",
    "matrix_equal",
    "matrix_from_rows",
    "matrix_to_rows",
    "matrix_from_numpy",
    "matrix_to_numpy",
] + _TYPED_ACCESSORS
