# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/matrix_transpose_ops.py

"""
Matrix transpose operations module for py-generic-matrix

Transpose as a copy-producing operation (`matrix_transpose`) and as an
in-place permutation of the buffer (`matrix_transpose_inplace`).
"""

import logging
from typing import Optional

import numpy as np

from .allocators import Allocator
from .element_kinds import ElementKind
from .errors import IncompatibleTypesError
from .kernels import get_kernel
from .matrix import Matrix, _require_live
from .matrix_ops import _produce

logger = logging.getLogger(__name__)


def _transpose_index_map(rows: int, columns: int) -> np.ndarray:
    # Slot i of the columns x rows result reads this slot of the source
    return np.arange(rows * columns).reshape(rows, columns).T.ravel()


def _validate_matrix_transpose_inputs(matrix: Optional[Matrix], operation_name: str,
                                      kind: Optional[ElementKind] = None) -> None:
    _require_live(matrix, "matrix", operation_name)
    if kind is not None and matrix.kind is not kind:
        raise IncompatibleTypesError(
            f"{operation_name}: Expected a {kind.value} matrix, got {matrix.kind.value}")


def _transpose(allocator: Optional[Allocator], matrix: Matrix, out: Matrix, operation_name: str,
               kind: Optional[ElementKind] = None) -> Matrix:
    _validate_matrix_transpose_inputs(matrix, operation_name, kind)
    kernel = get_kernel(matrix.kind)
    index_map = _transpose_index_map(matrix.rows, matrix.columns)
    logger.debug(f"{operation_name}: {matrix.kind.value} {matrix.shape}")

    def compute(dest: Matrix) -> None:
        kernel.gather(matrix, dest, index_map)

    return _produce(allocator, out, matrix.columns, matrix.rows, matrix.kind, compute,
                    (matrix,), operation_name)


def matrix_transpose(allocator: Optional[Allocator], matrix: Matrix, out: Matrix) -> Matrix:
    """Transpose `matrix` into `out`, which becomes columns x rows.

    Object-backed elements are copied into the result; nested matrices are
    deep-copied.

    Args:
        allocator: Allocator for the result, or None to write into a pre-sized `out`
        matrix: Input matrix
        out: Destination matrix

    Returns:
        `out`, with out[c][r] == matrix[r][c]
    """
    return _transpose(allocator, matrix, out, "matrix_transpose")


def matrix_transpose_inplace(out: Matrix) -> Matrix:
    """Transpose `out` in place.

    The dimensions are swapped and the elements permuted inside the existing
    buffer, whose length does not change.
    """
    _validate_matrix_transpose_inputs(out, "matrix_transpose_inplace")
    if out.rows > 1 and out.columns > 1:
        out.data[:] = out.data[_transpose_index_map(out.rows, out.columns)]
    out.rows, out.columns = out.columns, out.rows
    logger.debug(f"matrix_transpose_inplace: now {out.shape}")
    return out


# Low-level type-specific functions

def _make_typed_transpose(kind: ElementKind):
    operation_name = f"matrix_transpose_{kind.value}"

    def typed_transpose(allocator, matrix, out):
        return _transpose(allocator, matrix, out, operation_name, kind)

    typed_transpose.__name__ = typed_transpose.__qualname__ = operation_name
    typed_transpose.__doc__ = f"matrix_transpose() for {kind.value} matrices, without dispatch."
    return typed_transpose


_TYPED_TRANSPOSES = []
for _kind in ElementKind:
    _function = _make_typed_transpose(_kind)
    globals()[_function.__name__] = _function
    _TYPED_TRANSPOSES.append(_function.__name__)


__all__ = [
    "matrix_transpose",
    "matrix_transpose_inplace",
] + _TYPED_TRANSPOSES
