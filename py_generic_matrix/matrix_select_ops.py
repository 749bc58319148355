# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/matrix_select_ops.py

"""
Sub-matrix selection for py-generic-matrix

matrix_select(allocator, matrix, p, q, out) builds out[r][c] = matrix[p[r]][q[c]]
from a row index vector `p` and a column index vector `q`.
"""

import logging
from typing import List, Optional

import numpy as np

from .allocators import Allocator
from .element_kinds import ElementKind, INTEGER_KINDS
from .errors import ExpectedVectorError, IncompatibleTypesError, InvalidPermutationError
from .kernels import get_kernel
from .matrix import Matrix, _require_live
from .matrix_ops import _produce

logger = logging.getLogger(__name__)

# Kinds accepted for index vectors
INDEX_KINDS = INTEGER_KINDS + (ElementKind.BIGINT,)


def _selection_indices(vector: Optional[Matrix], bound: int, name: str, operation_name: str) -> List[int]:
    """Return the indices held by `vector`, or range(bound) when it is None."""
    if vector is None:
        return list(range(bound))

    _require_live(vector, name, operation_name)
    if vector.rows != 1 and vector.columns != 1:
        raise ExpectedVectorError(
            f"{operation_name}: {name} must be a row or column vector, got "
            f"{vector.rows}x{vector.columns}")
    if vector.kind not in INDEX_KINDS:
        raise IncompatibleTypesError(
            f"{operation_name}: {name} must hold integers, got {vector.kind.value}")

    indices = [int(value) for value in vector.data]
    for index in indices:
        if not 0 <= index < bound:
            raise InvalidPermutationError(
                f"{operation_name}: {name} index {index} out of range [0, {bound})")
    return indices


def matrix_select(allocator: Optional[Allocator], matrix: Matrix, p: Optional[Matrix],
                  q: Optional[Matrix], out: Matrix) -> Matrix:
    """Select rows `p` and columns `q` of `matrix` into `out`.

    Args:
        allocator: Allocator for the result, or None to write into a pre-sized `out`
        matrix: Input matrix
        p: Row index vector (1xn or nx1, integer kind), None for every row in order
        q: Column index vector, None for every column in order
        out: Destination matrix, len(p) x len(q)

    Returns:
        `out`

    Raises:
        ExpectedVectorError: If p or q is not a vector
        IncompatibleTypesError: If p or q does not hold integers
        InvalidPermutationError: If an index is out of range
    """
    operation_name = "matrix_select"
    _require_live(matrix, "matrix", operation_name)
    row_indices = _selection_indices(p, matrix.rows, "p", operation_name)
    column_indices = _selection_indices(q, matrix.columns, "q", operation_name)
    kernel = get_kernel(matrix.kind)

    index_map = (np.asarray(row_indices, dtype=np.intp)[:, None] * matrix.columns
                 + np.asarray(column_indices, dtype=np.intp)[None, :]).ravel()
    logger.debug(f"{operation_name}: {matrix.kind.value} {matrix.shape} -> "
                 f"({len(row_indices)}, {len(column_indices)})")

    def compute(dest: Matrix) -> None:
        kernel.gather(matrix, dest, index_map)

    return _produce(allocator, out, len(row_indices), len(column_indices), matrix.kind,
                    compute, (matrix, p, q), operation_name)


__all__ = ["INDEX_KINDS", "matrix_select"]
