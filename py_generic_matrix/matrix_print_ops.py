# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/matrix_print_ops.py

"""
Column-aligned text rendering of matrices.

Each row starts with a tab; every element is right-aligned to the widest
element of the matrix and followed by a space.
"""

import logging
import sys
from typing import Optional, TextIO

import numpy as np

from .allocators import Allocator
from .kernels import get_kernel
from .matrix import Matrix, _require_live

logger = logging.getLogger(__name__)


def matrix_format(matrix: Matrix, allocator: Optional[Allocator] = None) -> str:
    """Render `matrix` as text.

    The allocator, defaulting to the matrix's own, provides a transient
    scratch buffer holding one 32-bit rendered width per element. The buffer
    is always returned before this function exits.

    Raises:
        NullReferenceError: If the matrix is missing or empty
        OutOfMemoryError: If the scratch buffer cannot be allocated
    """
    _require_live(matrix, "matrix", "matrix_format")
    if allocator is None:
        allocator = matrix.allocator
    kernel = get_kernel(matrix.kind)

    scratch = allocator.allocate(matrix.size * np.dtype(np.uint32).itemsize)
    try:
        widths = scratch.view(np.uint32)
        texts = [kernel.format_element(element) for element in matrix.data]
        for i, text in enumerate(texts):
            widths[i] = len(text)
        max_width = int(widths.max())

        lines = []
        for r in range(matrix.rows):
            row = texts[r * matrix.columns:(r + 1) * matrix.columns]
            lines.append("\t" + "".join(f"{text:>{max_width}} " for text in row) + "\n")
    finally:
        allocator.release(scratch)
    return "".join(lines)


def matrix_print(allocator: Optional[Allocator], matrix: Matrix, file: Optional[TextIO] = None) -> None:
    """Write matrix_format(matrix) to `file` (standard output by default)."""
    text = matrix_format(matrix, allocator)
    print(text, end="", file=file if file is not None else sys.stdout)


__all__ = ["matrix_format", "matrix_print"]
