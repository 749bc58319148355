#!/usr/bin/env python3
"""
Example: Generic Matrix Arithmetic

This example demonstrates the generic arithmetic entry points on fixed-width
kinds, scalar broadcasting, in-place forms and the typed low-level functions.
"""

import time

import numpy as np
import py_generic_matrix
from py_generic_matrix import (
    ElementKind, Matrix, default_allocator, matrix_add, matrix_destroy, matrix_divew,
    matrix_from_numpy, matrix_from_rows, matrix_mult, matrix_mult_inplace, matrix_print,
    matrix_to_numpy, matrix_transpose,
)

def basic_usage():
    """Basic usage example with f64 matrices."""
    print("=== Basic Usage: matrix_add / matrix_mult ===")

    allocator = default_allocator()
    a = matrix_from_rows(allocator, [[1, 2], [3, 4]], ElementKind.F64)
    b = matrix_from_rows(allocator, [[5, 6], [7, 8]], ElementKind.F64)

    total = matrix_add(allocator, a, b, Matrix())
    product = matrix_mult(allocator, a, b, Matrix())
    transposed = matrix_transpose(allocator, a, Matrix())

    print("A + B:")
    matrix_print(allocator, total)
    print("A * B:")
    matrix_print(allocator, product)
    print("A^T:")
    matrix_print(allocator, transposed)

    for matrix in (a, b, total, product, transposed):
        matrix_destroy(matrix)
    print()

def scalar_broadcasting():
    """A 1x1 operand acts as a scalar."""
    print("=== Scalar Broadcasting ===")

    allocator = default_allocator()
    a = matrix_from_rows(allocator, [[1, 2, 3], [4, 5, 6]], ElementKind.I32)
    two = matrix_from_rows(allocator, [[2]], ElementKind.I32)

    scaled = matrix_mult(allocator, a, two, Matrix())
    halved = matrix_divew(allocator, a, two, Matrix())

    print("A * [[2]]:")
    matrix_print(allocator, scaled)
    print("A / [[2]] (truncating):")
    matrix_print(allocator, halved)

    for matrix in (a, two, scaled, halved):
        matrix_destroy(matrix)
    print()

def different_kinds():
    """Example with different fixed-width kinds."""
    print("=== Different Element Kinds ===")

    allocator = default_allocator()
    kinds = [ElementKind.U8, ElementKind.I16, ElementKind.F32, ElementKind.CF64]

    for kind in kinds:
        print(f"Testing {kind}:")
        a = matrix_from_rows(allocator, [[200, 100], [50, 25]], kind)
        product = matrix_mult(allocator, a, a, Matrix())
        result = matrix_to_numpy(product)
        print(f"  dtype: {result.dtype}, result: {result.tolist()}")
        matrix_destroy(a)
        matrix_destroy(product)
    print()

def low_level_functions():
    """Example using low-level type-specific functions."""
    print("=== Low-Level Type-Specific Functions ===")

    allocator = default_allocator()
    a = matrix_from_numpy(allocator, np.random.randn(50, 30))
    b = matrix_from_numpy(allocator, np.random.randn(30, 70))

    # High-level function (automatic dispatch)
    result_high = matrix_mult(allocator, a, b, Matrix())

    # Low-level function (explicit kind)
    result_low = py_generic_matrix.matrix_mult_f64(allocator, a, b, Matrix())

    print(f"High-level result shape: {result_high.shape}")
    print(f"Low-level result shape: {result_low.shape}")
    print(f"Results match: {np.allclose(matrix_to_numpy(result_high), matrix_to_numpy(result_low))}")

    for matrix in (a, b, result_high, result_low):
        matrix_destroy(matrix)
    print()

def inplace_operations():
    """In-place product keeps the destination buffer."""
    print("=== In-Place Operations ===")

    allocator = default_allocator()
    sizes = [16, 64, 128]

    for size in sizes:
        out = matrix_from_numpy(allocator, np.random.randn(size, size))
        rotation = matrix_from_numpy(allocator, np.eye(size)[::-1].copy())
        buffer = out.buffer

        start_time = time.time()
        matrix_mult_inplace(rotation, out)
        elapsed = time.time() - start_time

        print(f"  {size}x{size}: {elapsed*1000:.2f}ms, same buffer: {out.buffer is buffer}")
        matrix_destroy(out)
        matrix_destroy(rotation)
    print()

def main():
    """Run all examples."""
    print("Generic Matrix Examples")
    print("=" * 50)

    try:
        basic_usage()
        scalar_broadcasting()
        different_kinds()
        low_level_functions()
        inplace_operations()

        print("✅ All examples completed successfully!")

    except Exception as e:
        print(f"❌ Error: {e}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
