#!/usr/bin/env python3
"""
Example: Exact, Symbolic and Nested Element Kinds

This example demonstrates the object-backed kinds: arbitrary-precision
integers, exact rationals, exact complex numbers, sympy expressions and
matrices of matrices.
"""

from fractions import Fraction

import sympy
from py_generic_matrix import (
    ElementKind, Matrix, RationalComplex, default_allocator, matrix_add, matrix_destroy,
    matrix_divew, matrix_from_rows, matrix_get, matrix_init, matrix_mult, matrix_mult_inplace,
    matrix_print, matrix_set, matrix_to_rows,
)

def bigint_powers():
    """Fibonacci numbers from powers of [[1, 1], [1, 0]]."""
    print("=== Arbitrary-Precision Integers ===")

    allocator = default_allocator()
    step = matrix_from_rows(allocator, [[1, 1], [1, 0]], ElementKind.BIGINT)
    power = matrix_from_rows(allocator, [[1, 1], [1, 0]], ElementKind.BIGINT)

    for _ in range(199):
        matrix_mult_inplace(step, power)

    print(f"F(200) = {matrix_get(0, 1, power)}")
    matrix_destroy(step)
    matrix_destroy(power)
    print()

def exact_rationals():
    """Hilbert matrix arithmetic without rounding."""
    print("=== Exact Rationals ===")

    allocator = default_allocator()
    n = 3
    hilbert = matrix_from_rows(allocator, [[Fraction(1, i + j + 1) for j in range(n)] for i in range(n)],
                               ElementKind.FRACTION)
    three = matrix_from_rows(allocator, [[3]], ElementKind.FRACTION)

    print("H:")
    matrix_print(allocator, hilbert)
    square = matrix_mult(allocator, hilbert, hilbert, Matrix())
    print("H * H:")
    matrix_print(allocator, square)
    scaled = matrix_divew(allocator, hilbert, three, Matrix())
    print("H / 3:")
    matrix_print(allocator, scaled)

    for matrix in (hilbert, three, square, scaled):
        matrix_destroy(matrix)
    print()

def exact_complex():
    """Gaussian rationals."""
    print("=== Exact Complex Numbers ===")

    allocator = default_allocator()
    a = matrix_from_rows(allocator, [[(1, 2), (0, 1)]], ElementKind.COMPLEX)
    b = matrix_from_rows(allocator, [[RationalComplex(3, -1)]], ElementKind.COMPLEX)

    quotient = matrix_divew(allocator, a, b, Matrix())
    print("[1+2i, i] / (3-i):")
    matrix_print(allocator, quotient)

    for matrix in (a, b, quotient):
        matrix_destroy(matrix)
    print()

def symbolic_expressions():
    """Symbolic entries; results are left unsimplified."""
    print("=== Symbolic Expressions ===")

    allocator = default_allocator()
    x, y = sympy.symbols("x y")
    rotation = matrix_from_rows(allocator, [[x, -y], [y, x]], ElementKind.EXPRESSION)
    square = matrix_mult(allocator, rotation, rotation, Matrix())

    print("R * R:")
    matrix_print(allocator, square)
    print(f"Expanded (0, 0): {sympy.expand(matrix_to_rows(square)[0][0])}")

    matrix_destroy(rotation)
    matrix_destroy(square)
    print()

def nested_matrices():
    """Block matrices as matrices of matrices."""
    print("=== Nested Matrices ===")

    allocator = default_allocator()
    blocks = matrix_init(allocator, 2, 2, ElementKind.MATRIX)
    for r in range(2):
        for c in range(2):
            block = matrix_from_rows(allocator, [[r + c, 1], [0, r * c]], ElementKind.I64)
            matrix_set(block, r, c, blocks)

    total = matrix_add(allocator, blocks, blocks, Matrix())
    product = matrix_mult(allocator, blocks, blocks, Matrix())

    print("Blocks of B + B:")
    matrix_print(allocator, total)
    print("Block (1, 1) of B * B:")
    matrix_print(allocator, matrix_get(1, 1, product))

    # Destroy releases every block
    for matrix in (blocks, total, product):
        matrix_destroy(matrix)
    print()

def main():
    """Run all examples."""
    print("Exact and Nested Kind Examples")
    print("=" * 50)

    try:
        bigint_powers()
        exact_rationals()
        exact_complex()
        symbolic_expressions()
        nested_matrices()

        print("✅ All examples completed successfully!")

    except Exception as e:
        print(f"❌ Error: {e}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
