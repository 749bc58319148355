"""
Tests for matrix text rendering in py-generic-matrix.
"""

import io
from fractions import Fraction

import pytest
import sympy

from py_generic_matrix import (
    ElementKind, Matrix, NullReferenceError, OutOfMemoryError, RationalComplex, matrix_format,
    matrix_from_rows, matrix_init, matrix_print, matrix_set, tracking_allocator,
)


class TestMatrixFormat:
    """Test the column-aligned layout."""

    def test_integer_alignment(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[1, -20], [300, 4]], ElementKind.I32)
        assert matrix_format(matrix) == "\t  1 -20 \n\t300   4 \n"

    def test_unsigned(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[255, 0]], ElementKind.U8)
        assert matrix_format(matrix) == "\t255   0 \n"

    def test_float(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[1.5], [-0.25]], ElementKind.F64)
        assert matrix_format(matrix) == "\t 1.500000 \n\t-0.250000 \n"

    def test_complex(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[1 - 2j, 0.5j]], ElementKind.CF64)
        assert matrix_format(matrix) == "\t1.000000-2.000000i 0.000000+0.500000i \n"

    def test_bigint(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[2**70, 1]], ElementKind.BIGINT)
        text = matrix_format(matrix)
        assert text == "\t" + str(2**70) + " " + "1".rjust(len(str(2**70))) + " \n"

    def test_fraction(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[Fraction(1, 2), 3]], ElementKind.FRACTION)
        assert matrix_format(matrix) == "\t1/2 3/1 \n"

    def test_exact_complex(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[RationalComplex(Fraction(1, 2), -1)]], ElementKind.COMPLEX)
        assert matrix_format(matrix) == "\t1/2-1i \n"

    def test_expression(self, allocator, make_matrix):
        x = sympy.Symbol("x")
        matrix = make_matrix(allocator, [[x + 1, 2]], ElementKind.EXPRESSION)
        assert matrix_format(matrix) == "\tx + 1     2 \n"

    def test_nested(self, allocator):
        outer = matrix_init(allocator, 1, 2, ElementKind.MATRIX)
        matrix_set(matrix_init(allocator, 2, 2, ElementKind.F64), 0, 0, outer)
        assert matrix_format(outer) == "\t[2x2 f64]     [0x0] \n"

    def test_missing_matrix(self):
        with pytest.raises(NullReferenceError):
            matrix_format(Matrix())


class TestScratchBuffer:
    """Test the transient width buffer."""

    def test_scratch_is_released(self, tracker):
        matrix = matrix_from_rows(tracker, [[1, 2, 3], [4, 5, 6]], ElementKind.I64)
        context = tracker.context
        matrix_format(matrix)
        assert context.alloc_count == 2
        assert context.free_count == 1
        assert context.live_buffers == 1
        assert context.peak_bytes == 48 + 6 * 4

    def test_explicit_allocator(self, allocator, make_matrix):
        scratch = tracking_allocator()
        matrix = make_matrix(allocator, [[1.0]], ElementKind.F32)
        matrix_format(matrix, scratch)
        assert scratch.context.alloc_count == 1
        assert scratch.context.live_buffers == 0

    def test_scratch_allocation_failure(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[1]], ElementKind.I8)
        with pytest.raises(OutOfMemoryError):
            matrix_format(matrix, tracking_allocator(fail_after=0))


class TestMatrixPrint:
    """Test printing to a stream."""

    def test_print_to_file(self, allocator, make_matrix):
        matrix = make_matrix(allocator, [[1, 2]], ElementKind.I16)
        stream = io.StringIO()
        matrix_print(None, matrix, stream)
        assert stream.getvalue() == "\t1 2 \n"

    def test_print_to_stdout(self, allocator, make_matrix, capsys):
        matrix = make_matrix(allocator, [[1, 2], [3, 4]], ElementKind.F64)
        matrix_print(allocator, matrix)
        captured = capsys.readouterr()
        assert captured.out == "\t1.000000 2.000000 \n\t3.000000 4.000000 \n"
