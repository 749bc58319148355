"""
Test utilities for py-generic-matrix test suite.

Common functions for comparing engine matrices with numpy references and for
building error test cases.
"""

import numpy as np
from typing import Callable

from py_generic_matrix import (
    ElementKind, Matrix, IncompatibleSizeError, IncompatibleTypesError, InvalidSizeError,
    NullReferenceError, matrix_to_numpy, is_object_kind,
)

def assert_array_close(actual, expected, kind, tol_bits=6):
    """
    Assert that two arrays are close with appropriate tolerances for the kind.
    """
    assert actual.shape == expected.shape, f"Shapes do not match: {actual.shape} != {expected.shape}"
    assert actual.dtype == expected.dtype, f"Dtypes do not match: {actual.dtype} != {expected.dtype}"
    if np.issubdtype(actual.dtype, np.integer):
        # For integers, check exact equality
        success = np.array_equal(actual, expected)
        if not success:
            assert False, f"Integer arrays not exactly equal for kind {kind}:\n{actual}\n!=\n{expected}"
    else:
        if actual.dtype in (np.float32, np.complex64):
            significand_bits = 24
        elif actual.dtype in (np.float64, np.complex128):
            significand_bits = 53
        else:
            assert False, f"This should not be possible: {actual.dtype}"
        # For floats, check within tolerance
        rtol = 0.5**(significand_bits - tol_bits)
        success = np.allclose(actual, expected, rtol=rtol)
        if not success:
            assert False, f"Float arrays not close for kind {kind}:\n{actual}\n!=\n{expected}"

def assert_matrix_matches(matrix: Matrix, expected: np.ndarray, kind: ElementKind):
    """
    Assert that an engine matrix holds `expected`.
    """
    validate_basic_properties(matrix, expected.shape, kind)
    if is_object_kind(kind):
        assert matrix_to_numpy(matrix).tolist() == expected.tolist()
    else:
        assert_array_close(matrix_to_numpy(matrix), expected, kind)

def validate_basic_properties(result, expected_shape, expected_kind):
    """
    Validate basic properties of a result matrix.
    """
    assert isinstance(result, Matrix), f"Result should be a Matrix, got {type(result)}"
    assert result.is_live, "Result should be live"
    assert result.shape == tuple(expected_shape), f"Wrong shape: expected {expected_shape}, got {result.shape}"
    assert result.kind is expected_kind, f"Wrong kind: expected {expected_kind}, got {result.kind}"

def validate_function_error_cases(func: Callable, test_cases: list):
    """
    Test that a function properly raises errors for invalid inputs.

    Args:
        func: The function to test
        test_cases: List of (args, kwargs, expected_exception_type, description)
    """
    for args, kwargs, expected_exception, description in test_cases:
        try:
            func(*args, **kwargs)
        except expected_exception:
            continue
        except Exception as e:
            raise AssertionError(f"Expected {expected_exception.__name__} for {description}, got {type(e).__name__}: {e}")
        raise AssertionError(f"Expected {expected_exception.__name__} for {description}, but function succeeded")

def get_numpy_reference_elementwise(op, a, b):
    """NumPy reference for element-wise operations with scalar broadcasting."""
    if a.shape == (1, 1) and b.shape != (1, 1):
        a = a.reshape(1)[0]
    elif b.shape == (1, 1) and a.shape != (1, 1):
        b = b.reshape(1)[0]
    with np.errstate(all="ignore"):
        if op == "add":
            result = np.add(a, b)
        elif op == "sub":
            result = np.subtract(a, b)
        elif op in ("mult", "multew"):
            result = np.multiply(a, b)
        elif op == "divew":
            if np.issubdtype(np.asarray(a).dtype, np.integer):
                result = get_numpy_reference_truncating_division(a, b)
            else:
                result = np.divide(a, b)
        else:
            raise ValueError(f"Unknown operation: {op}")
    dtype = a.dtype if isinstance(a, np.ndarray) else b.dtype
    return np.asarray(result).astype(dtype)

def get_numpy_reference_truncating_division(a, b):
    """Integer division rounding toward zero, computed element by element with Python ints."""
    a, b = np.broadcast_arrays(np.asarray(a), np.asarray(b))
    dtype = a.dtype
    bits = dtype.itemsize * 8
    quotients = []
    for x, y in zip(a.ravel().tolist(), b.ravel().tolist()):
        q = abs(x) // abs(y)
        if (x < 0) != (y < 0):
            q = -q
        # Wrap to the dtype width (INT_MIN / -1)
        q %= 1 << bits
        if np.issubdtype(dtype, np.signedinteger) and q >= 1 << (bits - 1):
            q -= 1 << bits
        quotients.append(q)
    return np.array(quotients, dtype=dtype).reshape(a.shape)

def get_numpy_reference_matrix_product(a, b):
    """NumPy reference for matrix multiplication."""
    with np.errstate(all="ignore"):
        return np.matmul(a, b)

def get_numpy_reference_matrix_transpose(a):
    """NumPy reference for matrix transpose."""
    return a.T

class ErrorCaseBuilder:
    """Helper class to build error test cases systematically."""

    def __init__(self):
        self.cases = []

    def add_missing_operand(self, func_name: str, *args):
        """Add test case for a missing or empty operand."""
        self.cases.append((args, {}, NullReferenceError, f"{func_name} missing operand"))
        return self

    def add_kind_mismatch(self, func_name: str, *args):
        """Add test case for operands of different kinds."""
        self.cases.append((args, {}, IncompatibleTypesError, f"{func_name} kind mismatch"))
        return self

    def add_shape_error(self, func_name: str, *args):
        """Add test case for shapes that cannot be broadcast."""
        self.cases.append((args, {}, IncompatibleSizeError, f"{func_name} shape error"))
        return self

    def add_destination_error(self, func_name: str, *args):
        """Add test case for a pre-sized destination of the wrong shape or kind."""
        self.cases.append((args, {}, InvalidSizeError, f"{func_name} destination error"))
        return self

    def build(self):
        """Return the list of test cases."""
        return self.cases
