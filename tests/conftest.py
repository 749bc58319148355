"""
Pytest configuration and fixtures for py-generic-matrix test suite.

This module provides common fixtures, test data, and configuration
for testing the matrix engine across every element kind.
"""

import pytest
import numpy as np
import sys
import os

# Add the package to the path for testing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from py_generic_matrix import (
    ElementKind, default_allocator, arena_allocator, tracking_allocator,
    matrix_from_rows, matrix_from_numpy, matrix_destroy,
    INTEGER_KINDS, FLOAT_KINDS, COMPLEX_KINDS, NUMERIC_KINDS,
)

# All numeric kinds and their numpy dtypes
NUMERIC_DTYPES = {
    ElementKind.U8: np.uint8,
    ElementKind.U16: np.uint16,
    ElementKind.U32: np.uint32,
    ElementKind.U64: np.uint64,
    ElementKind.I8: np.int8,
    ElementKind.I16: np.int16,
    ElementKind.I32: np.int32,
    ElementKind.I64: np.int64,
    ElementKind.F32: np.float32,
    ElementKind.F64: np.float64,
    ElementKind.CF32: np.complex64,
    ElementKind.CF64: np.complex128,
}

ALL_NUMERIC_KINDS = list(NUMERIC_KINDS)
INT_KINDS = list(INTEGER_KINDS)
REAL_KINDS = list(INTEGER_KINDS + FLOAT_KINDS)
INEXACT_KINDS = list(FLOAT_KINDS + COMPLEX_KINDS)

# Exact object-backed kinds with plain numeric values
EXACT_KINDS = [ElementKind.BIGINT, ElementKind.FRACTION, ElementKind.COMPLEX, ElementKind.EXPRESSION]

# Shapes exercised by the element-wise and product tests
TEST_SHAPES = [(1, 1), (1, 5), (4, 1), (3, 3), (5, 7)]
TEST_M_K_N = [(1, 1, 1), (2, 3, 4), (4, 4, 4), (5, 2, 3), (1, 6, 1)]


def kind_id(kind):
    return kind.value


@pytest.fixture(params=ALL_NUMERIC_KINDS, ids=kind_id)
def kind_numeric(request):
    """Fixture providing every fixed-width kind."""
    return request.param

@pytest.fixture(params=INT_KINDS, ids=kind_id)
def kind_int(request):
    """Fixture providing integer kinds."""
    return request.param

@pytest.fixture(params=INEXACT_KINDS, ids=kind_id)
def kind_inexact(request):
    """Fixture providing floating and complex kinds."""
    return request.param

@pytest.fixture(params=EXACT_KINDS, ids=kind_id)
def kind_exact(request):
    """Fixture providing object-backed scalar kinds."""
    return request.param

@pytest.fixture(params=TEST_SHAPES, ids=lambda s: f"{s[0]}x{s[1]}")
def test_shape(request):
    """Fixture providing matrix shapes."""
    return request.param

@pytest.fixture(params=TEST_M_K_N, ids=lambda t: "x".join(map(str, t)))
def test_shape_triplet(request):
    """Fixture that provides each (m, k, n) product shape."""
    return request.param


@pytest.fixture
def allocator():
    """System allocator."""
    return default_allocator()

@pytest.fixture
def tracker():
    """Tracking allocator over the system allocator."""
    return tracking_allocator()

@pytest.fixture
def arena():
    """Arena allocator large enough for every test matrix."""
    return arena_allocator(1 << 16)


@pytest.fixture
def test_input_matrix_incremental():
    """Generate incremental numpy matrix"""
    def _generate(kind, nrows, ncols, start=1):
        mat = np.arange(start, start + nrows * ncols)
        return mat.astype(NUMERIC_DTYPES[kind]).reshape(nrows, ncols)
    return _generate

@pytest.fixture
def test_input_matrix_random():
    """Generate random numpy matrix"""
    def _generate(kind, nrows, ncols, low=1, high=50):
        generator = np.random.default_rng(42)
        dtype = NUMERIC_DTYPES[kind]
        if np.issubdtype(dtype, np.integer):
            return generator.integers(low, high, (nrows, ncols)).astype(dtype)
        values = generator.uniform(low=low, high=high, size=(nrows, ncols))
        if np.issubdtype(dtype, np.complexfloating):
            values = values + 1j * generator.uniform(low=low, high=high, size=(nrows, ncols))
        return values.astype(dtype)
    return _generate

@pytest.fixture
def make_matrix():
    """Build engine matrices, destroying them at teardown."""
    created = []

    def _make(allocator, rows_or_array, kind=None):
        if isinstance(rows_or_array, np.ndarray):
            matrix = matrix_from_numpy(allocator, rows_or_array, kind)
        else:
            matrix = matrix_from_rows(allocator, rows_or_array, kind)
        created.append(matrix)
        return matrix

    yield _make
    for matrix in created:
        matrix_destroy(matrix)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "error_handling: marks error taxonomy tests"
    )
    config.addinivalue_line(
        "markers", "matrix_ops: marks matrix operation tests"
    )
    config.addinivalue_line(
        "markers", "allocators: marks allocator tests"
    )
    config.addinivalue_line(
        "markers", "object_kinds: marks object-backed kind tests"
    )

def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark integration tests
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)

        if "error_handling" in item.nodeid:
            item.add_marker(pytest.mark.error_handling)

        if any(name in item.nodeid for name in ("test_matrix_ops", "test_broadcasting", "test_transpose_select")):
            item.add_marker(pytest.mark.matrix_ops)

        if "test_allocators" in item.nodeid:
            item.add_marker(pytest.mark.allocators)

        if "test_object_kinds" in item.nodeid:
            item.add_marker(pytest.mark.object_kinds)

        # Mark large parameter tests as slow
        if hasattr(item, 'callspec') and item.callspec:
            params = item.callspec.params
            if "test_shape_triplet" in params and "kind_numeric" in params:
                item.add_marker(pytest.mark.slow)
