# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/matrix_ops.py

"""
Matrix operations module for py-generic-matrix

This module provides the generic arithmetic entry points (add, sub, mult,
multew, divew and their in-place forms), dispatching at runtime to the kernel
of the operands' element kind. Typed entry points such as matrix_add_f64 check
that every operand has that kind and go straight to its kernel.

Copy-producing forms take (allocator, left, right, out) and return `out`:
  - with an allocator, the result is computed into a fresh matrix which `out`
    then adopts, releasing its previous storage;
  - without one, `out` must already have the output shape and kind and is
    written directly. When `out` is also an operand the result goes through a
    scratch matrix first.
In-place forms take (right, out) and compute `out = out op right`.
"""

import logging
from typing import Callable, Optional

from .allocators import Allocator
from .broadcasting import (
    PRODUCT, apply_binary, resolve_elementwise, resolve_inplace,
    resolve_mult_inplace, resolve_product,
)
from .element_kinds import ElementKind
from .errors import IncompatibleTypesError, InvalidSizeError, NullReferenceError
from .kernels import ELEMENTWISE_OPS, get_kernel
from .matrix import (
    Matrix, _allocate, _move_elements, _replace, _require_live, matrix_destroy,
)

logger = logging.getLogger(__name__)


def _validate_matrix_inputs(left: Optional[Matrix], right: Optional[Matrix], operation_name: str,
                            kind: Optional[ElementKind] = None, names=("left", "right")) -> None:
    """Validate operands of a binary operation."""
    _require_live(left, names[0], operation_name)
    _require_live(right, names[1], operation_name)

    if left.kind is not right.kind:
        raise IncompatibleTypesError(
            f"{operation_name}: Operands must have the same kind, got "
            f"{left.kind.value} and {right.kind.value}")

    if kind is not None and left.kind is not kind:
        raise IncompatibleTypesError(
            f"{operation_name}: Expected {kind.value} operands, got {left.kind.value}")


def _produce(allocator: Optional[Allocator], out: Optional[Matrix], rows: int, columns: int,
             kind: ElementKind, compute: Callable[[Matrix], None], operands, operation_name: str) -> Matrix:
    """Run `compute(dest)` into the destination following the copy-producing protocol."""
    if out is None:
        raise NullReferenceError(f"{operation_name}: out is missing")

    if allocator is not None:
        fresh = _allocate(allocator, rows, columns, kind, False, operation_name)
        try:
            compute(fresh)
        except Exception:
            matrix_destroy(fresh)
            raise
        logger.debug(f"{operation_name}: result adopted by destination")
        return _replace(out, fresh)

    _require_live(out, "out", operation_name)
    if out.shape != (rows, columns) or out.kind is not kind:
        raise InvalidSizeError(
            f"{operation_name}: Destination is {out.rows}x{out.columns} "
            f"{out.kind.value}, expected {rows}x{columns} {kind.value}")

    if any(out is operand for operand in operands):
        scratch = _allocate(out.allocator, rows, columns, kind, False, operation_name)
        try:
            compute(scratch)
        except Exception:
            matrix_destroy(scratch)
            raise
        _move_elements(scratch, out)
        logger.debug(f"{operation_name}: aliased destination written back from scratch")
        return out

    compute(out)
    return out


def _binary_operation(allocator: Optional[Allocator], left: Optional[Matrix], right: Optional[Matrix],
                      out: Optional[Matrix], op: str, operation_name: str,
                      kind: Optional[ElementKind] = None) -> Matrix:
    _validate_matrix_inputs(left, right, operation_name, kind)
    kernel = get_kernel(left.kind)
    if op == "mult":
        plan = resolve_product(left, right, operation_name)
    else:
        plan = resolve_elementwise(left, right, operation_name)
    logger.debug(f"{operation_name}: {left.kind.value} {left.shape} x {right.shape} -> "
                 f"{plan.shape} ({plan.mode})")

    def compute(dest: Matrix) -> None:
        apply_binary(kernel, op, plan, left, right, dest)

    return _produce(allocator, out, plan.rows, plan.columns, left.kind, compute,
                    (left, right), operation_name)


def _inplace_operation(right: Optional[Matrix], out: Optional[Matrix], op: str, operation_name: str,
                       kind: Optional[ElementKind] = None) -> Matrix:
    _validate_matrix_inputs(out, right, operation_name, kind, names=("out", "right"))
    kernel = get_kernel(out.kind)
    if op == "mult":
        plan = resolve_mult_inplace(right, out, operation_name)
    else:
        plan = resolve_inplace(right, out, operation_name)
    logger.debug(f"{operation_name}: {out.kind.value} {out.shape} <- {right.shape} ({plan.mode})")

    if plan.mode == PRODUCT:
        kernel.product_inplace(right, out)
    else:
        kernel.elementwise(op, out.data, right.data, out)
    return out


# Generic entry points

def matrix_add(allocator: Optional[Allocator], left: Matrix, right: Matrix, out: Matrix) -> Matrix:
    """Element-wise sum `left + right` with scalar broadcasting.

    Args:
        allocator: Allocator for the result, or None to write into a pre-sized `out`
        left: Left operand
        right: Right operand
        out: Destination matrix, may be empty when an allocator is given

    Returns:
        `out`

    Raises:
        NullReferenceError: If an operand is missing or empty
        IncompatibleTypesError: If the operands have different kinds
        IncompatibleSizeError: If the shapes cannot be broadcast
        InvalidSizeError: If `out` has the wrong shape or kind and no allocator is given
        OutOfMemoryError: If the allocator fails
    """
    return _binary_operation(allocator, left, right, out, "add", "matrix_add")


def matrix_sub(allocator: Optional[Allocator], left: Matrix, right: Matrix, out: Matrix) -> Matrix:
    """Element-wise difference `left - right`, operand order preserved under broadcasting."""
    return _binary_operation(allocator, left, right, out, "sub", "matrix_sub")


def matrix_mult(allocator: Optional[Allocator], left: Matrix, right: Matrix, out: Matrix) -> Matrix:
    """Matrix product `left * right`.

    Requires left.columns == right.rows and produces a left.rows x
    right.columns matrix. A 1x1 operand on either side scales the other.
    """
    return _binary_operation(allocator, left, right, out, "mult", "matrix_mult")


def matrix_multew(allocator: Optional[Allocator], left: Matrix, right: Matrix, out: Matrix) -> Matrix:
    """Element-wise (Hadamard) product."""
    return _binary_operation(allocator, left, right, out, "multew", "matrix_multew")


def matrix_divew(allocator: Optional[Allocator], left: Matrix, right: Matrix, out: Matrix) -> Matrix:
    """Element-wise quotient `left / right`.

    Integer kinds truncate toward zero and raise DivisionByZeroError on a zero
    divisor; floating kinds follow IEEE semantics.
    """
    return _binary_operation(allocator, left, right, out, "divew", "matrix_divew")


def matrix_add_inplace(right: Matrix, out: Matrix) -> Matrix:
    """`out += right`, where `right` has the shape of `out` or is 1x1."""
    return _inplace_operation(right, out, "add", "matrix_add_inplace")


def matrix_sub_inplace(right: Matrix, out: Matrix) -> Matrix:
    return _inplace_operation(right, out, "sub", "matrix_sub_inplace")


def matrix_mult_inplace(right: Matrix, out: Matrix) -> Matrix:
    """`out = out * right`.

    A 1x1 `right` scales `out`; otherwise `right` must be square with
    out.columns == right.rows, so `out` keeps its shape and its buffer.
    """
    return _inplace_operation(right, out, "mult", "matrix_mult_inplace")


def matrix_multew_inplace(right: Matrix, out: Matrix) -> Matrix:
    return _inplace_operation(right, out, "multew", "matrix_multew_inplace")


def matrix_divew_inplace(right: Matrix, out: Matrix) -> Matrix:
    return _inplace_operation(right, out, "divew", "matrix_divew_inplace")


# Low-level type-specific functions

def _make_typed_operation(op: str, kind: ElementKind):
    operation_name = f"matrix_{op}_{kind.value}"

    def typed_operation(allocator, left, right, out):
        return _binary_operation(allocator, left, right, out, op, operation_name, kind)

    typed_operation.__name__ = typed_operation.__qualname__ = operation_name
    typed_operation.__doc__ = f"matrix_{op}() for {kind.value} operands, without dispatch."
    return typed_operation


def _make_typed_inplace_operation(op: str, kind: ElementKind):
    operation_name = f"matrix_{op}_inplace_{kind.value}"

    def typed_operation(right, out):
        return _inplace_operation(right, out, op, operation_name, kind)

    typed_operation.__name__ = typed_operation.__qualname__ = operation_name
    typed_operation.__doc__ = f"matrix_{op}_inplace() for {kind.value} operands, without dispatch."
    return typed_operation


_TYPED_OPERATIONS = []
for _op in ELEMENTWISE_OPS:
    for _kind in ElementKind:
        for _factory in (_make_typed_operation, _make_typed_inplace_operation):
            _function = _factory(_op, _kind)
            globals()[_function.__name__] = _function
            _TYPED_OPERATIONS.append(_function.__name__)


__all__ = [
    "matrix_add",
    "matrix_sub",
    "matrix_mult",
    "matrix_multew",
    "matrix_divew",
    "matrix_add_inplace",
    "matrix_sub_inplace",
    "matrix_mult_inplace",
    "matrix_multew_inplace",
    "matrix_divew_inplace",
] + _TYPED_OPERATIONS
