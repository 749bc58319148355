# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/broadcasting.py

"""
Shape resolution shared by every element kind

Binary operations accept operands of equal shape, or one 1x1 operand that acts
as a scalar against the other. The matrix product additionally accepts
left.columns == right.rows. Resolution happens before anything is written.
"""

from dataclasses import dataclass

from .errors import IncompatibleSizeError

ELEMENTWISE = "elementwise"
SCALAR_LEFT = "scalar_left"
SCALAR_RIGHT = "scalar_right"
PRODUCT = "product"


@dataclass(frozen=True)
class BroadcastPlan:
    """Output shape and evaluation mode of one binary operation."""

    rows: int
    columns: int
    mode: str

    @property
    def shape(self):
        return (self.rows, self.columns)

    @property
    def is_scalar(self) -> bool:
        return self.mode in (SCALAR_LEFT, SCALAR_RIGHT)


def _is_scalar(matrix) -> bool:
    return matrix.rows == 1 and matrix.columns == 1


def _incompatible(left, right, operation_name: str) -> IncompatibleSizeError:
    return IncompatibleSizeError(
        f"{operation_name}: Incompatible shapes ({left.rows}, {left.columns}) "
        f"and ({right.rows}, {right.columns})")


def resolve_elementwise(left, right, operation_name: str = "elementwise") -> BroadcastPlan:
    """Resolve an element-wise operation `left op right`.

    Args:
        left: Left operand
        right: Right operand
        operation_name: Name used in error messages

    Returns:
        BroadcastPlan with the output shape

    Raises:
        IncompatibleSizeError: If shapes differ and neither operand is 1x1
    """
    if left.shape == right.shape:
        return BroadcastPlan(left.rows, left.columns, ELEMENTWISE)
    if _is_scalar(left):
        return BroadcastPlan(right.rows, right.columns, SCALAR_LEFT)
    if _is_scalar(right):
        return BroadcastPlan(left.rows, left.columns, SCALAR_RIGHT)
    raise _incompatible(left, right, operation_name)


def resolve_product(left, right, operation_name: str = "product") -> BroadcastPlan:
    """Resolve the matrix product `left * right`.

    A conformant pair yields a left.rows x right.columns product; otherwise a
    1x1 operand on either side turns the product into a scalar multiply.
    """
    if left.columns == right.rows:
        return BroadcastPlan(left.rows, right.columns, PRODUCT)
    if _is_scalar(left):
        return BroadcastPlan(right.rows, right.columns, SCALAR_LEFT)
    if _is_scalar(right):
        return BroadcastPlan(left.rows, left.columns, SCALAR_RIGHT)
    raise _incompatible(left, right, operation_name)


def resolve_inplace(right, out, operation_name: str = "inplace") -> BroadcastPlan:
    """Resolve `out op= right`: `right` has the shape of `out` or is 1x1."""
    if right.shape == out.shape:
        return BroadcastPlan(out.rows, out.columns, ELEMENTWISE)
    if _is_scalar(right):
        return BroadcastPlan(out.rows, out.columns, SCALAR_RIGHT)
    raise _incompatible(out, right, operation_name)


def resolve_mult_inplace(right, out, operation_name: str = "mult_inplace") -> BroadcastPlan:
    """Resolve `out *= right`: a 1x1 `right` scales, otherwise `right` must be
    square with out.columns == right.rows so the shape of `out` is kept."""
    if _is_scalar(right):
        return BroadcastPlan(out.rows, out.columns, SCALAR_RIGHT)
    if right.rows == right.columns and out.columns == right.rows:
        return BroadcastPlan(out.rows, out.columns, PRODUCT)
    raise _incompatible(out, right, operation_name)


def apply_binary(kernel, op: str, plan: BroadcastPlan, left, right, out) -> None:
    """Evaluate `left op right` into `out` following `plan`.

    `out` must already have the plan's shape. 1x1 operands broadcast through
    their single element.
    """
    if plan.mode == PRODUCT:
        kernel.product(left, right, out)
    else:
        kernel.elementwise(op, left.data, right.data, out)


__all__ = [
    "ELEMENTWISE",
    "SCALAR_LEFT",
    "SCALAR_RIGHT",
    "PRODUCT",
    "BroadcastPlan",
    "resolve_elementwise",
    "resolve_product",
    "resolve_inplace",
    "resolve_mult_inplace",
    "apply_binary",
]
