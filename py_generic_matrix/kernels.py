# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/kernels.py

"""
Per-kind kernels for py-generic-matrix

One kernel object exists for every ElementKind. A kernel knows how to coerce
values into its element representation, how to fill and release element
storage, and how to combine elements: element-wise arithmetic, the matrix
product, gathers used by transpose/select/copy, formatting and comparison.

Fixed-width kinds operate on the typed numpy views with ufuncs. Object-backed
kinds loop element by element and call the value type's own arithmetic; nested
matrices call back into the engine with the destination's allocator.
"""

import numbers
import operator
from fractions import Fraction
from typing import Any, Callable, Dict

import numpy as np
import sympy

from .element_kinds import (
    ElementKind, COMPLEX_KINDS, FLOAT_KINDS, INTEGER_KINDS, SIGNED_KINDS,
    kind_dtype,
)
from .errors import DivisionByZeroError, IncompatibleTypesError, InvalidEnumMemberError
from .rational_complex import RationalComplex

PRINT_DECIMALS = 6

# Element-wise operation names understood by every kernel. `mult` is the
# scalar-product form used by matrix_mult, `multew` the element-wise product.
ELEMENTWISE_OPS = ("add", "sub", "mult", "multew", "divew")


def _pick(values, i):
    # Operands of length one broadcast against the destination
    return values[0] if len(values) == 1 else values[i]


class ElementKernel:
    """Behaviour shared by every kernel."""

    kind: ElementKind

    def __init__(self, kind: ElementKind):
        self.kind = kind
        self.dtype = kind_dtype(kind)

    def __repr__(self):
        return f"{type(self).__name__}({self.kind.value})"

    def zero(self):
        raise NotImplementedError

    def one(self):
        raise NotImplementedError

    def coerce(self, value):
        raise NotImplementedError

    def fill(self, data: np.ndarray) -> None:
        """Write this kind's zero into every slot of `data`."""
        data[:] = self.zero()

    def set_identity(self, data: np.ndarray, rows: int, columns: int) -> None:
        """Write this kind's one on the main diagonal."""
        one = self.one()
        for i in range(min(rows, columns)):
            data[i * columns + i] = one

    def release(self, element) -> None:
        """Release storage owned by one element."""

    def gather(self, source, dest, index_map: np.ndarray) -> None:
        """Copy `source.data[index_map[i]]` into slot `i` of `dest`."""
        dest.data[:] = source.data[index_map]

    def elementwise(self, op: str, left: np.ndarray, right: np.ndarray, out) -> None:
        raise NotImplementedError

    def product(self, left, right, out) -> None:
        raise NotImplementedError

    def product_inplace(self, right, out) -> None:
        """`out = out * right` without a second buffer from out's allocator."""
        raise NotImplementedError

    def format_element(self, element) -> str:
        return str(element)

    def equal(self, left: np.ndarray, right: np.ndarray) -> bool:
        return bool(np.array_equal(left, right))


class NumericKernel(ElementKernel):
    """Kernel for fixed-width kinds backed by numpy dtypes."""

    def zero(self):
        return self.dtype.type(0)

    def one(self):
        return self.dtype.type(1)

    def coerce(self, value):
        if self.kind in INTEGER_KINDS:
            return self._coerce_integer(value)
        if isinstance(value, RationalComplex):
            value = complex(value)
        if self.kind in FLOAT_KINDS:
            if isinstance(value, numbers.Real):
                return self.dtype.type(float(value))
        elif isinstance(value, numbers.Complex):
            return self.dtype.type(complex(value))
        raise IncompatibleTypesError(
            f"{self.kind.value}: Cannot store {type(value).__name__} value {value!r}")

    def _coerce_integer(self, value):
        if isinstance(value, numbers.Integral):
            integer = int(value)
        elif isinstance(value, numbers.Real) and np.isfinite(float(value)):
            integer = int(value)
        else:
            raise IncompatibleTypesError(
                f"{self.kind.value}: Cannot store {type(value).__name__} value {value!r}")
        # Two's-complement wrap-around
        bits = self.dtype.itemsize * 8
        integer %= 1 << bits
        if self.kind in SIGNED_KINDS and integer >= 1 << (bits - 1):
            integer -= 1 << bits
        return self.dtype.type(integer)

    def elementwise(self, op, left, right, out):
        target = out.data
        with np.errstate(all="ignore"):
            if op == "add":
                np.add(left, right, out=target)
            elif op == "sub":
                np.subtract(left, right, out=target)
            elif op in ("mult", "multew"):
                np.multiply(left, right, out=target)
            elif op == "divew":
                self._divide(left, right, target)
            else:
                raise InvalidEnumMemberError(f"{self.kind.value}: Unknown operation '{op}'")

    def _divide(self, left, right, target):
        if self.kind not in INTEGER_KINDS:
            np.divide(left, right, out=target)
            return

        if np.any(right == 0):
            raise DivisionByZeroError(f"{self.kind.value}: Integer division by zero")
        # Truncate toward zero
        quotient = np.floor_divide(left, right)
        remainder = np.remainder(left, right)
        adjust = (remainder != 0) & ((left < 0) != (right < 0))
        np.add(quotient, adjust.astype(self.dtype), out=target)

    def product(self, left, right, out):
        a = left.data.reshape(left.rows, left.columns)
        b = right.data.reshape(right.rows, right.columns)
        with np.errstate(all="ignore"):
            np.matmul(a, b, out=out.data.reshape(out.rows, out.columns))

    def product_inplace(self, right, out):
        a = out.data.reshape(out.rows, out.columns)
        b = right.data.reshape(right.rows, right.columns)
        with np.errstate(all="ignore"):
            np.copyto(a, np.matmul(a, b))

    def format_element(self, element):
        if self.kind in INTEGER_KINDS:
            return "%d" % int(element)
        if self.kind in COMPLEX_KINDS:
            real = float(element.real)
            imag = float(element.imag)
            sign = "-" if imag < 0 else "+"
            return f"{real:0.{PRINT_DECIMALS}f}{sign}{abs(imag):0.{PRINT_DECIMALS}f}i"
        return f"{float(element):0.{PRINT_DECIMALS}f}"


class ObjectKernel(ElementKernel):
    """Kernel for kinds whose elements are Python objects.

    Subclasses provide the value arithmetic in `_OPS`. The element loop stops
    at the first failure and lets it propagate.
    """

    def _ops(self) -> Dict[str, Callable[[Any, Any], Any]]:
        return {
            "add": operator.add,
            "sub": operator.sub,
            "mult": operator.mul,
            "multew": operator.mul,
            "divew": self._divide,
        }

    def _divide(self, a, b):
        try:
            return a / b
        except ZeroDivisionError as e:
            raise DivisionByZeroError(f"{self.kind.value}: Division by zero") from e

    def fill(self, data):
        for i in range(len(data)):
            data[i] = self.zero()

    def elementwise(self, op, left, right, out):
        ops = self._ops()
        if op not in ops:
            raise InvalidEnumMemberError(f"{self.kind.value}: Unknown operation '{op}'")
        func = ops[op]
        target = out.data
        for i in range(len(target)):
            target[i] = func(_pick(left, i), _pick(right, i))

    def product(self, left, right, out):
        add = operator.add
        mul = operator.mul
        for r in range(out.rows):
            for c in range(out.columns):
                acc = self.zero()
                for k in range(left.columns):
                    acc = add(acc, mul(left.data[r * left.columns + k],
                                       right.data[k * right.columns + c]))
                out.data[r * out.columns + c] = acc

    def product_inplace(self, right, out):
        # `right` may be `out` itself, so nothing is written until every value exists
        columns = out.columns
        values = []
        for r in range(out.rows):
            for c in range(columns):
                acc = self.zero()
                for k in range(columns):
                    acc = acc + out.data[r * columns + k] * right.data[k * right.columns + c]
                values.append(acc)
        for i, value in enumerate(values):
            out.data[i] = value

    def equal(self, left, right):
        if len(left) != len(right):
            return False
        return all(a == b for a, b in zip(left, right))


class BigIntKernel(ObjectKernel):
    """Arbitrary-precision integers (Python int)."""

    def zero(self):
        return 0

    def one(self):
        return 1

    def coerce(self, value):
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError as e:
                raise IncompatibleTypesError(f"bigint: Cannot parse {value!r}") from e
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, numbers.Rational) and value.denominator == 1:
            return int(value.numerator)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise IncompatibleTypesError(f"bigint: Cannot store {type(value).__name__} value {value!r}")

    def _divide(self, a, b):
        if b == 0:
            raise DivisionByZeroError("bigint: Division by zero")
        quotient = abs(a) // abs(b)
        return quotient if (a < 0) == (b < 0) else -quotient

    def format_element(self, element):
        return "%d" % element


class FractionKernel(ObjectKernel):
    """Exact rationals (fractions.Fraction)."""

    def zero(self):
        return Fraction(0)

    def one(self):
        return Fraction(1)

    def coerce(self, value):
        if isinstance(value, RationalComplex):
            if value.imag != 0:
                raise IncompatibleTypesError(f"fraction: Cannot store complex value {value}")
            return value.real
        if isinstance(value, (numbers.Rational, str)):
            try:
                return Fraction(value)
            except (ValueError, ZeroDivisionError) as e:
                raise IncompatibleTypesError(f"fraction: Cannot parse {value!r}") from e
        if isinstance(value, numbers.Real):
            value = float(value)
            if not np.isfinite(value):
                raise IncompatibleTypesError(f"fraction: Cannot store non-finite value {value!r}")
            return Fraction(value)
        raise IncompatibleTypesError(f"fraction: Cannot store {type(value).__name__} value {value!r}")

    def format_element(self, element):
        return f"{element.numerator}/{element.denominator}"


class RationalComplexKernel(ObjectKernel):
    """Exact complex numbers with rational parts."""

    def zero(self):
        return RationalComplex()

    def one(self):
        return RationalComplex(1)

    def coerce(self, value):
        try:
            return RationalComplex.coerce(value)
        except TypeError as e:
            raise IncompatibleTypesError(f"complex: {e}") from e

    def format_element(self, element):
        return str(element)


class ExpressionKernel(ObjectKernel):
    """Symbolic expressions backed by sympy. No simplification is attempted."""

    def zero(self):
        return sympy.Integer(0)

    def one(self):
        return sympy.Integer(1)

    def coerce(self, value):
        if isinstance(value, sympy.Basic):
            return value
        if isinstance(value, RationalComplex):
            return sympy.Rational(value.real) + sympy.I * sympy.Rational(value.imag)
        try:
            return sympy.sympify(value, strict=not isinstance(value, str))
        except sympy.SympifyError as e:
            raise IncompatibleTypesError(f"expression: Cannot convert {value!r}") from e

    def _divide(self, a, b):
        # sympy yields zoo/nan instead of raising
        return a / b


class NestedMatrixKernel(ObjectKernel):
    """Matrices whose elements are matrices.

    Element results are produced through the engine with the destination's
    allocator, directly into the destination slot.
    """

    def zero(self):
        from .matrix import Matrix
        return Matrix()

    def one(self):
        raise InvalidEnumMemberError("matrix: Nested matrices have no multiplicative identity")

    def set_identity(self, data, rows, columns):
        # Nested slots stay empty
        pass

    def coerce(self, value):
        from .matrix import Matrix
        if not isinstance(value, Matrix):
            raise IncompatibleTypesError(f"matrix: Cannot store {type(value).__name__} value")
        return value

    def release(self, element):
        from .matrix import matrix_destroy
        matrix_destroy(element)

    def _ops(self):
        from . import matrix_ops
        return {
            "add": matrix_ops.matrix_add,
            "sub": matrix_ops.matrix_sub,
            "mult": matrix_ops.matrix_mult,
            "multew": matrix_ops.matrix_multew,
            "divew": matrix_ops.matrix_divew,
        }

    def gather(self, source, dest, index_map):
        from .matrix import matrix_copy, matrix_destroy
        for i, j in enumerate(index_map):
            element = source.data[j]
            if element.is_live:
                matrix_copy(dest.allocator, element, dest.data[i])
            else:
                matrix_destroy(dest.data[i])

    def elementwise(self, op, left, right, out):
        ops = self._ops()
        if op not in ops:
            raise InvalidEnumMemberError(f"matrix: Unknown operation '{op}'")
        func = ops[op]
        for i in range(len(out.data)):
            func(out.allocator, _pick(left, i), _pick(right, i), out.data[i])

    def _dot(self, allocator, left, right, r, c, dest):
        from .matrix import Matrix, matrix_destroy
        from .matrix_ops import matrix_add_inplace, matrix_mult

        for k in range(left.columns):
            a = left.data[r * left.columns + k]
            b = right.data[k * right.columns + c]
            if k == 0:
                matrix_mult(allocator, a, b, dest)
                continue
            term = matrix_mult(allocator, a, b, Matrix())
            try:
                matrix_add_inplace(term, dest)
            finally:
                matrix_destroy(term)

    def product(self, left, right, out):
        for r in range(out.rows):
            for c in range(out.columns):
                self._dot(out.allocator, left, right, r, c, out.data[r * out.columns + c])

    def product_inplace(self, right, out):
        # Only element matrices are allocated; the outer buffer is reused
        from .matrix import Matrix, matrix_destroy

        results = [Matrix() for _ in range(len(out.data))]
        try:
            for r in range(out.rows):
                for c in range(out.columns):
                    self._dot(out.allocator, out, right, r, c, results[r * out.columns + c])
        except Exception:
            for element in results:
                matrix_destroy(element)
            raise
        for i, element in enumerate(results):
            matrix_destroy(out.data[i])
            out.data[i] = element

    def format_element(self, element):
        if not element.is_live:
            return "[0x0]"
        return f"[{element.rows}x{element.columns} {element.kind.value}]"

    def equal(self, left, right):
        from .matrix import matrix_equal
        if len(left) != len(right):
            return False
        return all(matrix_equal(a, b) for a, b in zip(left, right))


_OBJECT_KERNEL_CLASSES = {
    ElementKind.BIGINT: BigIntKernel,
    ElementKind.FRACTION: FractionKernel,
    ElementKind.COMPLEX: RationalComplexKernel,
    ElementKind.EXPRESSION: ExpressionKernel,
    ElementKind.MATRIX: NestedMatrixKernel,
}

# Kernel table, resolved once per call by the dispatch layer
_KERNELS: Dict[ElementKind, ElementKernel] = {
    kind: _OBJECT_KERNEL_CLASSES.get(kind, NumericKernel)(kind) for kind in ElementKind
}


def get_kernel(kind: ElementKind) -> ElementKernel:
    """Return the kernel for `kind`.

    Raises:
        InvalidEnumMemberError: If `kind` has no kernel
    """
    try:
        return _KERNELS[kind]
    except (KeyError, TypeError):
        raise InvalidEnumMemberError(f"get_kernel: Unknown element kind {kind!r}") from None


__all__ = [
    "PRINT_DECIMALS",
    "ELEMENTWISE_OPS",
    "ElementKernel",
    "NumericKernel",
    "ObjectKernel",
    "BigIntKernel",
    "FractionKernel",
    "RationalComplexKernel",
    "ExpressionKernel",
    "NestedMatrixKernel",
    "get_kernel",
]
