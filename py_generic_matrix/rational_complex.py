# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/rational_complex.py

"""
Exact complex numbers with rational parts, the element type of the
`complex` kind.
"""

import numbers
from dataclasses import dataclass
from fractions import Fraction
from typing import Any


@dataclass(frozen=True, eq=False)
class RationalComplex:
    """Complex number `real + imag*i` with Fraction parts."""

    real: Fraction = Fraction(0)
    imag: Fraction = Fraction(0)

    def __post_init__(self):
        object.__setattr__(self, "real", Fraction(self.real))
        object.__setattr__(self, "imag", Fraction(self.imag))

    @classmethod
    def coerce(cls, value: Any) -> "RationalComplex":
        """Convert `value` to a RationalComplex.

        Accepts RationalComplex, rationals, floats, Python complex numbers,
        numpy scalars and (real, imag) pairs. Raises TypeError otherwise.
        """
        if isinstance(value, RationalComplex):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(_part(value[0]), _part(value[1]))
        if isinstance(value, bool):
            raise TypeError(f"RationalComplex: Cannot convert {value!r}")
        if isinstance(value, numbers.Rational):
            return cls(Fraction(value))
        if isinstance(value, numbers.Real):
            return cls(_part(float(value)))
        if isinstance(value, numbers.Complex):
            value = complex(value)
            return cls(_part(value.real), _part(value.imag))
        raise TypeError(f"RationalComplex: Cannot convert {type(value).__name__}")

    def conjugate(self) -> "RationalComplex":
        return RationalComplex(self.real, -self.imag)

    def __add__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return RationalComplex(self.real + other.real, self.imag + other.imag)

    __radd__ = __add__

    def __sub__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return RationalComplex(self.real - other.real, self.imag - other.imag)

    def __rsub__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return other - self

    def __mul__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return RationalComplex(self.real * other.real - self.imag * other.imag,
                               self.real * other.imag + self.imag * other.real)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        denominator = other.real * other.real + other.imag * other.imag
        if denominator == 0:
            raise ZeroDivisionError("RationalComplex: division by zero")
        numerator = self * other.conjugate()
        return RationalComplex(numerator.real / denominator, numerator.imag / denominator)

    def __rtruediv__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return other / self

    def __neg__(self):
        return RationalComplex(-self.real, -self.imag)

    def __bool__(self):
        return bool(self.real) or bool(self.imag)

    def __eq__(self, other):
        other = _operand(other)
        if other is NotImplemented:
            return other
        return self.real == other.real and self.imag == other.imag

    def __hash__(self):
        # Equal values hash alike, including Python complex numbers
        if self.imag == 0:
            return hash(self.real)
        try:
            value = complex(self)
        except OverflowError:
            return hash((self.real, self.imag))
        if value.real == self.real and value.imag == self.imag:
            return hash(value)
        return hash((self.real, self.imag))

    def __complex__(self):
        return complex(float(self.real), float(self.imag))

    def __str__(self):
        sign = "-" if self.imag < 0 else "+"
        return f"{self.real}{sign}{abs(self.imag)}i"

    def __repr__(self):
        return f"RationalComplex({self.real!s}, {self.imag!s})"


def _part(value: Any) -> Fraction:
    # NaN and infinities have no rational value
    try:
        return Fraction(value)
    except (ValueError, OverflowError, ZeroDivisionError) as e:
        raise TypeError(f"RationalComplex: Cannot convert {value!r}") from e


def _operand(value: Any):
    try:
        return RationalComplex.coerce(value)
    except TypeError:
        return NotImplemented


__all__ = ["RationalComplex"]
