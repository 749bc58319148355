# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/element_kinds.py

"""
Element kind registry for py-generic-matrix

This module enumerates the element representations a matrix may hold and
exposes the storage width of each one, which the container uses for stride
arithmetic and buffer sizing.
"""

from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from .errors import InvalidEnumMemberError


class ElementKind(Enum):
    """Closed set of element representations."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"
    CF32 = "cf32"
    CF64 = "cf64"
    BIGINT = "bigint"
    FRACTION = "fraction"
    COMPLEX = "complex"
    EXPRESSION = "expression"
    MATRIX = "matrix"

    def __str__(self) -> str:
        return self.value


# Fixed-width kinds are stored directly in the allocator buffer through a numpy view
_KIND_DTYPES: Dict[ElementKind, np.dtype] = {
    ElementKind.U8: np.dtype(np.uint8),
    ElementKind.U16: np.dtype(np.uint16),
    ElementKind.U32: np.dtype(np.uint32),
    ElementKind.U64: np.dtype(np.uint64),
    ElementKind.I8: np.dtype(np.int8),
    ElementKind.I16: np.dtype(np.int16),
    ElementKind.I32: np.dtype(np.int32),
    ElementKind.I64: np.dtype(np.int64),
    ElementKind.F32: np.dtype(np.float32),
    ElementKind.F64: np.dtype(np.float64),
    ElementKind.CF32: np.dtype(np.complex64),
    ElementKind.CF64: np.dtype(np.complex128),
}

# Width of one element reference slot for kinds that own per-element storage
REFERENCE_WIDTH = np.dtype(object).itemsize

UNSIGNED_KINDS = (ElementKind.U8, ElementKind.U16, ElementKind.U32, ElementKind.U64)
SIGNED_KINDS = (ElementKind.I8, ElementKind.I16, ElementKind.I32, ElementKind.I64)
INTEGER_KINDS = UNSIGNED_KINDS + SIGNED_KINDS
FLOAT_KINDS = (ElementKind.F32, ElementKind.F64)
COMPLEX_KINDS = (ElementKind.CF32, ElementKind.CF64)
NUMERIC_KINDS = INTEGER_KINDS + FLOAT_KINDS + COMPLEX_KINDS
OBJECT_KINDS = (
    ElementKind.BIGINT,
    ElementKind.FRACTION,
    ElementKind.COMPLEX,
    ElementKind.EXPRESSION,
    ElementKind.MATRIX,
)
ALL_KINDS = tuple(ElementKind)

# Kind groups accepted by the command line and the test helpers
SPECIAL_KINDS = {
    "unsigned": list(UNSIGNED_KINDS),
    "signed": list(SIGNED_KINDS),
    "integer": list(INTEGER_KINDS),
    "floating": list(FLOAT_KINDS),
    "complex": list(COMPLEX_KINDS),
    "numeric": list(NUMERIC_KINDS),
    "object": list(OBJECT_KINDS),
}

_KIND_ALIASES = {
    "uint8": ElementKind.U8,
    "uint16": ElementKind.U16,
    "uint32": ElementKind.U32,
    "uint": ElementKind.U32,
    "uint64": ElementKind.U64,
    "int8": ElementKind.I8,
    "int16": ElementKind.I16,
    "int32": ElementKind.I32,
    "int": ElementKind.I32,
    "int64": ElementKind.I64,
    "float32": ElementKind.F32,
    "single": ElementKind.F32,
    "float64": ElementKind.F64,
    "float": ElementKind.F64,
    "double": ElementKind.F64,
    "complex64": ElementKind.CF32,
    "complex128": ElementKind.CF64,
    "big": ElementKind.BIGINT,
    "rational": ElementKind.FRACTION,
    "frac": ElementKind.FRACTION,
    "exp": ElementKind.EXPRESSION,
    "expr": ElementKind.EXPRESSION,
    "mat": ElementKind.MATRIX,
}

# Reverse mapping used for numpy interop
_TYPE_DISPATCH_MAP: Dict[np.dtype, ElementKind] = {
    dtype: kind for kind, dtype in _KIND_DTYPES.items()
}


def is_object_kind(kind: ElementKind) -> bool:
    """True for kinds whose elements own secondary storage."""
    return kind in OBJECT_KINDS


def kind_dtype(kind: ElementKind) -> np.dtype:
    """Return the numpy dtype used for the element view of `kind`."""
    if kind in _KIND_DTYPES:
        return _KIND_DTYPES[kind]
    if kind in OBJECT_KINDS:
        return np.dtype(object)
    raise InvalidEnumMemberError(f"kind_dtype: Unknown element kind {kind!r}")


def kind_width(kind: ElementKind) -> int:
    """Return the storage width in bytes of one element of `kind`.

    Args:
        kind: Element kind to query

    Returns:
        Byte width used for stride arithmetic. Object-backed kinds report the
        width of one element reference slot.

    Raises:
        InvalidEnumMemberError: If `kind` is not an ElementKind
    """
    if kind in _KIND_DTYPES:
        return _KIND_DTYPES[kind].itemsize
    if kind in OBJECT_KINDS:
        return REFERENCE_WIDTH
    raise InvalidEnumMemberError(f"kind_width: Unknown element kind {kind!r}")


def kind_from_dtype(dtype: Any) -> Optional[ElementKind]:
    """Map a numpy dtype to its fixed-width kind, or None when unsupported."""
    try:
        return _TYPE_DISPATCH_MAP.get(np.dtype(dtype))
    except TypeError:
        return None


def normalize_kind(token: Any) -> ElementKind:
    """Normalize user-provided kind tokens into an ElementKind.

    Accepted inputs include ElementKind members, their values ("f64",
    "bigint", ...), case-insensitive aliases ("float64", "double",
    "complex128", ...) and numpy dtypes or scalar types.
    """
    if isinstance(token, ElementKind):
        return token

    if isinstance(token, str):
        s = token.strip().lower()
        for kind in ElementKind:
            if kind.value == s:
                return kind
        if s in _KIND_ALIASES:
            return _KIND_ALIASES[s]
        raise InvalidEnumMemberError(f"normalize_kind: Unknown element kind '{token}'")

    kind = kind_from_dtype(token)
    if kind is None:
        raise InvalidEnumMemberError(f"normalize_kind: Unsupported kind token {token!r}")
    return kind


def expand_special_kinds(kind_names):
    """Expand kind names and group names ("integer", "object", ...) to kinds."""
    expanded = []
    for name in kind_names:
        if name in SPECIAL_KINDS:
            group = SPECIAL_KINDS[name]
        else:
            group = [normalize_kind(name)]
        for kind in group:
            if kind not in expanded:
                expanded.append(kind)
    return expanded


__all__ = [
    "ElementKind",
    "REFERENCE_WIDTH",
    "UNSIGNED_KINDS",
    "SIGNED_KINDS",
    "INTEGER_KINDS",
    "FLOAT_KINDS",
    "COMPLEX_KINDS",
    "NUMERIC_KINDS",
    "OBJECT_KINDS",
    "ALL_KINDS",
    "SPECIAL_KINDS",
    "is_object_kind",
    "kind_dtype",
    "kind_width",
    "kind_from_dtype",
    "normalize_kind",
    "expand_special_kinds",
]
