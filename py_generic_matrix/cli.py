#!/usr/bin/env python3
# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/cli.py

"""
Command line front end for py-generic-matrix

Evaluates one matrix operation on matrices given as literals and prints the
result, or lists the available element kinds.

Literal syntax: rows separated by ';', elements by ','. For example
"1,2;3,4" is the 2x2 matrix [[1, 2], [3, 4]].

Examples:
    generic-matrix --list-kinds
    generic-matrix --op mult --kind f64 --left "1,2;3,4" --right "5,6;7,8"
    generic-matrix --op add --kind fraction --left "1/2,1/3" --right "1/6"
"""

COPYRIGHT = (
    "Copyright (c) 2025 Alessandro Baretta\n"
    "All rights reserved."
)

import argparse
import logging
import sys
from fractions import Fraction
from typing import Any, List, Optional

from .allocators import Allocator, arena_allocator, default_allocator
from .element_kinds import (
    COMPLEX_KINDS, FLOAT_KINDS, INTEGER_KINDS, ElementKind, kind_width, normalize_kind,
)
from .errors import MatrixError
from .matrix import Matrix, matrix_destroy, matrix_from_rows
from .matrix_ops import matrix_add, matrix_divew, matrix_mult, matrix_multew, matrix_sub
from .matrix_print_ops import matrix_print
from .matrix_transpose_ops import matrix_transpose
from .rational_complex import RationalComplex

BINARY_OPERATIONS = {
    "add": matrix_add,
    "sub": matrix_sub,
    "mult": matrix_mult,
    "multew": matrix_multew,
    "divew": matrix_divew,
}
OPERATIONS = list(BINARY_OPERATIONS) + ["transpose"]

logger = logging.getLogger(__name__)


def parse_element(token: str, kind: ElementKind) -> Any:
    """Parse one literal element for `kind`."""
    token = token.strip()
    if kind in INTEGER_KINDS or kind is ElementKind.BIGINT:
        return int(token)
    if kind in FLOAT_KINDS:
        return float(token)
    if kind in COMPLEX_KINDS:
        return complex(token.replace("i", "j"))
    if kind is ElementKind.FRACTION:
        return Fraction(token)
    if kind is ElementKind.COMPLEX:
        try:
            return RationalComplex.coerce(complex(token.replace("i", "j")))
        except TypeError as e:
            raise ValueError(f"'{token}' has no exact complex value") from e
    if kind is ElementKind.EXPRESSION:
        return token
    raise ValueError(f"Literals are not supported for {kind.value} matrices")


def parse_literal(literal: str, kind: ElementKind) -> List[List[Any]]:
    """Parse "a,b;c,d" into rows of elements of `kind`."""
    rows = []
    for row in literal.split(";"):
        if not row.strip():
            raise ValueError(f"Empty row in literal '{literal}'")
        rows.append([parse_element(token, kind) for token in row.split(",")])
    return rows


def list_kinds(file=None) -> None:
    file = file if file is not None else sys.stdout
    for kind in ElementKind:
        print(f"{kind.value:<12} {kind_width(kind)} bytes", file=file)


def run_operation(allocator: Allocator, op: str, kind: ElementKind,
                  left_literal: str, right_literal: Optional[str]) -> None:
    """Evaluate `op` on the given literals and print the result."""
    left = matrix_from_rows(allocator, parse_literal(left_literal, kind), kind)
    right = None
    result = Matrix()
    try:
        if op == "transpose":
            matrix_transpose(allocator, left, result)
        else:
            if right_literal is None:
                raise ValueError(f"--right is required for --op {op}")
            right = matrix_from_rows(allocator, parse_literal(right_literal, kind), kind)
            BINARY_OPERATIONS[op](allocator, left, right, result)
        logger.info(f"{op}: result is {result.rows}x{result.columns} {kind.value}")
        matrix_print(allocator, result)
    finally:
        matrix_destroy(result)
        matrix_destroy(right)
        matrix_destroy(left)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for command line usage."""
    parser = argparse.ArgumentParser(
        description="Evaluate generic matrix operations on literal matrices.\n"
        "Rows are separated by ';' and elements by ','.\n"
        "Expression literals go through sympy.sympify, which evaluates Python code: "
        "pass trusted input only."
        f"\n{COPYRIGHT}",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--list-kinds", action="store_true", help="List element kinds with their widths"
    )

    parser.add_argument(
        "--op", choices=OPERATIONS, help="Operation to evaluate"
    )

    parser.add_argument(
        "--kind", default="f64", help="Element kind of the operands"
    )

    parser.add_argument(
        "--left", help="Left operand literal, e.g. '1,2;3,4'"
    )

    parser.add_argument(
        "--right", help="Right operand literal (binary operations only)"
    )

    parser.add_argument(
        "--arena-bytes",
        type=int,
        help="Run on an arena allocator of this many bytes instead of the system allocator",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(levelname)s - %(message)s"
    )

    if args.list_kinds:
        list_kinds()
        return 0

    if args.op is None or args.left is None:
        print("Error: --op and --left are required unless --list-kinds is given", file=sys.stderr)
        return 1

    try:
        kind = normalize_kind(args.kind)
        if args.arena_bytes is not None:
            allocator = arena_allocator(args.arena_bytes)
            logger.debug(f"Using arena allocator of {args.arena_bytes} bytes")
        else:
            allocator = default_allocator()
        run_operation(allocator, args.op, kind, args.left, args.right)
    except MatrixError as e:
        print(f"Error: {e} ({e.status.name})", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error parsing input: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
