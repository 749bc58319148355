# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/__init__.py

"""
py-generic-matrix: a runtime-typed matrix engine

This package provides one matrix container able to hold fixed-width numeric
elements, arbitrary-precision integers, rationals, exact complex numbers,
symbolic expressions or nested matrices, with operations dispatched at runtime
on the element kind and memory obtained from explicitly injected allocators.
"""

__version__ = "0.1.0"

from .errors import *
from .element_kinds import *
from .allocators import *
from .rational_complex import *
from .matrix import *
from .broadcasting import *
from .matrix_ops import *
from .matrix_transpose_ops import *
from .matrix_select_ops import *
from .matrix_print_ops import *
