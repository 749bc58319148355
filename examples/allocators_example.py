#!/usr/bin/env python3
"""
Example: Allocators

This example demonstrates the allocator capability: custom allocators, the
bump arena, accounting with the tracking allocator and failure simulation.
"""

import numpy as np
from py_generic_matrix import (
    Allocator, ElementKind, Matrix, Status, arena_allocator, call_status, status_to_str,
    tracking_allocator, matrix_add, matrix_copy, matrix_destroy, matrix_from_rows, matrix_init,
    matrix_mult, matrix_to_rows,
)

def custom_allocator():
    """An allocator is a pair of callables sharing a context."""
    print("=== Custom Allocator ===")

    log = []

    def alloc(size, context):
        context.append(f"alloc {size}")
        return np.zeros(size, dtype=np.uint8)

    def free(buffer, context):
        context.append(f"free {buffer.nbytes}")

    allocator = Allocator(alloc=alloc, free=free, context=log, name="logging")
    a = matrix_init(allocator, 3, 3, ElementKind.F32)
    b = matrix_copy(allocator, a)
    matrix_destroy(a)
    matrix_destroy(b)

    print(f"Calls: {log}")
    print()

def arena_workflow():
    """Every matrix of a computation lives in one arena."""
    print("=== Arena Allocator ===")

    arena = arena_allocator(1024)
    a = matrix_from_rows(arena, [[1, 2], [3, 4]], ElementKind.I64)
    b = matrix_from_rows(arena, [[5, 6], [7, 8]], ElementKind.I64)
    out = Matrix()

    for step in range(3):
        matrix_mult(arena, a, b, out)
        matrix_add(arena, out, a, out)
        print(f"  step {step}: {arena.context.bytes_used} bytes used")

    print(f"Result: {matrix_to_rows(out)}")
    for matrix in (a, b, out):
        matrix_destroy(matrix)
    print(f"After destroy: {arena.context.bytes_used} bytes used")
    print()

def tracking_and_failures():
    """Accounting and simulated allocation failures."""
    print("=== Tracking Allocator ===")

    tracker = tracking_allocator()
    inner = matrix_from_rows(tracker, [[1, 2], [3, 4]], ElementKind.F64)
    outer = matrix_from_rows(tracker, [[inner, matrix_copy(tracker, inner)]], ElementKind.MATRIX)
    context = tracker.context
    print(f"Live buffers: {context.live_buffers}, bytes in use: {context.bytes_in_use}")

    failing = tracking_allocator(fail_after=2)
    out = matrix_from_rows(tracker, [[0]], ElementKind.F64)
    status, _ = call_status(matrix_add, failing, outer, outer, out)
    print(f"Status: {status.name} ({status_to_str(status)})")
    print(f"Destination unchanged: {matrix_to_rows(out)}, failing allocator live buffers: "
          f"{failing.context.live_buffers}")
    assert status is Status.OUT_OF_MEMORY

    matrix_destroy(outer)
    matrix_destroy(out)
    print(f"After destroy: {context.live_buffers} live buffers, peak {context.peak_bytes} bytes")
    print()

def main():
    """Run all examples."""
    print("Allocator Examples")
    print("=" * 50)

    try:
        custom_allocator()
        arena_workflow()
        tracking_and_failures()

        print("✅ All examples completed successfully!")

    except Exception as e:
        print(f"❌ Error: {e}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
