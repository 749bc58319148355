# Copyright (c) 2025 Alessandro Baretta
# All rights reserved.

# source path: py_generic_matrix/allocators.py

"""
Allocator capabilities for py-generic-matrix

An allocator is a record of two functions, `alloc(size, context)` and
`free(buffer, context)`, plus the opaque context threaded through both.
Buffers are one-dimensional uint8 numpy arrays of exactly `size` bytes, and
`alloc` returns None on failure. The engine never assumes a global allocator:
every matrix stores the allocator that produced its buffer and frees through it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import numpy as np

from .errors import OutOfMemoryError

logger = logging.getLogger(__name__)

AllocFn = Callable[[int, Any], Optional[np.ndarray]]
FreeFn = Callable[[np.ndarray, Any], None]


@dataclass
class Allocator:
    """Allocation capability injected into every allocating operation."""

    alloc: AllocFn
    free: FreeFn
    context: Any = None
    name: str = "allocator"

    def allocate(self, size: int) -> np.ndarray:
        """Request `size` bytes, raising OutOfMemoryError on failure."""
        buffer = self.alloc(size, self.context)
        if buffer is None:
            logger.debug(f"{self.name}: allocation of {size} bytes failed")
            raise OutOfMemoryError(f"{self.name}: Cannot allocate {size} bytes")
        logger.debug(f"{self.name}: allocated {size} bytes")
        return buffer

    def release(self, buffer: np.ndarray) -> None:
        """Return `buffer` to this allocator."""
        self.free(buffer, self.context)
        logger.debug(f"{self.name}: freed {buffer.nbytes} bytes")


# System allocator

def _system_alloc(size: int, context: Any) -> Optional[np.ndarray]:
    try:
        return np.zeros(size, dtype=np.uint8)
    except MemoryError:
        return None


def _system_free(buffer: np.ndarray, context: Any) -> None:
    # numpy owns the memory; dropping the last reference releases it
    pass


def default_allocator() -> Allocator:
    """Return an allocator backed by fresh zeroed numpy buffers."""
    return Allocator(alloc=_system_alloc, free=_system_free, context=None, name="system")


# Arena allocator

class ArenaContext:
    """Bump allocation state over one preallocated numpy arena.

    The arena rewinds to its start when the last live buffer is freed, or
    explicitly through reset().
    """

    def __init__(self, capacity: int, alignment: int = 16):
        if capacity <= 0:
            raise ValueError(f"ArenaContext: capacity must be positive, got {capacity}")
        if alignment <= 0 or alignment & (alignment - 1):
            raise ValueError(f"ArenaContext: alignment must be a power of two, got {alignment}")
        self.capacity = capacity
        self.alignment = alignment
        self.arena = np.zeros(capacity, dtype=np.uint8)
        self.offset = 0
        self.live: Dict[int, np.ndarray] = {}

    @property
    def bytes_used(self) -> int:
        return self.offset

    @property
    def bytes_free(self) -> int:
        return self.capacity - self.offset

    def reset(self) -> None:
        """Rewind the arena, forgetting every outstanding buffer."""
        self.offset = 0
        self.live.clear()

    def __repr__(self) -> str:
        return (f"ArenaContext(capacity={self.capacity}, used={self.offset}, "
                f"live={len(self.live)})")


def _arena_alloc(size: int, context: ArenaContext) -> Optional[np.ndarray]:
    start = (context.offset + context.alignment - 1) // context.alignment * context.alignment
    end = start + size
    if end > context.capacity:
        return None
    buffer = context.arena[start:end]
    buffer[:] = 0
    context.offset = end
    context.live[id(buffer)] = buffer
    return buffer


def _arena_free(buffer: np.ndarray, context: ArenaContext) -> None:
    if context.live.pop(id(buffer), None) is None:
        raise ValueError("arena: buffer was not allocated by this arena or was already freed")
    if not context.live:
        context.offset = 0


def arena_allocator(capacity: int, alignment: int = 16) -> Allocator:
    """Create an allocator carving buffers out of one `capacity`-byte arena.

    Args:
        capacity: Total arena size in bytes
        alignment: Start alignment of every buffer, a power of two

    Returns:
        Allocator whose context is the ArenaContext
    """
    context = ArenaContext(capacity, alignment)
    return Allocator(alloc=_arena_alloc, free=_arena_free, context=context, name="arena")


# Tracking allocator

@dataclass
class TrackingContext:
    """Bookkeeping for tracking_allocator()."""

    inner: Allocator
    limit_bytes: Optional[int] = None
    fail_after: Optional[int] = None
    live: Dict[int, np.ndarray] = field(default_factory=dict)
    bytes_in_use: int = 0
    peak_bytes: int = 0
    alloc_count: int = 0
    free_count: int = 0
    failed_count: int = 0

    @property
    def live_buffers(self) -> int:
        return len(self.live)


def _tracking_alloc(size: int, context: TrackingContext) -> Optional[np.ndarray]:
    if context.fail_after is not None and context.alloc_count >= context.fail_after:
        context.failed_count += 1
        return None
    if context.limit_bytes is not None and context.bytes_in_use + size > context.limit_bytes:
        context.failed_count += 1
        return None

    buffer = context.inner.alloc(size, context.inner.context)
    if buffer is None:
        context.failed_count += 1
        return None

    context.live[id(buffer)] = buffer
    context.alloc_count += 1
    context.bytes_in_use += size
    context.peak_bytes = max(context.peak_bytes, context.bytes_in_use)
    return buffer


def _tracking_free(buffer: np.ndarray, context: TrackingContext) -> None:
    if context.live.pop(id(buffer), None) is None:
        raise ValueError("tracking: buffer was not allocated by this allocator or was already freed")
    context.free_count += 1
    context.bytes_in_use -= buffer.nbytes
    context.inner.free(buffer, context.inner.context)


def tracking_allocator(inner: Optional[Allocator] = None,
                       limit_bytes: Optional[int] = None,
                       fail_after: Optional[int] = None) -> Allocator:
    """Wrap `inner` with live-buffer accounting and optional failure simulation.

    Args:
        inner: Allocator doing the actual work, the system allocator by default
        limit_bytes: Fail any allocation that would push bytes in use past this
        fail_after: Let this many allocations succeed, then fail every later one

    Returns:
        Allocator whose context is a TrackingContext
    """
    if inner is None:
        inner = default_allocator()
    context = TrackingContext(inner=inner, limit_bytes=limit_bytes, fail_after=fail_after)
    return Allocator(alloc=_tracking_alloc, free=_tracking_free, context=context, name="tracking")


__all__ = [
    "Allocator",
    "ArenaContext",
    "TrackingContext",
    "default_allocator",
    "arena_allocator",
    "tracking_allocator",
]
