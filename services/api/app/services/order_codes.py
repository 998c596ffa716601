from __future__ import annotations

import os
import re
import threading
import time
from collections.abc import Callable
from typing import Protocol

ORDER_CODE_PATTERN = re.compile(r"^ORD-\d{6}$")

_SUFFIX_SPACE = 1_000_000


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_order_code(now_ms: int | None = None) -> str:
    """Legacy scheme: "ORD-" plus the last 6 digits of the epoch-millisecond clock.

    Two orders inside the same truncated window get the same code.
    """

    ms = _epoch_ms() if now_ms is None else now_ms
    return f"ORD-{ms % _SUFFIX_SPACE:06d}"


class OrderCodeAllocator(Protocol):
    scheme: str

    def next_code(self) -> str: ...


class TimestampCodeAllocator:
    scheme = "timestamp"

    def __init__(self, clock_ms: Callable[[], int] = _epoch_ms) -> None:
        self._clock_ms = clock_ms

    def next_code(self) -> str:
        return generate_order_code(self._clock_ms())


class MonotonicCodeAllocator:
    """Keeps the ORD-###### format but never repeats a suffix within the process.

    The first suffix is seeded from the clock; every later code takes the next suffix, so the
    first million codes issued by one allocator are distinct.
    """

    scheme = "monotonic"

    def __init__(self, clock_ms: Callable[[], int] = _epoch_ms) -> None:
        self._clock_ms = clock_ms
        self._lock = threading.Lock()
        self._next: int | None = None

    def next_code(self) -> str:
        with self._lock:
            if self._next is None:
                self._next = self._clock_ms() % _SUFFIX_SPACE
            value = self._next
            self._next = (value + 1) % _SUFFIX_SPACE
        return f"ORD-{value:06d}"


_ALLOCATOR: OrderCodeAllocator | None = None


def get_code_allocator() -> OrderCodeAllocator:
    """Return the process-wide allocator selected by BURBUJA_ORDER_CODES.

    Cached per scheme so the monotonic allocator keeps its state across requests.
    """

    global _ALLOCATOR

    scheme = os.getenv("BURBUJA_ORDER_CODES", "monotonic").strip().lower()
    if _ALLOCATOR is not None and _ALLOCATOR.scheme == scheme:
        return _ALLOCATOR

    if scheme == "monotonic":
        _ALLOCATOR = MonotonicCodeAllocator()
    elif scheme == "timestamp":
        _ALLOCATOR = TimestampCodeAllocator()
    else:
        raise ValueError(
            f"Unknown BURBUJA_ORDER_CODES={scheme!r}. Expected monotonic or timestamp."
        )
    return _ALLOCATOR
