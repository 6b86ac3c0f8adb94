# -*- encoding: utf-8 -*-
"""
BlockCounter - monotonic registration-time source for hosts.

The registry never reads a clock itself; hosts pass the current height into
each mutating call. This counter is what an in-process host (or a test)
uses to produce those heights.
"""

import threading


class BlockCounter:
    """Thread-safe counter that only moves forward."""

    def __init__(self, start: int = 0):
        if isinstance(start, bool) or not isinstance(start, int) or start < 0:
            raise ValueError(f"start must be a non-negative int, got {start!r}")
        self._height = start
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        with self._lock:
            return self._height

    def advance(self, n: int = 1) -> int:
        """Move forward n blocks and return the new height."""
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"cannot advance by {n!r}")
        with self._lock:
            self._height += n
            return self._height
