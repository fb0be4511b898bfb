"""Invocation counter scoped to one Lambda execution environment."""

from __future__ import annotations

import threading


class InvocationCounter:
    """Monotonic count of invocations served by this process instance.

    Created once at bootstrap and never persisted, so a fresh execution
    environment starts again from zero.
    """

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        """Return the number of invocations counted so far."""
        return self._value

    def next(self) -> int:
        """Increment the count and return the new value."""
        with self._lock:
            self._value += 1
            return self._value

    def __repr__(self) -> str:
        return f"InvocationCounter(value={self._value})"
