"""
Leading-edge throttle for key-down dispatch.

The first call in a window runs immediately; further calls inside the
window are dropped, never replayed later. cancel() closes the window so the
next call runs right away.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000.0


class Throttle:
    """
    Rate-limits a callable to one invocation per interval.

    Usage:
        throttled = Throttle(handle_key_down, 150)
        throttled(key_code)   # runs
        throttled(key_code)   # dropped (inside the window)
        throttled.cancel()
        throttled(key_code)   # runs again
    """

    def __init__(
        self,
        func: Callable[..., Any],
        interval_ms: float,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._func = func
        self.interval_ms = interval_ms
        self._clock = clock or monotonic_ms
        self._last_invoke: Optional[float] = None

    @property
    def pending(self) -> bool:
        """True while calls are being dropped."""
        if self._last_invoke is None:
            return False
        return self._clock() - self._last_invoke < self.interval_ms

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the wrapped callable unless inside the window.

        Returns:
            The callable's result, or None if the call was dropped
        """
        if self.pending:
            return None

        self._last_invoke = self._clock()
        return self._func(*args, **kwargs)

    def cancel(self) -> None:
        """Close the current window."""
        self._last_invoke = None
