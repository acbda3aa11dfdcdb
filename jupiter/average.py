"""A sliding average over a series of values, e.g. command durations in microseconds."""

from __future__ import annotations

import threading

from jupiter.fmt import format_short_duration

__all__ = ["Average"]

_I32_MAX = 2**31 - 1
_U64_MASK = 2**64 - 1


def _wrap_i32(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


class Average:
    """Computes a sliding average of roughly the last 100 values.

    Besides the average, the total number of recorded values is tracked. Once more than
    100 values are held or the internal 32-bit sum would overflow, sum and count are halved
    before the new value is added.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sum = 0
        self._window = 0
        self._count = 0

    def add(self, value: int) -> None:
        """Records another value."""
        with self._lock:
            self._count = (self._count + 1) & _U64_MASK

            total, window = self._sum, self._window
            while window > 100 or total + value > _I32_MAX:
                total = _trunc_div(_wrap_i32(window // 2 * total), window)
                window //= 2

            self._sum = _wrap_i32(total + value)
            self._window = _wrap_i32(window + 1)

    def count(self) -> int:
        """Returns the total number of recorded values."""
        return self._count

    def avg(self) -> int:
        """Returns the sliding average of the most recent values."""
        with self._lock:
            total, window = self._sum, self._window
        if total == 0:
            return 0
        return _trunc_div(total, window)

    def __copy__(self) -> Average:
        duplicate = Average()
        with self._lock:
            duplicate._sum = self._sum
            duplicate._window = self._window
            duplicate._count = self._count
        return duplicate

    def __str__(self) -> str:
        return f"{format_short_duration(self.avg())} ({self.count()})"