"""Formatting and parsing helpers for durations and byte sizes."""

from __future__ import annotations

import re
import struct
from datetime import timedelta

__all__ = [
    "format_short_duration",
    "format_size",
    "parse_size",
    "parse_duration",
    "format_duration",
]

_SIZE_PATTERN = re.compile(r" *([0-9]+) *([bBkKmMgGtT]?) *")
_DURATION_PATTERN = re.compile(r" *([0-9]+) *((ms|s|m|h|d|MS|S|M|H|D)?) *")

_SIZE_FACTORS = {
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
    "t": 1024**4,
}

_DURATION_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
}

_SIZE_UNITS = ("Bytes", "KiB", "MiB", "GiB", "TiB", "PiB")

_MILLIS_PER_SECOND = 1000
_MILLIS_PER_MINUTE = 60 * _MILLIS_PER_SECOND
_MILLIS_PER_HOUR = 60 * _MILLIS_PER_MINUTE
_MILLIS_PER_DAY = 24 * _MILLIS_PER_HOUR


def _f32(value: float) -> float:
    """Rounds a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def format_short_duration(duration_in_micros: int) -> str:
    """Formats a duration given in microseconds using the most concise unit."""
    micros = duration_in_micros
    if micros < 1_000:
        return f"{micros} us"
    if micros < 10_000:
        return f"{_f32(_f32(micros) / 1_000.0):.2f} ms"
    if micros < 100_000:
        return f"{_f32(_f32(micros) / 1_000.0):.1f} ms"
    if micros < 1_000_000:
        return f"{_trunc_div(micros, 1_000)} ms"
    if micros < 10_000_000:
        return f"{_f32(_f32(micros) / 1_000_000.0):.2f} s"
    if micros < 100_000_000:
        return f"{_f32(_f32(micros) / 1_000_000.0):.1f} s"
    return f"{_trunc_div(micros, 1_000_000)} s"


def format_size(size_in_bytes: int) -> str:
    """Formats a size in bytes using the most concise unit (bytes up to PiB)."""
    if size_in_bytes < 0:
        raise ValueError(f"A size cannot be negative: {size_in_bytes}")
    if size_in_bytes == 1:
        return "1 byte"
    if size_in_bytes < 1024:
        return f"{size_in_bytes} bytes"

    magnitude = 0
    size = _f32(float(size_in_bytes))
    while size > 1024.0 and magnitude < 5:
        size = _f32(size / 1024.0)
        magnitude += 1

    if size <= 10.0:
        number = f"{size:.2f}"
    elif size <= 100.0:
        number = f"{size:.1f}"
    else:
        number = f"{size:.0f}"

    return f"{number} {_SIZE_UNITS[magnitude]}"


def parse_size(text: str) -> int:
    """Parses a size like "8k" or "4 G" into a number of bytes.

    Accepted suffixes are b, k, m, g and t (case-insensitive); raises ValueError otherwise.
    """
    match = _SIZE_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError(
            f"Cannot parse '{text}' into a size expression."
            "Expected a positive number and optionally 'b', 'k', 'm', 'g' or 't' as suffix."
        )
    number = int(match.group(1))
    return number * _SIZE_FACTORS.get(match.group(2).lower(), 1)


def parse_duration(text: str) -> timedelta:
    """Parses a duration like "100 ms" or "3 M" into a timedelta.

    Accepted suffixes are ms, s, m, h and d (all lower or all upper case); a bare number
    counts as milliseconds. Raises ValueError otherwise.
    """
    match = _DURATION_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError(
            f"Cannot parse '{text}' into a duration expression."
            "Expected a positive number an optionally 'ms', 's', 'm', 'h' or 'd' as suffix."
        )
    number = int(match.group(1))
    factor = _DURATION_SECONDS.get(match.group(2).lower())
    if factor is None:
        return timedelta(milliseconds=number)
    return timedelta(seconds=number * factor)


def format_duration(duration: timedelta) -> str:
    """Formats a duration like "5d 3h 17m 2s 12ms", omitting zero components."""
    if duration < timedelta(0):
        raise ValueError(f"A duration cannot be negative: {duration}")

    remaining = duration // timedelta(milliseconds=1)
    parts = []
    for unit_millis, suffix in (
        (_MILLIS_PER_DAY, "d"),
        (_MILLIS_PER_HOUR, "h"),
        (_MILLIS_PER_MINUTE, "m"),
        (_MILLIS_PER_SECOND, "s"),
    ):
        amount, rest = divmod(remaining, unit_millis)
        if amount > 0:
            parts.append(f"{amount}{suffix}")
            remaining = rest
    if remaining > 0:
        parts.append(f"{remaining}ms")

    return " ".join(parts)