"""Reporting of elapsed time between two monotonic clock readings."""

from __future__ import annotations

import sys


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def format_elapsed_time(begin: int, end: int) -> str:
    """Format the span between two ``time.monotonic_ns()`` readings.

    The span is shown in whole seconds, milliseconds and microseconds,
    each truncated toward zero.
    """
    elapsed = end - begin
    seconds = _truncating_div(elapsed, 1_000_000_000)
    millis = _truncating_div(elapsed, 1_000_000)
    micros = _truncating_div(elapsed, 1_000)
    return f"Time elapsed = {seconds}[s] {millis}[ms] {micros}[us] "


def print_elapsed_time(begin: int, end: int) -> None:
    """Write the formatted elapsed time to standard error."""
    print(format_elapsed_time(begin, end), file=sys.stderr)