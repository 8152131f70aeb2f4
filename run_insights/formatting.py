"""Display helpers shared by the payload builder and the CLI."""

import math

ELLIPSIS = "…"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Scores are compared across runs, so every rounding in the analytics goes
    through this function instead of ``round`` (which rounds half to even).
    """
    return math.floor(value + 0.5)


def format_duration(ms: float) -> str:
    """Format milliseconds as ``850ms``, ``12.34s`` or ``3m 5s``."""
    if ms < 1000:
        return f"{round_half_up(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes = math.floor(ms / 60000)
    seconds = round_half_up((ms % 60000) / 1000)
    return f"{minutes}m {seconds}s"


def short_label(text: str | None, max_len: int = 26) -> str:
    """Truncate a chart label to ``max_len`` characters."""
    if not text:
        return "Unknown"
    if len(text) <= max_len:
        return text
    return f"{text[: max_len - 1]}{ELLIPSIS}"
