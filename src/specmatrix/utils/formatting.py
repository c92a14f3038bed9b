"""Human readable value helpers for the report."""

from __future__ import annotations

_UNITS = ("bytes", "KB", "MB", "GB", "TB", "PB")


def format_bytes(count: int | float) -> str:
    """Format a byte count with binary multiples, e.g. ``7.5 GB``."""
    if count <= 0:
        return "Zero KB"
    value = float(count)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{int(value)} bytes"
    return f"{value:.1f} {_UNITS[unit]}" if value < 100 else f"{value:.0f} {_UNITS[unit]}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def gauge(fraction: float, width: int = 20) -> str:
    """Render ``fraction`` (0..1) as a fixed width text bar."""
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(round(fraction * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"
