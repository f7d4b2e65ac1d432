from typing import Optional


BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def _trim_number(value: float, precision: int = 2) -> str:
    text = f"{round(value, precision):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_bytes(num_bytes: float, precision: int = 2) -> str:
    """
    Format a byte count with 1024-based units.

    Examples:
        format_bytes(0) -> "0 B"
        format_bytes(1536) -> "1.5 KB"
    """
    value = max(num_bytes or 0, 0)
    if value == 0:
        return "0 B"
    power = 0
    while value >= 1024 and power < len(BYTE_UNITS) - 1:
        value /= 1024
        power += 1
    return f"{_trim_number(value, precision)} {BYTE_UNITS[power]}"


def format_speed(bytes_per_second: float) -> str:
    return f"{format_bytes(bytes_per_second)}/s"


def format_duration(seconds: Optional[float]) -> str:
    """Format a duration in seconds using its largest whole unit."""
    if seconds is None or seconds < 0:
        return "∞"
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def format_percentage(fraction: float) -> str:
    """Format a 0..1 fraction as a percentage with up to two decimals."""
    return f"{_trim_number(fraction * 100)}%"
