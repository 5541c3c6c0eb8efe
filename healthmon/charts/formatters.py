"""Human-readable formatting of bytes, percentages and durations."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
GIGABYTE = 1024 ** 3


def fixed(value: float, decimals: int = 0) -> str:
    """Fixed-point text with halves rounded away from zero."""
    step = Decimal(1).scaleb(-decimals)
    return str(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))


def format_bytes(num_bytes: float, decimals: int = 1) -> str:
    """Largest unit on a 1024 ladder with a magnitude of at least one."""
    if num_bytes == 0:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while abs(value) >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{fixed(value, decimals)} {BYTE_UNITS[unit]}"


def format_gb(num_bytes: float, decimals: int = 1) -> str:
    return f"{fixed(num_bytes / GIGABYTE, decimals)} GB"


def format_percent(value: float, decimals: int = 0) -> str:
    return f"{fixed(value, decimals)}%"


def format_uptime(seconds: float) -> str:
    """Days, hours and minutes, omitting zero parts; seconds are dropped."""
    if seconds < 60:
        return "< 1m"

    total_minutes = int(seconds // 60)
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes or not parts:
        parts.append(f"{minutes}m")
    return " ".join(parts)


def format_time_remaining(minutes: Optional[float]) -> str:
    """Battery estimate; None means no estimate is available."""
    if minutes is None:
        return "--"
    hours, mins = divmod(int(minutes), 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"
