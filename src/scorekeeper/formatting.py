"""Display helpers for ratings, dates and numbers."""

from datetime import datetime
from typing import Optional, Union

from src.rating_engine.elo_calculator import round_half_up

DateLike = Union[datetime, str, int, float, None]


def format_rating_change(change: int) -> str:
    """Signed rating change: ``+16``, ``-16`` or ``0``."""
    if change > 0:
        return f"+{change}"
    return str(change)


def _to_datetime(value: DateLike) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000)
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def format_date(value: DateLike) -> str:
    """Format as ``YYYY-MM-DD HH:MM``."""
    if value is None or value == "":
        return "Unknown"

    parsed = _to_datetime(value)
    if parsed is None:
        return "Invalid date"

    return parsed.strftime("%Y-%m-%d %H:%M")


def format_relative_time(value: DateLike, now: Optional[datetime] = None) -> str:
    """Human-friendly age: "just now", "5 minutes ago", ... then the full date."""
    parsed = _to_datetime(value)
    if parsed is None:
        return format_date(value)

    now = now or datetime.now()
    seconds = int((now - parsed).total_seconds())

    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} minutes ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hours ago"
    days = hours // 24
    if days < 7:
        return f"{days} days ago"

    return format_date(parsed)


def format_number(num: float, decimals: Optional[int] = None) -> str:
    """Fixed decimals when given, otherwise thousands separators."""
    if decimals is not None:
        return f"{num:.{decimals}f}"
    return f"{num:,}"


def calculate_percentage(value: float, total: float) -> int:
    if total == 0:
        return 0
    return round_half_up(value / total * 100)
