"""Alert text for breached conditions, e.g. ``Maintainability Rating > B``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from quality_gate.types import MetricType

if TYPE_CHECKING:
    from quality_gate.models import Condition

RATING_LETTERS = "ABCDE"


def alert_label(condition: Condition, *, hours_per_day: int = 8) -> str:
    threshold = _display_threshold(condition, hours_per_day)
    return f"{condition.metric.name} {condition.operator.symbol} {threshold}"


def rating_letter(rating: int) -> str:
    """Letter of a 1-5 rating (1 is A)."""
    if not 1 <= rating <= len(RATING_LETTERS):
        msg = f"Rating must be between 1 and {len(RATING_LETTERS)}, got {rating}"
        raise ValueError(msg)
    return RATING_LETTERS[rating - 1]


def format_work_duration(minutes: int, *, hours_per_day: int = 8) -> str:
    """Format a duration in minutes as working days, hours and minutes.

    >>> format_work_duration(570)
    '1d 1h 30min'
    """
    if minutes == 0:
        return "0min"

    sign = "-" if minutes < 0 else ""
    remaining = abs(minutes)
    minutes_per_day = hours_per_day * 60
    days, remaining = divmod(remaining, minutes_per_day)
    hours, mins = divmod(remaining, 60)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if mins:
        parts.append(f"{mins}min")
    return sign + " ".join(parts)


def _display_threshold(condition: Condition, hours_per_day: int) -> str:
    threshold = condition.error_threshold
    try:
        match condition.metric.type:
            case MetricType.RATING:
                return rating_letter(int(threshold))
            case MetricType.WORK_DUR:
                return format_work_duration(int(threshold), hours_per_day=hours_per_day)
            case _:
                return threshold
    except ValueError:
        return threshold
