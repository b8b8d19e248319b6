"""Calendar-day keys used to partition per-day records."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from wellness_tracker.domain.errors import ValidationError


def local_now(timezone_name: str | None = None) -> datetime:
    """Return the current aware time in the given zone, or the host zone."""
    if timezone_name:
        return datetime.now(tz=ZoneInfo(timezone_name))
    return datetime.now().astimezone()


def day_key(moment: datetime) -> str:
    """Return the ``YYYY-MM-DD`` key for a moment in its own timezone."""
    return moment.date().isoformat()


def resolve_day(day: date | str | None, now: datetime) -> str:
    """Return the day key for an explicit day, defaulting to ``now``'s day."""
    if day is None:
        return day_key(now)
    if isinstance(day, datetime):
        return day_key(day)
    if isinstance(day, date):
        return day.isoformat()
    try:
        return date.fromisoformat(day).isoformat()
    except ValueError as exc:
        raise ValidationError(f"Invalid day key: {day!r}") from exc
