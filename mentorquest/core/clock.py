"""Clock abstraction so day-boundary logic can be driven deterministically.

All calendar arithmetic in the engine uses UTC days.
"""
from datetime import date, datetime, timedelta, timezone


class Clock:
    """Source of the current instant."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Manually advanced clock (tests, replays)."""

    def __init__(self, current: datetime):
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> None:
        self.current = self.current + timedelta(days=days, hours=hours, minutes=minutes)

    def set(self, current: datetime) -> None:
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self.current = current


def as_day(value: datetime | date | None) -> date | None:
    """Normalize a stored timestamp to its UTC calendar day.

    SQLite hands back naive datetimes; those are treated as UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def sort_key(value: datetime) -> datetime:
    """Naive UTC form, so stored (naive) and in-memory (aware) values compare."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def days_between(earlier: datetime | date, later: datetime | date) -> int:
    return (as_day(later) - as_day(earlier)).days


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_clock: Clock = SystemClock()


def get_clock() -> Clock:
    return _clock
