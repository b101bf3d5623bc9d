"""Clock & zone: current instant and the civil date used by admission checks."""
from datetime import date, datetime, timedelta, timezone

import pytz

# Pickup dates are always judged in Portuguese civil time.
CIVIL_ZONE = pytz.timezone("Europe/Lisbon")


class Clock:
    """System clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().astimezone(CIVIL_ZONE).date()


class FixedClock(Clock):
    """Clock frozen at a given instant (tests)."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> None:
        self._instant = self._instant + timedelta(**kwargs)


_system_clock = Clock()


def get_clock() -> Clock:
    """FastAPI dependency: overridden in tests."""
    return _system_clock
