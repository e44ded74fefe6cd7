"""Injectable "current time" used by the appointment rules.

Everything here is UTC. Routers receive the clock through ``Depends(get_clock)``
so tests can pin it with ``app.dependency_overrides``.
"""

from datetime import datetime, timezone


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant (naive values are taken as UTC)."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


_system_clock = SystemClock()


def get_clock() -> SystemClock:
    return _system_clock
