from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from app.core.config import settings


def utc_naive_now() -> datetime:
    """Naive UTC for comparison with TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC; naive input is taken to be UTC already."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


class TimePolicy:
    """Current time and business hours.

    All instants handed in and out are naive UTC. Business hours are wall-clock
    hours in ``timezone`` and apply to every day of the week.
    """

    def __init__(
        self,
        timezone: str = "UTC",
        open_hour: int = 9,
        close_hour: int = 17,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tz = ZoneInfo(timezone)
        self.open_hour = open_hour
        self.close_hour = close_hour
        self._clock = clock or utc_naive_now

    def now(self) -> datetime:
        return to_naive_utc(self._clock())

    def _local_to_utc(self, d: date, hour: int) -> datetime:
        local = datetime.combine(d, time(hour=hour), tzinfo=self.tz)
        return local.astimezone(UTC).replace(tzinfo=None)

    def business_hours(self, d: date) -> tuple[datetime, datetime]:
        return self._local_to_utc(d, self.open_hour), self._local_to_utc(d, self.close_hour)

    def day_bounds(self, d: date) -> tuple[datetime, datetime]:
        """UTC [start, end) of the local calendar day ``d``."""
        return self._local_to_utc(d, 0), self._local_to_utc(d + timedelta(days=1), 0)

    def local_date(self, instant: datetime) -> date:
        return instant.replace(tzinfo=UTC).astimezone(self.tz).date()

    def today(self) -> date:
        return self.local_date(self.now())


def get_time_policy() -> TimePolicy:
    return TimePolicy(
        timezone=settings.business_timezone,
        open_hour=settings.business_start_hour,
        close_hour=settings.business_end_hour,
    )
