"""
Calendar-day utilities.

Every "same day" decision in the engine goes through a single DayCalendar bound
to one fixed timezone. Instants are converted to local wall-clock time first and
only then truncated to a date, so midnight and DST boundaries are handled by
zoneinfo rather than by raw datetime arithmetic.

Weekday numbers follow the 1..7 convention with 1=Sunday, 7=Saturday.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

SUNDAY = 1
MONDAY = 2
TUESDAY = 3
WEDNESDAY = 4
THURSDAY = 5
FRIDAY = 6
SATURDAY = 7


@dataclass(frozen=True)
class DayCalendar:
    timezone: str = "UTC"
    tz: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tz", ZoneInfo(self.timezone))

    def localize(self, instant: datetime) -> datetime:
        """Return the instant as wall-clock time in this calendar's zone.

        Naive datetimes are taken to be local wall-clock time already.
        """
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def day_of(self, instant: datetime | date) -> date:
        if isinstance(instant, datetime):
            return self.localize(instant).date()
        return instant

    def same_day(self, a: datetime | date, b: datetime | date) -> bool:
        return self.day_of(a) == self.day_of(b)

    def start_of_day(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz)

    def tomorrow(self, instant: datetime | date) -> date:
        return add_days(self.day_of(instant), 1)


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def weekday_number(day: date) -> int:
    """1=Sunday .. 7=Saturday."""
    return day.isoweekday() % 7 + 1
