"""Tests for calendar-day normalization (midnight and DST boundaries)"""
from datetime import date, datetime, timezone

from dailytodo.domain.calendar import (
    DayCalendar, add_days, weekday_number, SUNDAY, MONDAY, SATURDAY,
)


class TestDayOf:
    def test_utc_instant_late_evening_is_next_local_day(self, calendar):
        # 23:30 UTC on Jan 24 is 00:30 in Berlin on Jan 25
        instant = datetime(2026, 1, 24, 23, 30, tzinfo=timezone.utc)
        assert calendar.day_of(instant) == date(2026, 1, 25)

    def test_same_instant_other_calendar(self):
        instant = datetime(2026, 1, 24, 23, 30, tzinfo=timezone.utc)
        assert DayCalendar("UTC").day_of(instant) == date(2026, 1, 24)
        assert DayCalendar("America/New_York").day_of(instant) == date(2026, 1, 24)

    def test_naive_instant_is_local_wall_clock(self, calendar):
        assert calendar.day_of(datetime(2026, 1, 24, 23, 59)) == date(2026, 1, 24)

    def test_date_passes_through(self, calendar):
        assert calendar.day_of(date(2026, 1, 24)) == date(2026, 1, 24)

    def test_spring_forward_boundary(self, calendar):
        # Berlin switches to CEST on 2026-03-29; offset goes +1 -> +2
        before = datetime(2026, 3, 28, 22, 59, tzinfo=timezone.utc)  # 23:59 CET
        after = datetime(2026, 3, 28, 23, 0, tzinfo=timezone.utc)  # 00:00 CET
        assert calendar.day_of(before) == date(2026, 3, 28)
        assert calendar.day_of(after) == date(2026, 3, 29)

        late = datetime(2026, 3, 29, 22, 30, tzinfo=timezone.utc)  # 00:30 CEST next day
        assert calendar.day_of(late) == date(2026, 3, 30)

    def test_fall_back_boundary(self, calendar):
        # 2026-10-25: CEST -> CET, the local day is 25 hours long
        first = datetime(2026, 10, 24, 22, 0, tzinfo=timezone.utc)  # 00:00 CEST
        last = datetime(2026, 10, 25, 22, 59, tzinfo=timezone.utc)  # 23:59 CET
        assert calendar.day_of(first) == date(2026, 10, 25)
        assert calendar.day_of(last) == date(2026, 10, 25)
        assert calendar.same_day(first, last)


class TestHelpers:
    def test_same_day(self, calendar):
        a = datetime(2026, 1, 24, 0, 1, tzinfo=calendar.tz)
        b = datetime(2026, 1, 24, 23, 59, tzinfo=calendar.tz)
        c = datetime(2026, 1, 25, 0, 0, tzinfo=calendar.tz)
        assert calendar.same_day(a, b)
        assert not calendar.same_day(b, c)

    def test_tomorrow_crosses_month_and_year(self, calendar):
        assert calendar.tomorrow(date(2026, 1, 31)) == date(2026, 2, 1)
        assert calendar.tomorrow(datetime(2026, 12, 31, 23, 0, tzinfo=calendar.tz)) == date(2027, 1, 1)

    def test_add_days(self):
        assert add_days(date(2026, 3, 1), -1) == date(2026, 2, 28)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_start_of_day_is_local_midnight(self, calendar):
        start = calendar.start_of_day(date(2026, 3, 29))
        assert start.hour == 0 and start.minute == 0
        assert calendar.day_of(start) == date(2026, 3, 29)

    def test_weekday_number_sunday_first(self):
        assert weekday_number(date(2026, 1, 25)) == SUNDAY
        assert weekday_number(date(2026, 1, 26)) == MONDAY
        assert weekday_number(date(2026, 1, 24)) == SATURDAY
