"""
FastAPI dependencies (DB session, calendar, reference instant)
"""
from datetime import datetime

from fastapi import Depends

from dailytodo.config import get_settings
from dailytodo.domain.calendar import DayCalendar
from dailytodo.infrastructure.db.session import get_db as _get_db


# Re-export get_db for routers
get_db = _get_db


def get_calendar() -> DayCalendar:
    return get_settings().get_calendar()


def get_now(calendar: DayCalendar = Depends(get_calendar)) -> datetime:
    """
    Reference instant for the request. The clock is read here, at the HTTP
    edge, and passed down explicitly; tests override this dependency.
    """
    return datetime.now(tz=calendar.tz)
