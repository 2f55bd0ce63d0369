import calendar
import datetime
from typing import Optional


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_aware(dt: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Treats naive datetimes (e.g. read back from SQLite) as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def shift_months(dt: datetime.datetime, months: int) -> datetime.datetime:
    """
    Moves a datetime by a number of calendar months, clamping the day to the
    length of the target month (Mar 31 - 1 month -> Feb 28/29).
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)
