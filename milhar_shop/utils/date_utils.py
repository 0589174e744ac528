"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import List


def now_local() -> datetime:
    """Current instant as a timezone-aware datetime in the machine's local zone"""
    return datetime.now().astimezone()


def local_date(moment: datetime) -> date:
    """Calendar date of a datetime in local time (naive values are taken as local)"""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def start_of_week(day: date) -> date:
    """Sunday on or before the given day (weeks start on Sunday in pt-BR)"""
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(day: date) -> date:
    return day.replace(day=1)
