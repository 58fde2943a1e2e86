# utils/datetime_utils.py

import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz

DATE_KEY_FORMAT = "%Y-%m-%d"
MONTH_KEY_FORMAT = "%Y-%m"

DEFAULT_TZ = pytz.timezone("UTC")


def get_timezone(name: Optional[str] = None):
    if not name:
        return DEFAULT_TZ
    return pytz.timezone(name)


def now_local(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(get_timezone(tz_name))


def today_local(tz_name: Optional[str] = None) -> date:
    """Текущая календарная дата в заданном часовом поясе"""
    return now_local(tz_name).date()


def date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(value: str) -> date:
    return datetime.strptime(value, DATE_KEY_FORMAT).date()


def is_date_key(value) -> bool:
    """Проверка канонического ключа YYYY-MM-DD (ровно то, что выдаёт date_key)"""
    if not isinstance(value, str):
        return False
    try:
        return date_key(parse_date_key(value)) == value
    except ValueError:
        return False


def parse_month_key(value: str) -> date:
    """'2024-03' -> date(2024, 3, 1)"""
    return datetime.strptime(value, MONTH_KEY_FORMAT).date()


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last)


def days_between(start: date, end: date) -> List[date]:
    """Все даты интервала включительно"""
    if end < start:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
