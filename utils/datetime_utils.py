from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

import pytz

Clock = Callable[[], datetime]

def get_timezone(name: Optional[str]):
    """pytz-зона по имени, None означает локальную зону процесса"""
    if not name:
        return None
    return pytz.timezone(name)

def local_now(tz=None) -> datetime:
    """Текущее локальное время (по зоне tz или по зоне процесса)"""
    if tz is not None:
        return datetime.now(pytz.utc).astimezone(tz)
    return datetime.now().astimezone()

def make_clock(tz=None) -> Clock:
    return lambda: local_now(tz)

def to_date_key(moment: Union[datetime, date]) -> str:
    """Ключ дня YYYY-MM-DD по настенному времени moment (без перевода в UTC)"""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.strftime("%Y-%m-%d")

def parse_date_key(date_key: str) -> date:
    return datetime.strptime(date_key, "%Y-%m-%d").date()

def shift_date_key(date_key: str, days: int) -> str:
    return to_date_key(parse_date_key(date_key) + timedelta(days=days))

def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute

def format_date(date_key: str, fmt: str = "%b %d, %Y") -> str:
    return parse_date_key(date_key).strftime(fmt)
