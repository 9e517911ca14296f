from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple


def parse_day(value: Optional[str]) -> Optional[date]:
    """Accepts 'YYYY-MM-DD' or a full ISO timestamp; empty means None."""
    if not value or not value.strip():
        return None
    s = value.strip()
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time(23, 59, 59, 999000))


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def day_range(
    start: Optional[str],
    end: Optional[str],
    default_start: date,
    default_end: date,
) -> Tuple[datetime, datetime]:
    """Inclusive [start 00:00, end 23:59:59.999] window with per-side defaults."""
    start_d = parse_day(start) or default_start
    end_d = parse_day(end) or default_end
    return start_of_day(start_d), end_of_day(end_d)


def current_month(today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    first = today.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return first, next_first - timedelta(days=1)


def last_n_days(n: int, today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    return today - timedelta(days=n), today
