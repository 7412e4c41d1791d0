"""Date Utilities — epoch-millisecond clock and day-boundary helpers.

Invariants:
    - All timestamps are int epoch milliseconds; 0 means "unset"
    - Day boundaries are computed in local time (what a user means by "today")
"""

import time
from datetime import datetime, timedelta


ONE_SECOND: int = 1000
ONE_MINUTE: int = 60 * ONE_SECOND
ONE_HOUR: int = 60 * ONE_MINUTE
ONE_DAY: int = 24 * ONE_HOUR
ONE_WEEK: int = 7 * ONE_DAY
ONE_MONTH: int = 30 * ONE_DAY


def now() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def to_datetime(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000)


def to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def end_of_day(millis: int, days_offset: int = 0) -> int:
    """23:59:59 local time on the day of `millis`, shifted by `days_offset` days."""
    day = to_datetime(millis) + timedelta(days=days_offset)
    return to_millis(day.replace(hour=23, minute=59, second=59, microsecond=0))


def noon(millis: int) -> int:
    """12:00:00 local time on the day of `millis`."""
    day = to_datetime(millis)
    return to_millis(day.replace(hour=12, minute=0, second=0, microsecond=0))
