import math
from datetime import datetime, timedelta
from typing import Optional

MIN_FIRE_DELAY_SECONDS = 5


def next_occurrence(hour: int, minute: int, after: datetime) -> datetime:
    """The first hour:minute strictly after ``after``, on the same wall clock"""
    target = after.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= after:
        target += timedelta(days=1)
    return target


def next_fire_delay(hour: int, minute: int, now: Optional[datetime] = None) -> int:
    """Seconds from ``now`` until the next local hour:minute.

    A time that has already passed today (or is exactly now) rolls over to
    tomorrow. The result is never below 5 seconds. Works on the wall clock:
    a DST change between now and the target is not compensated.
    """
    if now is None:
        now = datetime.now()

    seconds = (next_occurrence(hour, minute, now) - now).total_seconds()
    return max(MIN_FIRE_DELAY_SECONDS, int(math.floor(seconds + 0.5)))
