"""Calendar key derivation.

Day and week keys are ``YYYY-MM-DD`` strings in the viewer's local calendar.
Weeks start on Sunday.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]


def local_date(now: Optional[DateLike] = None) -> date:
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        # Aware datetimes are converted to local time first
        if now.tzinfo is not None:
            now = now.astimezone()
        return now.date()
    return now


def day_key(now: Optional[DateLike] = None) -> str:
    """Return the local calendar date as ``YYYY-MM-DD``."""
    return local_date(now).isoformat()


def week_start(now: Optional[DateLike] = None) -> date:
    """Return the most recent Sunday, inclusive of today."""
    d = local_date(now)
    # Python weekday: Monday=0 ... Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_key(now: Optional[DateLike] = None) -> str:
    """Return the most recent Sunday (inclusive) as ``YYYY-MM-DD``."""
    return week_start(now).isoformat()
