"""
Centralized Timezone Utilities

Market data windows and signal timestamps are all expressed in UTC,
since the watch-list mixes US equities with 24/7 crypto pairs.
"""

import pytz
from datetime import datetime, timedelta, date as date_type


UTC = pytz.UTC


def utc_now() -> datetime:
    """Get current timezone-aware datetime in UTC."""
    return datetime.now(UTC)


def utc_today() -> date_type:
    return utc_now().date()


def date_window(days: int, end: date_type = None):
    """Return (from, to) as YYYY-MM-DD strings covering the trailing `days`."""
    end = end or utc_today()
    start = end - timedelta(days=days)
    return start.strftime("%Y-%m-%d"), end.strftime("%Y-%m-%d")
