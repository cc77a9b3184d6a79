"""
Regular US equity session check, used only to gate automatic quote refresh.
"""

from datetime import datetime

import pytz

from tracker.config import MARKET_CLOSE_MINUTES, MARKET_OPEN_MINUTES, MARKET_TIMEZONE


def is_market_open(now: datetime | None = None) -> bool:
    """
    True on weekdays between 9:30 AM and 4:00 PM Eastern.

    Args:
        now: Aware datetime (any zone) or naive UTC. Defaults to the current time.
    """
    et_tz = pytz.timezone(MARKET_TIMEZONE)
    if now is None:
        now_et = datetime.now(et_tz)
    elif now.tzinfo is None:
        now_et = pytz.utc.localize(now).astimezone(et_tz)
    else:
        now_et = now.astimezone(et_tz)

    if now_et.weekday() >= 5:  # Sat/Sun
        return False

    et_minutes = now_et.hour * 60 + now_et.minute
    return MARKET_OPEN_MINUTES <= et_minutes < MARKET_CLOSE_MINUTES
