"""
Clock helpers for stamping entity timestamps.

All timestamps are timezone-aware. When ``RESTAURANT_TIMEZONE`` is set they
are expressed in restaurant local time, otherwise in UTC.
"""
from datetime import datetime
from typing import Callable, Optional

import pytz

from kitchenops.core.config import get_settings

Clock = Callable[[], datetime]


def now(restaurant_timezone: Optional[str] = None) -> datetime:
    """
    Current time as an aware datetime.

    Args:
        restaurant_timezone: IANA timezone string. Falls back to the configured
                             RESTAURANT_TIMEZONE, then to UTC.
    """
    tz_name = restaurant_timezone or get_settings().RESTAURANT_TIMEZONE
    if tz_name:
        return datetime.now(pytz.timezone(tz_name))
    return datetime.now(pytz.UTC)


def new_order_id(clock: Optional[Clock] = None, prefix: Optional[str] = None) -> str:
    """Order id in the form ``ORD_YYYYmmddHHMMSS``."""
    stamp = (clock or now)()
    return f"{prefix or get_settings().ORDER_ID_PREFIX}{stamp.strftime('%Y%m%d%H%M%S')}"
