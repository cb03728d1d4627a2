"""
Business timezone helpers

Offer validity dates, happy-hour windows and the evaluation time are all
compared in the shop's timezone (BUSINESS_TIMEZONE). A datetime without
tzinfo is taken to be shop-local wall-clock time.
"""

from datetime import datetime, time
from typing import Optional

import pytz

from retail_pos.core.config import settings


def get_business_timezone(name: Optional[str] = None):
    """Return the pytz timezone for `name`, or the configured business timezone."""
    return pytz.timezone(name or settings.BUSINESS_TIMEZONE)


def _is_aware(value) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def to_aware(value: datetime, tz=None) -> datetime:
    """Localize a naive datetime to the business timezone; aware ones pass through."""
    if _is_aware(value):
        return value
    tz = tz or get_business_timezone()
    return tz.localize(value)


def to_business_time(value: time, tz=None) -> time:
    """
    Wall-clock time in the business timezone, without tzinfo.

    A time carrying an offset (e.g. "10:30:00Z") is converted using today's
    date, so the offset of the business timezone on that date applies.
    """
    if not _is_aware(value):
        return value
    tz = tz or get_business_timezone()
    reference = datetime.combine(datetime.now(tz).date(), value)
    return reference.astimezone(tz).time()


def business_clock(value: datetime, tz=None) -> time:
    """Time of day of `value` as read on a clock in the shop."""
    tz = tz or get_business_timezone()
    return to_aware(value, tz).astimezone(tz).time()


def utc_now() -> datetime:
    return datetime.now(pytz.utc)
