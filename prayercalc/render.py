import logging
import math
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .methods import PRAYER_ORDER

logger = logging.getLogger(__name__)

NO_TIME = "--:--"


def get_timezone(tz_name):
    """ZoneInfo for an IANA name; missing or unknown names resolve to UTC."""
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning(f"[TZ] Unknown timezone {tz_name!r}, using UTC")
        return timezone.utc


def tz_hours_for_day(day, tz_name):
    """UTC offset in hours at local midnight of `day`."""
    dt = datetime(day.year, day.month, day.day, 0, 0, 0, tzinfo=get_timezone(tz_name))
    offset = dt.utcoffset()
    return offset.total_seconds() / 3600.0 if offset else 0.0


def wrap_hours(value):
    return ((value % 24) + 24) % 24


def format_local_time(utc_hours, offset_hours, adjustment_minutes=0):
    """'HH:MM' for a UTC fractional hour shifted to local time; NaN gives '--:--'."""
    if not math.isfinite(utc_hours):
        return NO_TIME
    local = wrap_hours(utc_hours + offset_hours + adjustment_minutes / 60.0)
    hours = int(local)
    minutes = int(round((local - hours) * 60))
    if minutes == 60:
        minutes = 0
        hours += 1
    hours %= 24
    return f"{hours:02d}:{minutes:02d}"


def to_12h(value):
    if value == NO_TIME:
        return value
    hours, minutes = (int(part) for part in value.split(":"))
    suffix = "AM" if hours < 12 else "PM"
    return f"{hours % 12 or 12}:{minutes:02d} {suffix}"


def render_table(result, format_24h=True):
    header = result.city or result.date.isoformat()
    lines = [f"{header} ({result.meta.calculation_method}, Asr: {result.meta.madhab})"]
    if result.city:
        lines.append(result.date.isoformat())
    lines.append(result.hijri_date)
    for label in PRAYER_ORDER:
        value = getattr(result.times, label.lower())
        lines.append(f"{label:<8} {value if format_24h else to_12h(value)}")
    return "\n".join(lines)
