"""Pacific-time helpers for turn windows.

Every turn window officially opens at 10:00 AM in America/Los_Angeles.
All instants returned here are timezone-aware UTC datetimes so that window
arithmetic (start + 48 hours) is absolute and unaffected by DST changes.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

PACIFIC = ZoneInfo("America/Los_Angeles")
OFFICIAL_START_HOUR = 10
STANDARD_UTC_OFFSET_HOURS = 8  # PST


def as_instant(value) -> datetime | None:
    """Coerce a stored timestamp into an aware UTC datetime.

    Accepts aware or naive datetimes (naive = Pacific wall clock), dates
    (midnight Pacific) and ISO-8601 strings. Returns None for anything that
    cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(s)
        except ValueError:
            logger.debug("Unparseable timestamp %r", value)
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=PACIFIC)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time(0), tzinfo=PACIFIC).astimezone(timezone.utc)
    return None


def as_pacific_date(value) -> date | None:
    """Calendar date of a value as seen on a Pacific wall clock."""
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    instant = as_instant(value)
    if instant is None:
        return None
    return instant.astimezone(PACIFIC).date()


def pacific_wall_clock(day: date, hour: int, minute: int = 0) -> datetime:
    """Instant at which Pacific wall clocks read hour:minute on the given day.

    Starts from a guess at the standard offset (UTC-8) and corrects by the
    difference between the wanted and observed Pacific hour, which is one
    hour off whenever daylight time is in effect on that day.
    """
    guess = datetime(day.year, day.month, day.day, tzinfo=timezone.utc) + timedelta(
        hours=hour + STANDARD_UTC_OFFSET_HOURS, minutes=minute
    )
    observed = guess.astimezone(PACIFIC).replace(tzinfo=None)
    wanted = datetime.combine(day, time(hour, minute))
    return guess + (wanted - observed)


def official_start(instant) -> datetime | None:
    """Snap an instant to the next official 10:00 AM Pacific start.

    Strictly before 10:00:00 Pacific snaps to 10:00 the same day. At or after
    10:00:00 snaps to 10:00 the following day; exactly 10:00:00 counts as
    already past.
    """
    instant = as_instant(instant)
    if instant is None:
        return None
    local = instant.astimezone(PACIFIC)
    target_day = local.date()
    if local.time() >= time(OFFICIAL_START_HOUR):
        target_day += timedelta(days=1)
    return pacific_wall_clock(target_day, OFFICIAL_START_HOUR)


def is_official_start(instant: datetime) -> bool:
    local = instant.astimezone(PACIFIC)
    return (local.hour, local.minute, local.second, local.microsecond) == (
        OFFICIAL_START_HOUR, 0, 0, 0,
    )


def to_pacific(instant: datetime | None) -> datetime | None:
    if instant is None:
        return None
    return instant.astimezone(PACIFIC)
