"""When to remind the active picker about their window.

A normal 48-hour window gets, besides the turn-start notice:
- 7 PM Pacific on the day the window opens
- 9 AM Pacific the next day
- 9 AM Pacific on the day the window closes
- a final warning 2 hours before the deadline

Fast testing windows (10 minutes) compress these to 2, 5 and 8 minutes
after the start and 2 minutes before the end.

Delivery and content of the messages live elsewhere; this only decides
which reminder, if any, is due.
"""

from datetime import datetime, timedelta
from enum import Enum

from cabindraft.models import DraftStatus
from cabindraft.timing import PACIFIC, as_instant, pacific_wall_clock


class ReminderKind(Enum):
    TURN_START = "turn_start"
    SAME_DAY_EVENING = "same_day_evening"
    NEXT_DAY_MORNING = "next_day_morning"
    LAST_DAY_MORNING = "last_day_morning"
    FINAL_WARNING = "final_warning"


FINAL_WARNING_LEAD = timedelta(hours=2)
FAST_FINAL_WARNING_LEAD = timedelta(minutes=2)

# Most urgent first.
_PRIORITY = [
    ReminderKind.FINAL_WARNING,
    ReminderKind.LAST_DAY_MORNING,
    ReminderKind.NEXT_DAY_MORNING,
    ReminderKind.SAME_DAY_EVENING,
]


def reminder_schedule(window_start: datetime, window_end: datetime,
                      fast_mode: bool = False) -> dict[ReminderKind, datetime]:
    """Instant at which each reminder becomes due for one window."""
    if fast_mode:
        return {
            ReminderKind.TURN_START: window_start,
            ReminderKind.SAME_DAY_EVENING: window_start + timedelta(minutes=2),
            ReminderKind.NEXT_DAY_MORNING: window_start + timedelta(minutes=5),
            ReminderKind.LAST_DAY_MORNING: window_start + timedelta(minutes=8),
            ReminderKind.FINAL_WARNING: window_end - FAST_FINAL_WARNING_LEAD,
        }

    first_day = window_start.astimezone(PACIFIC).date()
    last_day = window_end.astimezone(PACIFIC).date()
    return {
        ReminderKind.TURN_START: window_start,
        ReminderKind.SAME_DAY_EVENING: pacific_wall_clock(first_day, 19),
        ReminderKind.NEXT_DAY_MORNING: pacific_wall_clock(first_day + timedelta(days=1), 9),
        ReminderKind.LAST_DAY_MORNING: pacific_wall_clock(last_day, 9),
        ReminderKind.FINAL_WARNING: window_end - FINAL_WARNING_LEAD,
    }


def due_reminder(status: DraftStatus, now: datetime,
                 sent: set[ReminderKind] | frozenset = frozenset(),
                 fast_mode: bool = False) -> ReminderKind | None:
    """The one reminder to send now for the active window, or None.

    The turn-start notice always goes first; after that the most urgent
    unsent reminder whose time has come wins. The final warning is only
    due before the deadline.
    """
    if status.active_picker is None:
        return None
    if status.window_starts is None or status.window_ends is None:
        return None
    if ReminderKind.TURN_START not in sent:
        return ReminderKind.TURN_START

    now = as_instant(now)
    times = reminder_schedule(status.window_starts, status.window_ends, fast_mode)
    for kind in _PRIORITY:
        if kind in sent or now < times[kind]:
            continue
        if kind is ReminderKind.FINAL_WARNING and now >= status.window_ends:
            continue
        return kind
    return None
