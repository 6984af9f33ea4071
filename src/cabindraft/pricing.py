"""Nightly maintenance-fee pricing for a stay.

Rates:
- Weeknights (Sun-Thu nights): 100
- Weekend nights (Fri, Sat): 125
- Weekly discount: 100 off per full 7 nights (one free weeknight)
"""

from datetime import timedelta

from cabindraft.models import ActionKind, BookingCost, CostBreakdown
from cabindraft.timing import as_pacific_date

WEEKNIGHT_RATE = 100
WEEKEND_RATE = 125
WEEKLY_DISCOUNT = 100
WEEKEND_NIGHTS = (4, 5)  # Friday, Saturday


def _empty_cost() -> BookingCost:
    return BookingCost(total=0, nights=0, average_rate=0, breakdown=None)


def calculate_booking_cost(check_in, check_out) -> BookingCost:
    """Cost of staying from check_in to check_out (check-out night not charged).

    Accepts dates, datetimes or ISO strings. A missing date or a range of
    zero or fewer nights costs nothing.
    """
    start = as_pacific_date(check_in)
    end = as_pacific_date(check_out)
    if start is None or end is None:
        return _empty_cost()

    nights = (end - start).days
    if nights <= 0:
        return _empty_cost()

    weeknights = 0
    weekends = 0
    for offset in range(nights):
        night = start + timedelta(days=offset)
        if night.weekday() in WEEKEND_NIGHTS:
            weekends += 1
        else:
            weeknights += 1

    weeknight_total = weeknights * WEEKNIGHT_RATE
    weekend_total = weekends * WEEKEND_RATE
    full_weeks = nights // 7
    discount = full_weeks * WEEKLY_DISCOUNT
    total = weeknight_total + weekend_total - discount

    return BookingCost(
        total=total,
        nights=nights,
        average_rate=total / nights,
        breakdown=CostBreakdown(
            weeknights=weeknights,
            weekends=weekends,
            weeknight_total=weeknight_total,
            weekend_total=weekend_total,
            discount=discount,
            full_weeks=full_weeks,
        ),
    )


def cost_for_action(action) -> BookingCost:
    """Cost of the stay an action books. Passes and cancellations cost nothing."""
    if action.kind is not ActionKind.BOOKING:
        return _empty_cost()
    return calculate_booking_cost(action.check_in, action.check_out)
