"""
Calendar arithmetic for schedules and projection windows.

Every function here is a pure function of its arguments.
Month arithmetic clamps to the last day of shorter months,
but always aims for the anchor day, so a schedule that starts
on the 31st returns to the 31st whenever the month allows it
and stepping back one period is an exact inverse.
"""

import calendar
from datetime import date, datetime, timedelta

from finance_ledger.models.enums import PaymentFrequency, ResetFrequency

WEEK = timedelta(days=7)

MONTHS_PER_PERIOD = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.YEARLY: 12,
}


def _clamp_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def add_months(value: date, months: int, anchor_day: int | None = None) -> date:
    """
    Move a date by a whole number of calendar months.

    The result lands on anchor_day (value.day when not given),
    clamped to the length of the target month.
    """
    total = value.year * 12 + (value.month - 1) + months
    year, month_index = divmod(total, 12)
    return _clamp_day(year, month_index + 1, anchor_day or value.day)


def _step(value: date, frequency: PaymentFrequency, direction: int,
          anchor_day: int | None) -> date:
    frequency = PaymentFrequency(frequency)
    if frequency == PaymentFrequency.WEEKLY:
        return value + direction * WEEK
    return add_months(
        value, direction * MONTHS_PER_PERIOD[frequency], anchor_day
    )


def advance(value: date, frequency: PaymentFrequency,
            anchor_day: int | None = None) -> date:
    """Next due date, exactly one period after value."""
    return _step(value, frequency, 1, anchor_day)


def rollback(value: date, frequency: PaymentFrequency,
             anchor_day: int | None = None) -> date:
    """
    Previous due date.

    rollback(advance(d, f, a), f, a) == d holds whenever the same
    anchor day a is passed to both calls. Without it the day of
    the clamped date is used, so 2024-03-31 -> 2024-04-30 steps
    back to 2024-03-30. Stored schedules always carry anchor_day.
    """
    return _step(value, frequency, -1, anchor_day)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=0)


def reset_boundary(
    now: datetime,
    reset_frequency: ResetFrequency,
    reset_day: int | None = None,
) -> datetime:
    """
    The next reset instant of an account's budgeting period.

    - daily:   23:59:59 today
    - weekly:  23:59:59 on Sunday of the current Monday-start week
    - monthly: midnight of the next reset_day (default 1) strictly
               after now; clamped to the month length
    """
    reset_frequency = ResetFrequency(reset_frequency)

    if reset_frequency == ResetFrequency.DAILY:
        return end_of_day(now)

    if reset_frequency == ResetFrequency.WEEKLY:
        days_until_sunday = 6 - now.weekday()
        return end_of_day(now + timedelta(days=days_until_sunday))

    day = reset_day or 1
    candidate = datetime.combine(_clamp_day(now.year, now.month, day), datetime.min.time())
    if candidate <= now:
        candidate = datetime.combine(
            add_months(candidate.date(), 1, day), datetime.min.time()
        )
    return candidate
