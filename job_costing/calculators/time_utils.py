"""Time calculation utilities for job costing.

This module provides the low-level time helpers used by the calculators:
- Parsing "HH:MM" / "HH:MM:SS" clock times
- Converting clock times to minutes since midnight
- Elapsed duration between two clock times with midnight rollover
- Rounding hours up to the next billing increment
- Naming the weekday of a job date

Clock times carry no date: an end earlier than its start is read as the
next day.
"""

import datetime as dt
from decimal import ROUND_CEILING, Decimal
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

ClockTime = Union[str, dt.time, None]


def parse_clock_time(value: ClockTime) -> Optional[dt.time]:
    """Parse a clock time, returning None when absent or malformed.

    Args:
        value: "HH:MM", "HH:MM:SS", a dt.time, or None

    Returns:
        The parsed time (seconds dropped), or None

    Example:
        >>> parse_clock_time("08:50")
        datetime.time(8, 50)
        >>> parse_clock_time("22:15:30")
        datetime.time(22, 15)
        >>> parse_clock_time("8 o'clock") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, dt.time):
        return value.replace(second=0, microsecond=0)
    text = str(value).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return dt.datetime.strptime(text, fmt).time().replace(second=0)
        except ValueError:
            continue
    return None


def convert_time_to_minutes(time: dt.time) -> int:
    """Convert a dt.time object to minutes since midnight.

    Example:
        >>> convert_time_to_minutes(dt.time(9, 30))
        570
        >>> convert_time_to_minutes(dt.time(23, 59))
        1439
    """
    return time.hour * 60 + time.minute


def calculate_duration_minutes(start: ClockTime, end: ClockTime) -> int:
    """Calculate elapsed minutes between two clock times.

    An end earlier than the start rolls over midnight. Equal times are the
    same instant (0 minutes, never 24 hours). Missing or malformed input
    yields 0.

    Example:
        >>> calculate_duration_minutes("08:00", "08:50")
        50
        >>> calculate_duration_minutes("22:00", "02:00")
        240
        >>> calculate_duration_minutes("07:00", None)
        0
    """
    start_time = parse_clock_time(start)
    end_time = parse_clock_time(end)
    if start_time is None or end_time is None:
        return 0

    start_minutes = convert_time_to_minutes(start_time)
    end_minutes = convert_time_to_minutes(end_time)

    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY

    return end_minutes - start_minutes


def calculate_duration_hours(start: ClockTime, end: ClockTime) -> Decimal:
    """Calculate elapsed hours between two clock times (exact, unrounded).

    Example:
        >>> calculate_duration_hours("22:00", "02:00")
        Decimal('4')
        >>> calculate_duration_hours("08:00", "08:50").quantize(Decimal("0.001"))
        Decimal('0.833')
    """
    return Decimal(calculate_duration_minutes(start, end)) / Decimal("60")


def round_up_hours(
    hours: Union[Decimal, float, int], increment_minutes: int = 15
) -> Decimal:
    """Round hours up to the next billing increment.

    The hours are converted to minutes and rounded up to a whole minute,
    then up to the next multiple of ``increment_minutes``. Partial
    increments always round up (ceiling, not nearest).

    Args:
        hours: Hours to round
        increment_minutes: Billing increment (default: 15)

    Returns:
        Rounded hours

    Example:
        >>> round_up_hours(Decimal("1.01"))
        Decimal('1.25')
        >>> round_up_hours(Decimal("1.25"))
        Decimal('1.25')
        >>> round_up_hours(Decimal("0"))
        Decimal('0')
    """
    if not isinstance(hours, Decimal):
        hours = Decimal(str(hours))
    minutes = (hours * 60).to_integral_value(rounding=ROUND_CEILING)
    increments = (minutes / increment_minutes).to_integral_value(
        rounding=ROUND_CEILING
    )
    return increments * increment_minutes / Decimal("60")


def day_of_week(date: Optional[dt.date]) -> Optional[str]:
    """English weekday name of a date, or None.

    Example:
        >>> day_of_week(dt.date(2024, 3, 4))
        'Monday'
    """
    if date is None:
        return None
    return date.strftime("%A")
