"""
Day Count — Accrual Conventions and Month Arithmetic

Year fractions and raw day counts for the five accrual bases:
- 0  US (NASD/SIA) 30/360: February-end and day-31 clamping
- 1  Actual/Actual: range split at every 1 January, each piece prorated
     by the length of its own year (365 or 366)
- 2  Actual/360
- 3  Actual/365
- 4  European 30E/360: day 31 becomes 30 on both ends

Plus DAYS360 and EDATE/EOMONTH-style month arithmetic.

CRITICAL INVARIANTS:
1. year_fraction(a, b) == -year_fraction(b, a)
2. Actual/Actual over whole calendar years is an integer
3. Month arithmetic clamps to the last valid day of the target month
"""

import calendar
from datetime import date

from src.core.domain.conventions import DayCountBasis
from src.core.domain.outcomes import DomainViolation


# =============================================================================
# CALENDAR HELPERS
# =============================================================================


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_last_day_of_month(d: date) -> bool:
    return d.day == days_in_month(d.year, d.month)


def is_last_day_of_february(d: date) -> bool:
    return d.month == 2 and is_last_day_of_month(d)


def add_months(d: date, months: int) -> date:
    """
    Shift a date by whole months, clamping the day to the target month (EDATE).

    Examples:
        >>> add_months(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
        >>> add_months(date(2024, 3, 15), -14)
        datetime.date(2023, 1, 15)
    """
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    if not 1 <= year <= 9999:
        raise DomainViolation(f"date out of range after adding {months} months to {d}")
    return date(year, month, min(d.day, days_in_month(year, month)))


def end_of_month(d: date, months: int = 0) -> date:
    """
    Last day of the month `months` away from d (EOMONTH).

    Examples:
        >>> end_of_month(date(2024, 1, 15), 1)
        datetime.date(2024, 2, 29)
    """
    shifted = add_months(d.replace(day=1), months)
    return shifted.replace(day=days_in_month(shifted.year, shifted.month))


# =============================================================================
# DAY COUNTS
# =============================================================================


def _thirty_360(start: date, end: date, start_day: int, end_day: int) -> int:
    return 360 * (end.year - start.year) + 30 * (end.month - start.month) + (end_day - start_day)


def _us_30_360_days(start: date, end: date) -> int:
    d1, d2 = start.day, end.day
    if is_last_day_of_february(start) and is_last_day_of_february(end):
        d2 = 30
    if is_last_day_of_february(start):
        d1 = 30
    if d2 == 31 and d1 >= 30:
        d2 = 30
    if d1 == 31:
        d1 = 30
    return _thirty_360(start, end, d1, d2)


def _european_30_360_days(start: date, end: date) -> int:
    return _thirty_360(start, end, min(start.day, 30), min(end.day, 30))


def day_count(start: date, end: date, basis: int | DayCountBasis = DayCountBasis.US_30_360) -> int:
    """
    Raw number of accrual days from start to end under `basis`.

    Reversed dates give the negated count of the ordered pair.

    Examples:
        >>> day_count(date(2024, 1, 31), date(2024, 2, 29), 0)
        29
        >>> day_count(date(2024, 1, 31), date(2024, 2, 29), 1)
        29
    """
    basis = DayCountBasis.coerce(basis)
    if end < start:
        return -day_count(end, start, basis)

    if basis == DayCountBasis.US_30_360:
        return _us_30_360_days(start, end)
    if basis == DayCountBasis.EUROPEAN_30_360:
        return _european_30_360_days(start, end)
    return (end - start).days


def days_in_year(year: int, basis: int | DayCountBasis) -> int:
    """Length of the accrual year for `basis` (360, 365 or 366)."""
    basis = DayCountBasis.coerce(basis)
    if basis == DayCountBasis.ACTUAL_ACTUAL:
        return 366 if calendar.isleap(year) else 365
    if basis == DayCountBasis.ACTUAL_365:
        return 365
    return 360


def _actual_actual_fraction(start: date, end: date) -> float:
    if start.year == end.year:
        return (end - start).days / days_in_year(start.year, DayCountBasis.ACTUAL_ACTUAL)

    next_new_year = date(start.year + 1, 1, 1)
    fraction = (next_new_year - start).days / days_in_year(start.year, DayCountBasis.ACTUAL_ACTUAL)
    fraction += end.year - start.year - 1
    fraction += (end - date(end.year, 1, 1)).days / days_in_year(end.year, DayCountBasis.ACTUAL_ACTUAL)
    return fraction


def year_fraction(start: date, end: date, basis: int | DayCountBasis = DayCountBasis.US_30_360) -> float:
    """
    Fraction of a year between two dates (YEARFRAC).

    Args:
        start: Accrual start
        end: Accrual end
        basis: Day-count basis 0..4

    Returns:
        Year fraction, negative when end < start

    Raises:
        DomainViolation: If basis is not in 0..4

    Examples:
        >>> round(year_fraction(date(2024, 1, 1), date(2025, 1, 1), 3), 6)
        1.00274
        >>> year_fraction(date(2024, 1, 1), date(2025, 1, 1), 1)
        1.0
    """
    basis = DayCountBasis.coerce(basis)
    if end < start:
        return -year_fraction(end, start, basis)

    if basis == DayCountBasis.ACTUAL_ACTUAL:
        return _actual_actual_fraction(start, end)
    return day_count(start, end, basis) / days_in_year(start.year, basis)


def days360(start: date, end: date, european: bool = False) -> int:
    """
    Days between two dates on a 360-day calendar (DAYS360).

    US method: a start on the last day of its month counts as day 30; an end
    on day 31 counts as 30 only when the start is on or after day 30.
    European method: day 31 counts as 30 on both ends.
    """
    if european:
        return _european_30_360_days(start, end)

    d1, d2 = start.day, end.day
    if is_last_day_of_month(start):
        d1 = 30
    if d2 == 31 and d1 >= 30:
        d2 = 30
    return _thirty_360(start, end, d1, d2)
