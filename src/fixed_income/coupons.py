"""
Coupons — Coupon Schedule Helpers

The coupon schedule is anchored at maturity and steps backward in
12 / frequency month increments. Each schedule date is computed directly
from maturity (no cumulative day drift); if maturity falls on a month end,
every coupon date is a month end.

CRITICAL INVARIANTS:
1. previous_coupon_date <= settlement < next_coupon_date <= maturity
2. coupon_count >= 1
3. settlement < maturity, frequency in {1, 2, 4}, basis in 0..4 are checked
   before any schedule walk
"""

from datetime import date
from typing import NamedTuple

from src.core.domain.conventions import CouponFrequency, DayCountBasis
from src.core.domain.outcomes import DomainViolation
from src.fixed_income.day_count import add_months, day_count, end_of_month, is_last_day_of_month


class CouponPeriod(NamedTuple):
    """Coupon period containing the settlement date."""

    previous: date
    next: date
    remaining: int  # coupons payable after settlement, including maturity


def _validate(settlement: date, maturity: date, frequency: int) -> CouponFrequency:
    if settlement >= maturity:
        raise DomainViolation(f"settlement ({settlement}) must be before maturity ({maturity})")
    return CouponFrequency.coerce(frequency)


def _schedule_date(maturity: date, periods_back: int, months: int, month_end: bool) -> date:
    if month_end:
        return end_of_month(maturity, -periods_back * months)
    return add_months(maturity, -periods_back * months)


def coupon_period(settlement: date, maturity: date, frequency: int | CouponFrequency) -> CouponPeriod:
    """
    Locate settlement in the coupon schedule.

    Walks backward from maturity one coupon at a time until a coupon date
    at or before settlement is reached.

    Raises:
        DomainViolation: If settlement >= maturity or frequency not in {1, 2, 4}
    """
    freq = _validate(settlement, maturity, frequency)
    months = freq.months
    month_end = is_last_day_of_month(maturity)

    periods_back = 0
    current = maturity
    while True:
        candidate = _schedule_date(maturity, periods_back + 1, months, month_end)
        if candidate <= settlement:
            return CouponPeriod(previous=candidate, next=current, remaining=periods_back + 1)
        periods_back += 1
        current = candidate


def next_coupon_date(settlement: date, maturity: date, frequency: int | CouponFrequency) -> date:
    """
    First coupon date after settlement (COUPNCD).

    Examples:
        >>> next_coupon_date(date(2011, 1, 25), date(2011, 11, 15), 2)
        datetime.date(2011, 5, 15)
    """
    return coupon_period(settlement, maturity, frequency).next


def previous_coupon_date(settlement: date, maturity: date, frequency: int | CouponFrequency) -> date:
    """
    Last coupon date on or before settlement (COUPPCD).

    Examples:
        >>> previous_coupon_date(date(2011, 1, 25), date(2011, 11, 15), 2)
        datetime.date(2010, 11, 15)
    """
    return coupon_period(settlement, maturity, frequency).previous


def coupon_count(settlement: date, maturity: date, frequency: int | CouponFrequency) -> int:
    """Number of coupons payable between settlement and maturity (COUPNUM)."""
    return coupon_period(settlement, maturity, frequency).remaining


def coupon_days(
    settlement: date,
    maturity: date,
    frequency: int | CouponFrequency,
    basis: int | DayCountBasis = DayCountBasis.US_30_360,
) -> float:
    """
    Days in the coupon period containing settlement (COUPDAYS).

    Actual/Actual uses the real period length; Actual/365 uses 365/frequency;
    the 360-day bases use 360/frequency.
    """
    basis = DayCountBasis.coerce(basis)
    period = coupon_period(settlement, maturity, frequency)
    freq = CouponFrequency.coerce(frequency)
    if basis == DayCountBasis.ACTUAL_ACTUAL:
        return float((period.next - period.previous).days)
    if basis == DayCountBasis.ACTUAL_365:
        return 365.0 / freq
    return 360.0 / freq


def coupon_days_before_settlement(
    settlement: date,
    maturity: date,
    frequency: int | CouponFrequency,
    basis: int | DayCountBasis = DayCountBasis.US_30_360,
) -> int:
    """Days from the previous coupon date to settlement (COUPDAYBS)."""
    basis = DayCountBasis.coerce(basis)
    period = coupon_period(settlement, maturity, frequency)
    return day_count(period.previous, settlement, basis)


def coupon_days_to_next(
    settlement: date,
    maturity: date,
    frequency: int | CouponFrequency,
    basis: int | DayCountBasis = DayCountBasis.US_30_360,
) -> float:
    """
    Days from settlement to the next coupon date (COUPDAYSNC).

    On the 30/360 bases this is coupon_days - coupon_days_before_settlement,
    so the three counts stay consistent; otherwise actual days.
    """
    basis = DayCountBasis.coerce(basis)
    if basis.is_thirty_360:
        return coupon_days(settlement, maturity, frequency, basis) - coupon_days_before_settlement(
            settlement, maturity, frequency, basis
        )
    return float((next_coupon_date(settlement, maturity, frequency) - settlement).days)
