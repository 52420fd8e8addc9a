"""
Fixed-income helpers.

Day-count conventions, coupon schedules and cash-flow rate solvers.
"""

from src.fixed_income.cashflows import irr, npv, xirr, xnpv
from src.fixed_income.coupons import (
    CouponPeriod,
    coupon_count,
    coupon_days,
    coupon_days_before_settlement,
    coupon_days_to_next,
    coupon_period,
    next_coupon_date,
    previous_coupon_date,
)
from src.fixed_income.day_count import (
    add_months,
    day_count,
    days360,
    days_in_year,
    end_of_month,
    year_fraction,
)

__all__ = [
    # Day count
    "add_months",
    "day_count",
    "days360",
    "days_in_year",
    "end_of_month",
    "year_fraction",
    # Coupons
    "CouponPeriod",
    "coupon_count",
    "coupon_days",
    "coupon_days_before_settlement",
    "coupon_days_to_next",
    "coupon_period",
    "next_coupon_date",
    "previous_coupon_date",
    # Cash flows
    "irr",
    "npv",
    "xirr",
    "xnpv",
]
