"""
Cash Flows — Present Value and Internal Rate of Return

NPV / IRR over periodic cash flows and XNPV / XIRR over dated cash flows
(Actual/365 exponents). The rate solvers hand a closure over the
discounting formula and its closed-form derivative to the shared
Newton-Raphson solver with CASH_FLOW_RATE_SETTINGS.

CRITICAL INVARIANTS:
1. IRR/XIRR require at least one positive and one negative cash flow
2. Rates stay inside [-0.99999, 10] during the search
3. Solver failure raises NonConvergence / SingularDerivative, never a stale rate
"""

import math
from collections.abc import Sequence
from datetime import date

from src.core.domain.outcomes import DomainViolation
from src.core.math.numerical_safeguards import validate_finite
from src.core.math.root_finding import CASH_FLOW_RATE_SETTINGS, NewtonSettings, solve

DEFAULT_RATE_GUESS = 0.1
DAYS_PER_YEAR = 365.0


def _validate_rate(rate: float) -> None:
    validate_finite(rate, "rate")
    if rate <= -1.0:
        raise DomainViolation(f"rate must be > -1, got {rate}")


def _validate_mixed_signs(values: Sequence[float]) -> None:
    if not any(v > 0 for v in values) or not any(v < 0 for v in values):
        raise DomainViolation("cash flows must contain at least one positive and one negative value")


def npv(rate: float, values: Sequence[float]) -> float:
    """
    Net present value of cash flows at the end of periods 1, 2, ... (NPV).

    Examples:
        >>> round(npv(0.1, [-10000, 3000, 4200, 6800]), 6)
        1188.443412
    """
    _validate_rate(rate)
    if not values:
        raise DomainViolation("values must not be empty")
    return math.fsum(v / (1.0 + rate) ** (i + 1) for i, v in enumerate(values))


def irr(
    values: Sequence[float],
    guess: float = DEFAULT_RATE_GUESS,
    settings: NewtonSettings = CASH_FLOW_RATE_SETTINGS,
) -> float:
    """
    Internal rate of return of periodic cash flows (IRR).

    Solves sum_i v_i / (1 + r)^i = 0, the first value at period 0.

    Raises:
        DomainViolation: If values lack a sign change
        NonConvergence: If no rate is found within the iteration cap
    """
    _validate_mixed_signs(values)
    flows = [float(v) for v in values]

    def present_value(rate: float) -> float:
        return math.fsum(v * (1.0 + rate) ** -i for i, v in enumerate(flows))

    def slope(rate: float) -> float:
        return math.fsum(-i * v * (1.0 + rate) ** -(i + 1) for i, v in enumerate(flows))

    return solve(present_value, guess, slope, settings)


def _year_offsets(values: Sequence[float], dates: Sequence[date]) -> list[float]:
    if len(values) != len(dates):
        raise DomainViolation(f"values ({len(values)}) and dates ({len(dates)}) differ in length")
    if not values:
        raise DomainViolation("values must not be empty")
    first = dates[0]
    if any(d < first for d in dates):
        raise DomainViolation("no date may precede the first date")
    return [(d - first).days / DAYS_PER_YEAR for d in dates]


def xnpv(rate: float, values: Sequence[float], dates: Sequence[date]) -> float:
    """
    Net present value of dated cash flows (XNPV), discounted to dates[0].

    Examples:
        >>> flows = [-10000, 2750, 4250, 3250, 2750]
        >>> when = [date(2008, 1, 1), date(2008, 3, 1), date(2008, 10, 30), date(2009, 2, 15), date(2009, 4, 1)]
        >>> round(xnpv(0.09, flows, when), 4)
        2086.6476
    """
    _validate_rate(rate)
    offsets = _year_offsets(values, dates)
    return math.fsum(v / (1.0 + rate) ** t for v, t in zip(values, offsets))


def xirr(
    values: Sequence[float],
    dates: Sequence[date],
    guess: float = DEFAULT_RATE_GUESS,
    settings: NewtonSettings = CASH_FLOW_RATE_SETTINGS,
) -> float:
    """
    Internal rate of return of dated cash flows (XIRR).

    Raises:
        DomainViolation: If inputs are inconsistent or lack a sign change
        NonConvergence: If no rate is found within the iteration cap
    """
    offsets = _year_offsets(values, dates)
    _validate_mixed_signs(values)
    flows = [float(v) for v in values]

    def present_value(rate: float) -> float:
        return math.fsum(v * (1.0 + rate) ** -t for v, t in zip(flows, offsets))

    def slope(rate: float) -> float:
        return math.fsum(-t * v * (1.0 + rate) ** -(t + 1.0) for v, t in zip(flows, offsets))

    return solve(present_value, guess, slope, settings)
