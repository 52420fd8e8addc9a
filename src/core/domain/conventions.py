"""
Conventions — Day-Count Basis and Coupon Frequency

Closed enumerations used by the fixed-income helpers. Plain integers from
callers are coerced via `DayCountBasis.coerce` / `CouponFrequency.coerce`,
which raise DomainViolation for any value outside the enumeration.
"""

from enum import IntEnum

from src.core.domain.outcomes import DomainViolation


class DayCountBasis(IntEnum):
    """Accrual basis codes 0..4."""

    US_30_360 = 0
    ACTUAL_ACTUAL = 1
    ACTUAL_360 = 2
    ACTUAL_365 = 3
    EUROPEAN_30_360 = 4

    @classmethod
    def coerce(cls, value: "int | DayCountBasis") -> "DayCountBasis":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
            raise DomainViolation(f"basis must be an integer in 0..4, got {value!r}")
        try:
            return cls(int(value))
        except ValueError:
            raise DomainViolation(f"basis must be in 0..4, got {value}") from None

    @property
    def is_thirty_360(self) -> bool:
        return self in (DayCountBasis.US_30_360, DayCountBasis.EUROPEAN_30_360)


class CouponFrequency(IntEnum):
    """Coupon payments per year."""

    ANNUAL = 1
    SEMI_ANNUAL = 2
    QUARTERLY = 4

    @classmethod
    def coerce(cls, value: "int | CouponFrequency") -> "CouponFrequency":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
            raise DomainViolation(f"frequency must be 1, 2 or 4, got {value!r}")
        try:
            return cls(int(value))
        except ValueError:
            raise DomainViolation(f"frequency must be 1, 2 or 4, got {value}") from None

    @property
    def months(self) -> int:
        """Months between consecutive coupon dates."""
        return 12 // self.value
