"""
Numerical Safeguards — Safe Math Primitives

Epsilon guards and precondition checks shared by every numerical routine:
- Signed denominator floors for continued fractions (modified Lentz)
- NaN/Inf detection for results that must be reported as OVERFLOW
- Integer checks and clamping
- Precondition validators raising DomainViolation

CRITICAL INVARIANTS:
1. No routine divides by an exact zero (denominators are floored or checked)
2. Invalid floats are detected, never silently replaced
3. Validators name the offending parameter in every message
4. All operations are deterministic
"""

import math
from typing import Final

from src.core.domain.outcomes import DomainViolation


# =============================================================================
# EPSILON PARAMETERS
# =============================================================================

# Floor for intermediate denominators in the modified Lentz algorithm
EPS_LENTZ_FLOOR: Final[float] = 1e-30

# Modulus-squared below which complex division is treated as singular
EPS_COMPLEX_MODULUS: Final[float] = 1e-10

# |f'(x)| below which a Newton step is refused
EPS_DERIVATIVE: Final[float] = 1e-20

# Absolute tolerance below which a denominator counts as zero (safe_divide)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# SAFE DIVISION
# =============================================================================


def denom_safe_signed(value: float, eps: float = EPS_LENTZ_FLOOR) -> float:
    """
    Signed safe denominator.

    Replaces a value whose magnitude is below eps by +/-eps, keeping the sign
    (zero maps to +eps). This is the floor step of the modified Lentz
    algorithm.

    Args:
        value: Raw denominator
        eps: Minimum absolute magnitude (default: EPS_LENTZ_FLOOR)

    Returns:
        value if abs(value) >= eps, otherwise sign(value) * eps

    Examples:
        >>> denom_safe_signed(10.0, 1e-6)
        10.0
        >>> denom_safe_signed(-1e-9, 1e-6)
        -1e-06
        >>> denom_safe_signed(0.0, 1e-6)
        1e-06
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")

    if abs(value) >= eps:
        return value

    if value < 0:
        return -eps
    return eps


def safe_divide(
    numerator: float,
    denominator: float,
    eps: float = EPS_FLOAT_COMPARE_ABS,
    fallback: float = 0.0,
) -> float:
    """
    Division returning `fallback` when the denominator is below eps.

    Used where a zero denominator has a defined meaning (for example a
    perfect naive forecast giving MASE = 0).

    Examples:
        >>> safe_divide(10.0, 2.0)
        5.0
        >>> safe_divide(10.0, 0.0)
        0.0
    """
    if abs(denominator) < eps:
        return fallback
    return numerator / denominator


# =============================================================================
# NaN/Inf DETECTION
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True if value is finite (not NaN, not Inf)."""
    return math.isfinite(value)


# =============================================================================
# INTEGER CHECKS AND CLAMPING
# =============================================================================


def is_integer(value: float) -> bool:
    """True if value is a finite float with no fractional part."""
    return math.isfinite(value) and value == math.floor(value)


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Restrict value to [min_value, max_value]; either bound may be omitted.

    Examples:
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


# =============================================================================
# VALIDATION
# =============================================================================


def validate_finite(value: float, name: str) -> None:
    """
    Raises:
        DomainViolation: If value is NaN/Inf
    """
    if not is_valid_float(value):
        raise DomainViolation(f"{name} must be a valid float (not NaN/Inf), got {value}")


def validate_positive(value: float, name: str, eps: float = 0.0) -> None:
    """
    Validate value > eps.

    Args:
        value: Value to check
        name: Parameter name (for the error message)
        eps: Threshold (default: 0.0)

    Raises:
        DomainViolation: If value <= eps or NaN/Inf
    """
    validate_finite(value, name)

    if value <= eps:
        raise DomainViolation(f"{name} must be positive (> {eps}), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Validate value >= 0.

    Raises:
        DomainViolation: If value < 0 or NaN/Inf
    """
    validate_finite(value, name)

    if value < 0:
        raise DomainViolation(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Validate min_value <= value <= max_value (bounds optional, inclusive).

    Raises:
        DomainViolation: If value is out of range or NaN/Inf
    """
    validate_finite(value, name)

    if min_value is not None and value < min_value:
        raise DomainViolation(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise DomainViolation(f"{name} must be <= {max_value}, got {value}")


def validate_probability(value: float, name: str = "probability", open_interval: bool = True) -> None:
    """
    Validate a probability argument.

    Args:
        value: Probability to check
        name: Parameter name (for the error message)
        open_interval: Require 0 < p < 1 (default) instead of 0 <= p <= 1

    Raises:
        DomainViolation: If value is outside the interval or NaN/Inf
    """
    validate_finite(value, name)

    if open_interval:
        if not 0.0 < value < 1.0:
            raise DomainViolation(f"{name} must be in (0, 1), got {value}")
    elif not 0.0 <= value <= 1.0:
        raise DomainViolation(f"{name} must be in [0, 1], got {value}")
