"""
Bessel Functions — J, Y, I, K of integer order

Rational and asymptotic polynomial approximations for orders 0 and 1
(absolute accuracy ~1e-8), extended to order n by recurrence:
- J_n: upward recurrence when |x| > n, Miller backward recurrence otherwise
- Y_n, K_n: upward recurrence (stable for these families)
- I_n: backward recurrence normalised by I_0

CRITICAL INVARIANTS:
1. bessel_j0(0) == 1.0 and bessel_j(0, n) == 0.0 for n >= 1
2. Order n must be a non-negative integer
3. Y and K are defined for x > 0 only
"""

import logging
import math
from typing import Final

from src.core.domain.outcomes import DomainViolation
from src.core.math.numerical_safeguards import is_integer, validate_finite, validate_positive

logger = logging.getLogger(__name__)

# Miller recurrence accuracy parameter (larger is more accurate)
MILLER_ACCURACY: Final[int] = 160

# Renormalisation thresholds for backward recurrence
_BIG_NUMBER: Final[float] = 1e10
_BIG_NUMBER_INVERSE: Final[float] = 1e-10

_TWO_OVER_PI: Final[float] = 0.636619772
_QUARTER_PI: Final[float] = 0.785398164
_THREE_QUARTER_PI: Final[float] = 2.356194491


def _coerce_order(n: int | float) -> int:
    """Order as an int; integral floats such as 2.0 are accepted."""
    if isinstance(n, bool) or not isinstance(n, (int, float)) or not is_integer(n) or n < 0:
        raise DomainViolation(f"order n must be a non-negative integer, got {n!r}")
    return int(n)


def _miller_start(n: int) -> int:
    """Even starting index for backward recurrence."""
    return 2 * ((n + int(math.sqrt(MILLER_ACCURACY * n))) // 2)


# =============================================================================
# J (first kind)
# =============================================================================


def _asymptotic_pq_order0(ax: float) -> tuple[float, float, float]:
    z = 8.0 / ax
    y = z * z
    p = 1.0 + y * (-0.1098628627e-2 + y * (0.2734510407e-4 + y * (-0.2073370639e-5 + y * 0.2093887211e-6)))
    q = -0.1562499995e-1 + y * (
        0.1430488765e-3 + y * (-0.6911147651e-5 + y * (0.7621095161e-6 - y * 0.934935152e-7))
    )
    return z, p, q


def _asymptotic_pq_order1(ax: float) -> tuple[float, float, float]:
    z = 8.0 / ax
    y = z * z
    p = 1.0 + y * (0.183105e-2 + y * (-0.3516396496e-4 + y * (0.2457520174e-5 + y * (-0.240337019e-6))))
    q = 0.04687499995 + y * (
        -0.2002690873e-3 + y * (0.8449199096e-5 + y * (-0.88228987e-6 + y * 0.105787412e-6))
    )
    return z, p, q


def bessel_j0(x: float) -> float:
    """
    Bessel function of the first kind, order 0.

    Examples:
        >>> bessel_j0(0.0)
        1.0
    """
    validate_finite(x, "x")
    if x == 0.0:
        return 1.0

    ax = abs(x)
    if ax < 8.0:
        y = x * x
        numerator = 57568490574.0 + y * (
            -13362590354.0 + y * (651619640.7 + y * (-11214424.18 + y * (77392.33017 + y * (-184.9052456))))
        )
        denominator = 57568490411.0 + y * (
            1029532985.0 + y * (9494680.718 + y * (59272.64853 + y * (267.8532712 + y * 1.0)))
        )
        return numerator / denominator

    z, p, q = _asymptotic_pq_order0(ax)
    xx = ax - _QUARTER_PI
    return math.sqrt(_TWO_OVER_PI / ax) * (math.cos(xx) * p - z * math.sin(xx) * q)


def bessel_j1(x: float) -> float:
    """Bessel function of the first kind, order 1 (odd in x)."""
    validate_finite(x, "x")

    ax = abs(x)
    if ax < 8.0:
        y = x * x
        numerator = x * (
            72362614232.0
            + y * (-7895059235.0 + y * (242396853.1 + y * (-2972611.439 + y * (15704.48260 + y * (-30.16036606)))))
        )
        denominator = 144725228442.0 + y * (
            2300535178.0 + y * (18583304.74 + y * (99447.43394 + y * (376.9991397 + y * 1.0)))
        )
        return numerator / denominator

    z, p, q = _asymptotic_pq_order1(ax)
    xx = ax - _THREE_QUARTER_PI
    result = math.sqrt(_TWO_OVER_PI / ax) * (math.cos(xx) * p - z * math.sin(xx) * q)
    return -result if x < 0.0 else result


def bessel_j(x: float, n: int) -> float:
    """
    Bessel function of the first kind J_n(x) for integer n >= 0.

    Args:
        x: Argument
        n: Order (non-negative integer)

    Returns:
        J_n(x)

    Raises:
        DomainViolation: If n is negative or not an integer, or x is NaN/Inf
    """
    n = _coerce_order(n)
    validate_finite(x, "x")

    if n == 0:
        return bessel_j0(x)
    if n == 1:
        return bessel_j1(x)

    ax = abs(x)
    if ax == 0.0:
        return 0.0

    if ax > n:
        # Upward recurrence is stable while the order stays below |x|
        tox = 2.0 / ax
        previous = bessel_j0(ax)
        current = bessel_j1(ax)
        for j in range(1, n):
            previous, current = current, j * tox * current - previous
        result = current
    else:
        tox = 2.0 / ax
        start = _miller_start(n)
        add_to_sum = False
        above = 0.0
        current = 1.0
        result = 0.0
        normaliser = 0.0
        for j in range(start, 0, -1):
            below = j * tox * current - above
            above = current
            current = below
            if abs(current) > _BIG_NUMBER:
                current *= _BIG_NUMBER_INVERSE
                above *= _BIG_NUMBER_INVERSE
                result *= _BIG_NUMBER_INVERSE
                normaliser *= _BIG_NUMBER_INVERSE
            if add_to_sum:
                normaliser += current
            add_to_sum = not add_to_sum
            if j == n:
                result = above
        # J_0 + 2 (J_2 + J_4 + ...) = 1
        normaliser = 2.0 * normaliser - current
        result /= normaliser

    return -result if x < 0.0 and n % 2 == 1 else result


# =============================================================================
# Y (second kind)
# =============================================================================


def bessel_y0(x: float) -> float:
    """Bessel function of the second kind, order 0, for x > 0."""
    validate_positive(x, "x")

    if x < 8.0:
        y = x * x
        numerator = -2957821389.0 + y * (
            7062834065.0 + y * (-512359803.6 + y * (10879881.29 + y * (-86327.92757 + y * 228.4622733)))
        )
        denominator = 40076544269.0 + y * (
            745249964.8 + y * (7189466.438 + y * (47447.26470 + y * (226.1030244 + y * 1.0)))
        )
        return numerator / denominator + _TWO_OVER_PI * bessel_j0(x) * math.log(x)

    z, p, q = _asymptotic_pq_order0(x)
    xx = x - _QUARTER_PI
    return math.sqrt(_TWO_OVER_PI / x) * (math.sin(xx) * p + z * math.cos(xx) * q)


def bessel_y1(x: float) -> float:
    """Bessel function of the second kind, order 1, for x > 0."""
    validate_positive(x, "x")

    if x < 8.0:
        y = x * x
        numerator = x * (
            -0.4900604943e13
            + y * (0.1275274390e13 + y * (-0.5153438139e11 + y * (0.7349264551e9 + y * (-0.4237922726e7 + y * 0.8511937935e4))))
        )
        denominator = 0.2499580570e14 + y * (
            0.4244419664e12 + y * (0.3733650367e10 + y * (0.2245904002e8 + y * (0.1020426050e6 + y * (0.3549632885e3 + y))))
        )
        return numerator / denominator + _TWO_OVER_PI * (bessel_j1(x) * math.log(x) - 1.0 / x)

    z, p, q = _asymptotic_pq_order1(x)
    xx = x - _THREE_QUARTER_PI
    return math.sqrt(_TWO_OVER_PI / x) * (math.sin(xx) * p + z * math.cos(xx) * q)


def bessel_y(x: float, n: int) -> float:
    """
    Bessel function of the second kind Y_n(x), x > 0, by upward recurrence.

    Raises:
        DomainViolation: If x <= 0 or n is not a non-negative integer
    """
    n = _coerce_order(n)
    validate_positive(x, "x")

    if n == 0:
        return bessel_y0(x)
    if n == 1:
        return bessel_y1(x)

    tox = 2.0 / x
    previous = bessel_y0(x)
    current = bessel_y1(x)
    for j in range(1, n):
        previous, current = current, j * tox * current - previous
    return current


# =============================================================================
# I (modified, first kind)
# =============================================================================


def bessel_i0(x: float) -> float:
    """Modified Bessel function of the first kind, order 0."""
    validate_finite(x, "x")

    ax = abs(x)
    if ax < 3.75:
        y = (x / 3.75) ** 2
        return 1.0 + y * (
            3.5156229 + y * (3.0899424 + y * (1.2067492 + y * (0.2659732 + y * (0.360768e-1 + y * 0.45813e-2))))
        )

    y = 3.75 / ax
    return (math.exp(ax) / math.sqrt(ax)) * (
        0.39894228
        + y
        * (
            0.1328592e-1
            + y
            * (
                0.225319e-2
                + y * (-0.157565e-2 + y * (0.916281e-2 + y * (-0.2057706e-1 + y * (0.2635537e-1 + y * (-0.1647633e-1 + y * 0.392377e-2)))))
            )
        )
    )


def bessel_i1(x: float) -> float:
    """Modified Bessel function of the first kind, order 1 (odd in x)."""
    validate_finite(x, "x")

    ax = abs(x)
    if ax < 3.75:
        y = (x / 3.75) ** 2
        result = ax * (
            0.5 + y * (0.87890594 + y * (0.51498869 + y * (0.15084934 + y * (0.2658733e-1 + y * (0.301532e-2 + y * 0.32411e-3)))))
        )
    else:
        y = 3.75 / ax
        tail = 0.2282967e-1 + y * (-0.2895312e-1 + y * (0.1787654e-1 - y * 0.420059e-2))
        result = 0.39894228 + y * (-0.3988024e-1 + y * (-0.362018e-2 + y * (0.163801e-2 + y * (-0.1031555e-1 + y * tail))))
        result *= math.exp(ax) / math.sqrt(ax)

    return -result if x < 0.0 else result


def bessel_i(x: float, n: int) -> float:
    """
    Modified Bessel function of the first kind I_n(x).

    Orders >= 2 use backward recurrence normalised by I_0(x).

    Raises:
        DomainViolation: If n is not a non-negative integer or x is NaN/Inf
    """
    n = _coerce_order(n)
    validate_finite(x, "x")

    if n == 0:
        return bessel_i0(x)
    if n == 1:
        return bessel_i1(x)
    if x == 0.0:
        return 0.0

    tox = 2.0 / abs(x)
    above = 0.0
    current = 1.0
    result = 0.0
    for j in range(2 * (n + int(math.sqrt(MILLER_ACCURACY * n))), 0, -1):
        below = above + j * tox * current
        above = current
        current = below
        if abs(current) > _BIG_NUMBER:
            result *= _BIG_NUMBER_INVERSE
            current *= _BIG_NUMBER_INVERSE
            above *= _BIG_NUMBER_INVERSE
        if j == n:
            result = above

    result *= bessel_i0(x) / current
    return -result if x < 0.0 and n % 2 == 1 else result


# =============================================================================
# K (modified, second kind)
# =============================================================================


def bessel_k0(x: float) -> float:
    """Modified Bessel function of the second kind, order 0, for x > 0."""
    validate_positive(x, "x")

    if x <= 2.0:
        y = x * x / 4.0
        return (-math.log(x / 2.0) * bessel_i0(x)) + (
            -0.57721566
            + y * (0.42278420 + y * (0.23069756 + y * (0.3488590e-1 + y * (0.262698e-2 + y * (0.10750e-3 + y * 0.74e-5)))))
        )

    y = 2.0 / x
    return (math.exp(-x) / math.sqrt(x)) * (
        1.25331414
        + y * (-0.7832358e-1 + y * (0.2189568e-1 + y * (-0.1062446e-1 + y * (0.587872e-2 + y * (-0.251540e-2 + y * 0.53208e-3)))))
    )


def bessel_k1(x: float) -> float:
    """Modified Bessel function of the second kind, order 1, for x > 0."""
    validate_positive(x, "x")

    if x <= 2.0:
        y = x * x / 4.0
        return (math.log(x / 2.0) * bessel_i1(x)) + (1.0 / x) * (
            1.0
            + y * (0.15443144 + y * (-0.67278579 + y * (-0.18156897 + y * (-0.1919402e-1 + y * (-0.110404e-2 + y * (-0.4686e-4))))))
        )

    y = 2.0 / x
    return (math.exp(-x) / math.sqrt(x)) * (
        1.25331414
        + y * (0.23498619 + y * (-0.3655620e-1 + y * (0.1504268e-1 + y * (-0.780353e-2 + y * (0.325614e-2 + y * (-0.68245e-3))))))
    )


def bessel_k(x: float, n: int) -> float:
    """
    Modified Bessel function of the second kind K_n(x), x > 0.

    K_{n+1}(x) = K_{n-1}(x) + (2n/x) K_n(x), applied upward from K_0, K_1.

    Raises:
        DomainViolation: If x <= 0 or n is not a non-negative integer
    """
    n = _coerce_order(n)
    validate_positive(x, "x")

    if n == 0:
        return bessel_k0(x)
    if n == 1:
        return bessel_k1(x)

    tox = 2.0 / x
    previous = bessel_k0(x)
    current = bessel_k1(x)
    for j in range(1, n):
        previous, current = current, previous + j * tox * current
    if math.isinf(current):
        logger.debug("bessel_k overflowed for x=%s, n=%s", x, n)
    return current
