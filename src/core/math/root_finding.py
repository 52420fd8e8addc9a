"""
Root Finding — Safeguarded Newton-Raphson

Shared solver for every inverse CDF and cash-flow rate. One loop, tuned per
caller through NewtonSettings instead of per-formula copies:
- Bounded iteration (max_iterations)
- Derivative-near-zero bailout (no division by a vanishing slope)
- Domain clamping after every step (lower/upper)
- Sign-change bracketing: a Newton step that leaves the known bracket is
  replaced by a bisection step
- Stall detection: a clamped iterate that stops moving is a failure
- Overflow retreat: a step landing where f or f' overflows is halved back
  toward the last finite iterate

CRITICAL INVARIANTS:
1. newton_raphson never raises for numeric reasons; failures are reported
   in RootResult.failure
2. converged=True only when |f(x)| or the last step met its tolerance
3. The iterate always stays inside [lower, upper]
4. NaN/Inf (or OverflowError) from the target function is reported as
   OVERFLOW unless a retreat toward a finite iterate recovers, never returned
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from src.core.domain.outcomes import FailureKind, error_for
from src.core.math.numerical_safeguards import EPS_DERIVATIVE, clamp, is_valid_float

logger = logging.getLogger(__name__)

# Relative step for the central-difference derivative
DEFAULT_DERIVATIVE_STEP: Final[float] = 1e-6


# =============================================================================
# CONFIGURATION / RESULT
# =============================================================================


@dataclass(frozen=True)
class NewtonSettings:
    """
    Solver tuning for one caller.

    Attributes:
        tolerance: Step tolerance, |x_{n+1} - x_n| <= tolerance * max(1, |x|)
        max_iterations: Hard iteration cap
        function_tolerance: Residual tolerance |f(x)| < function_tolerance
            (defaults to tolerance)
        lower: Optional lower clamp applied after each step
        upper: Optional upper clamp applied after each step
        derivative_floor: |f'(x)| below this refuses a Newton step
        derivative_step: Relative step of the numeric derivative
    """

    tolerance: float = 1e-8
    max_iterations: int = 10
    function_tolerance: float | None = None
    lower: float | None = None
    upper: float | None = None
    derivative_floor: float = EPS_DERIVATIVE
    derivative_step: float = DEFAULT_DERIVATIVE_STEP

    def __post_init__(self) -> None:
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.function_tolerance is not None and self.function_tolerance <= 0:
            raise ValueError(f"function_tolerance must be positive, got {self.function_tolerance}")
        if self.lower is not None and self.upper is not None and self.lower >= self.upper:
            raise ValueError(f"lower ({self.lower}) must be < upper ({self.upper})")
        if self.derivative_step <= 0:
            raise ValueError(f"derivative_step must be positive, got {self.derivative_step}")

    @property
    def residual_tolerance(self) -> float:
        if self.function_tolerance is None:
            return self.tolerance
        return self.function_tolerance

    def with_bounds(self, lower: float | None, upper: float | None) -> "NewtonSettings":
        """Copy with a different clamp interval."""
        return NewtonSettings(
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
            function_tolerance=self.function_tolerance,
            lower=lower,
            upper=upper,
            derivative_floor=self.derivative_floor,
            derivative_step=self.derivative_step,
        )


# Inverse CDFs: tight residual, generous cap (bisection fallback may be used)
INVERSE_CDF_SETTINGS: Final[NewtonSettings] = NewtonSettings(
    tolerance=1e-10,
    max_iterations=100,
    function_tolerance=1e-12,
)

# IRR / XIRR style rate solvers
CASH_FLOW_RATE_SETTINGS: Final[NewtonSettings] = NewtonSettings(
    tolerance=1e-7,
    max_iterations=100,
    lower=-0.99999,
    upper=10.0,
)


@dataclass(frozen=True)
class RootResult:
    """Outcome of a Newton-Raphson run."""

    root: float
    iterations: int
    converged: bool
    residual: float
    failure: FailureKind | None = None
    details: dict = field(default_factory=dict)


# =============================================================================
# SOLVER
# =============================================================================


def numeric_derivative(
    func: Callable[[float], float],
    x: float,
    relative_step: float = DEFAULT_DERIVATIVE_STEP,
    lower: float | None = None,
    upper: float | None = None,
) -> float:
    """
    Central-difference derivative, one-sided at a clamp boundary.

    Args:
        func: Function to differentiate
        x: Evaluation point
        relative_step: Step as a fraction of max(1, |x|)
        lower: Do not evaluate below this point
        upper: Do not evaluate above this point

    Returns:
        Approximation of f'(x)
    """
    h = relative_step * max(1.0, abs(x))
    left = x - h
    right = x + h
    if lower is not None and left < lower:
        left = x
    if upper is not None and right > upper:
        right = x
    if right == left:
        return 0.0
    return (func(right) - func(left)) / (right - left)


def _evaluate(func: Callable[[float], float], x: float) -> float:
    """func(x), with float overflow (raised by ** and math.exp) reported as inf."""
    try:
        return func(x)
    except OverflowError:
        return math.inf


def _fail(
    x: float,
    iterations: int,
    residual: float,
    kind: FailureKind,
    reason: str,
) -> RootResult:
    logger.debug("newton_raphson failed (%s) at x=%s after %d iterations: %s", kind.value, x, iterations, reason)
    return RootResult(
        root=x,
        iterations=iterations,
        converged=False,
        residual=residual,
        failure=kind,
        details={"reason": reason},
    )


def newton_raphson(
    func: Callable[[float], float],
    x0: float,
    derivative: Callable[[float], float] | None = None,
    settings: NewtonSettings | None = None,
) -> RootResult:
    """
    Find a root of func by safeguarded Newton-Raphson iteration.

    x_{n+1} = x_n - f(x_n) / f'(x_n)

    Stops when |f(x_n)| < function_tolerance or the step is within
    tolerance. Whenever two iterates give f values of opposite sign the
    interval between them is kept as a bracket; Newton steps leaving it,
    steps shrinking by less than half, and steps refused because of a
    vanishing derivative fall back to bisection of the bracket.

    Args:
        func: Target function
        x0: Initial guess (clamped into [lower, upper])
        derivative: Closed-form derivative; central differences if omitted
        settings: Solver tuning (default NewtonSettings())

    Returns:
        RootResult; on failure `failure` is DID_NOT_CONVERGE, SINGULAR or
        OVERFLOW and `root` holds the last iterate

    Examples:
        >>> result = newton_raphson(lambda x: x * x - 2.0, 1.0, lambda x: 2.0 * x)
        >>> round(result.root, 8), result.converged
        (1.41421356, True)
    """
    settings = settings or NewtonSettings()

    def slope(point: float) -> float:
        if derivative is not None:
            return derivative(point)
        return numeric_derivative(func, point, settings.derivative_step, settings.lower, settings.upper)

    x = clamp(x0, settings.lower, settings.upper)
    # Latest iterates with f > 0 and f < 0; together they bracket a root
    positive_x: float | None = None
    negative_x: float | None = None
    previous_step: float | None = None
    # Latest iterate where f and f' were both finite
    last_finite: float | None = None

    for iteration in range(1, settings.max_iterations + 1):
        fx = _evaluate(func, x)
        dfx = _evaluate(slope, x) if is_valid_float(fx) else fx
        if not (is_valid_float(fx) and is_valid_float(dfx)):
            label = f"f({x}) = {fx}" if not is_valid_float(fx) else f"f'({x}) = {dfx}"
            if last_finite is None or abs(x - last_finite) <= settings.tolerance * max(1.0, abs(x)):
                return _fail(x, iteration, fx, FailureKind.OVERFLOW, label)
            # Overshot into a region that overflows; retreat toward the last finite iterate
            x = 0.5 * (x + last_finite)
            previous_step = None
            continue
        last_finite = x

        if abs(fx) < settings.residual_tolerance:
            return RootResult(root=x, iterations=iteration, converged=True, residual=fx)

        if fx > 0:
            positive_x = x
        else:
            negative_x = x
        has_bracket = positive_x is not None and negative_x is not None

        if abs(dfx) < settings.derivative_floor:
            if not has_bracket:
                return _fail(x, iteration, fx, FailureKind.SINGULAR, f"|f'({x})| = {abs(dfx)} below floor")
            target = 0.5 * (positive_x + negative_x)
        else:
            target = x - fx / dfx
            if has_bracket:
                low, high = sorted((positive_x, negative_x))
                slow = previous_step is not None and abs(fx / dfx) > 0.5 * abs(previous_step)
                if slow or not low < target < high:
                    target = 0.5 * (low + high)

        x_new = clamp(target, settings.lower, settings.upper)

        if x_new != target and abs(x_new - x) <= settings.tolerance * max(1.0, abs(x_new)):
            # Pinned at a clamp boundary without reaching a root
            return _fail(x, iteration, fx, FailureKind.DID_NOT_CONVERGE, "iterate stalled at domain bound")

        if abs(x_new - x) <= settings.tolerance * max(1.0, abs(x_new)):
            residual = _evaluate(func, x_new)
            if not is_valid_float(residual):
                return _fail(x_new, iteration, residual, FailureKind.OVERFLOW, f"f({x_new}) = {residual}")
            return RootResult(root=x_new, iterations=iteration, converged=True, residual=residual)

        previous_step = x_new - x
        x = x_new

    residual = _evaluate(func, x)
    return _fail(
        x,
        settings.max_iterations,
        residual,
        FailureKind.DID_NOT_CONVERGE,
        f"no convergence in {settings.max_iterations} iterations",
    )


def solve(
    func: Callable[[float], float],
    x0: float,
    derivative: Callable[[float], float] | None = None,
    settings: NewtonSettings | None = None,
) -> float:
    """
    newton_raphson returning the root or raising the matching NumericalError.

    Raises:
        NonConvergence: Iteration cap reached or iterate stalled
        SingularDerivative: Derivative vanished with no bracket
        InvalidFloat: Target function produced NaN/Inf
    """
    result = newton_raphson(func, x0, derivative, settings)
    if result.failure is not None:
        raise error_for(result.failure, result.details.get("reason", ""))
    return result.root
