"""
Tests for the safeguarded Newton-Raphson solver.

Checks:
1. Convergence with closed-form and numeric derivatives
2. Failure kinds: SINGULAR, OVERFLOW, DID_NOT_CONVERGE
3. Clamping and stall detection
4. Bracket fallback where plain Newton diverges
5. solve() exception mapping
"""

import math

import pytest

from src.core.domain.outcomes import FailureKind, InvalidFloat, NonConvergence, SingularDerivative
from src.core.math.root_finding import (
    CASH_FLOW_RATE_SETTINGS,
    INVERSE_CDF_SETTINGS,
    NewtonSettings,
    newton_raphson,
    numeric_derivative,
    solve,
)


class TestNewtonSettings:
    """Settings validation"""

    def test_defaults(self) -> None:
        settings = NewtonSettings()
        assert settings.tolerance == 1e-8
        assert settings.max_iterations == 10
        assert settings.residual_tolerance == 1e-8

    def test_function_tolerance_overrides_residual(self) -> None:
        assert INVERSE_CDF_SETTINGS.residual_tolerance == 1e-12

    def test_cash_flow_bounds(self) -> None:
        assert CASH_FLOW_RATE_SETTINGS.lower == -0.99999
        assert CASH_FLOW_RATE_SETTINGS.upper == 10.0

    def test_with_bounds_keeps_other_fields(self) -> None:
        bounded = INVERSE_CDF_SETTINGS.with_bounds(0.0, 1.0)
        assert (bounded.lower, bounded.upper) == (0.0, 1.0)
        assert bounded.max_iterations == INVERSE_CDF_SETTINGS.max_iterations
        assert bounded.function_tolerance == INVERSE_CDF_SETTINGS.function_tolerance

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"tolerance": 0.0}, "tolerance"),
            ({"max_iterations": 0}, "max_iterations"),
            ({"function_tolerance": -1.0}, "function_tolerance"),
            ({"lower": 1.0, "upper": 0.0}, "lower"),
            ({"derivative_step": 0.0}, "derivative_step"),
        ],
    )
    def test_invalid_settings(self, kwargs: dict, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            NewtonSettings(**kwargs)


class TestNumericDerivative:
    """Central differences"""

    def test_polynomial(self) -> None:
        assert numeric_derivative(lambda x: x**3, 2.0) == pytest.approx(12.0, rel=1e-6)

    def test_one_sided_at_bound(self) -> None:
        """No evaluation below the lower bound"""

        def guarded(x: float) -> float:
            assert x >= 0.0
            return x * x

        assert numeric_derivative(guarded, 0.0, lower=0.0) == pytest.approx(0.0, abs=1e-5)


class TestNewtonRaphson:
    """Solver behaviour"""

    def test_square_root(self) -> None:
        result = newton_raphson(lambda x: x * x - 2.0, 1.0, lambda x: 2.0 * x)
        assert result.converged
        assert result.failure is None
        assert result.root == pytest.approx(math.sqrt(2.0), abs=1e-10)

    def test_numeric_derivative_fallback(self) -> None:
        """Omitted derivative uses central differences"""
        result = newton_raphson(lambda x: math.cos(x) - x, 1.0)
        assert result.converged
        assert result.root == pytest.approx(0.7390851332, abs=1e-8)

    def test_zero_derivative_without_bracket_is_singular(self) -> None:
        result = newton_raphson(lambda x: x * x + 1.0, 0.0, lambda x: 2.0 * x)
        assert not result.converged
        assert result.failure is FailureKind.SINGULAR

    def test_non_finite_function_is_overflow(self) -> None:
        result = newton_raphson(lambda x: math.nan, 0.0, lambda x: 1.0)
        assert result.failure is FailureKind.OVERFLOW

    def test_non_finite_derivative_is_overflow(self) -> None:
        result = newton_raphson(lambda x: x - 1.0, 0.0, lambda x: math.inf)
        assert result.failure is FailureKind.OVERFLOW

    def test_raised_overflow_is_reported(self) -> None:
        """OverflowError from the target function becomes an OVERFLOW failure"""
        result = newton_raphson(lambda x: 10.0 ** (400.0 + x), 0.0, lambda x: 1.0)
        assert not result.converged
        assert result.failure is FailureKind.OVERFLOW

    def test_retreats_from_overflow_region(self) -> None:
        """A step into an overflowing region is halved back until f is finite"""

        def func(x: float) -> float:
            if x > 3.0:
                raise OverflowError("math range error")
            return x - 1.0

        settings = NewtonSettings(max_iterations=100)
        # Slope 0.1 makes the first Newton step overshoot to x = 10
        result = newton_raphson(func, 0.0, lambda x: 0.1, settings)
        assert result.converged
        assert result.root == pytest.approx(1.0, abs=1e-7)

    def test_cycle_hits_iteration_cap(self) -> None:
        """x^3 - 2x + 2 from 0 cycles between 0 and 1"""
        result = newton_raphson(lambda x: x**3 - 2.0 * x + 2.0, 0.0, lambda x: 3.0 * x * x - 2.0)
        assert not result.converged
        assert result.failure is FailureKind.DID_NOT_CONVERGE
        assert result.iterations == 10

    def test_stall_at_lower_bound(self) -> None:
        """Root outside the clamp interval is reported, not returned"""
        settings = NewtonSettings(lower=0.0, upper=10.0)
        result = newton_raphson(lambda x: x + 5.0, 1.0, lambda x: 1.0, settings)
        assert not result.converged
        assert result.failure is FailureKind.DID_NOT_CONVERGE
        assert "stalled" in result.details["reason"]
        assert result.root == 0.0

    def test_iterate_stays_inside_bounds(self) -> None:
        settings = NewtonSettings(lower=1.0, upper=3.0, max_iterations=50)
        result = newton_raphson(lambda x: x * x - 4.0, 2.9, lambda x: 2.0 * x, settings)
        assert result.converged
        assert 1.0 <= result.root <= 3.0
        assert result.root == pytest.approx(2.0, abs=1e-8)

    def test_bracket_rescues_divergent_newton(self) -> None:
        """Plain Newton on atan diverges from |x0| > 1.39; the bracket keeps it bounded"""
        settings = NewtonSettings(max_iterations=100)
        result = newton_raphson(math.atan, 1.5, lambda x: 1.0 / (1.0 + x * x), settings)
        assert result.converged
        assert result.root == pytest.approx(0.0, abs=1e-7)

    def test_residual_convergence_on_first_iteration(self) -> None:
        result = newton_raphson(lambda x: x - 3.0, 3.0, lambda x: 1.0)
        assert result.converged
        assert result.iterations == 1
        assert result.root == 3.0


class TestSolve:
    """Exception mapping"""

    def test_returns_root(self) -> None:
        assert solve(lambda x: x**3 - 8.0, 3.0, lambda x: 3.0 * x * x) == pytest.approx(2.0, abs=1e-8)

    def test_non_convergence(self) -> None:
        with pytest.raises(NonConvergence, match="no convergence"):
            solve(lambda x: x**3 - 2.0 * x + 2.0, 0.0, lambda x: 3.0 * x * x - 2.0)

    def test_singular(self) -> None:
        with pytest.raises(SingularDerivative, match="below floor"):
            solve(lambda x: x * x + 1.0, 0.0, lambda x: 2.0 * x)

    def test_overflow(self) -> None:
        with pytest.raises(InvalidFloat):
            solve(lambda x: math.inf, 0.0, lambda x: 1.0)
