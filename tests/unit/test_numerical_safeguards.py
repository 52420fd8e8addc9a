"""
Tests for the numerical safeguards module.

Checks:
1. Signed safe denominators (Lentz floor)
2. Safe division with fallback
3. NaN/Inf detection
4. Integer checks and clamping
5. Parameter validation
"""

import math

import pytest

from src.core.domain.outcomes import DomainViolation
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_LENTZ_FLOOR,
    clamp,
    denom_safe_signed,
    is_integer,
    is_valid_float,
    safe_divide,
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive,
    validate_probability,
)


# =============================================================================
# SAFE DIVISION
# =============================================================================


class TestDenomSafeSigned:
    """Tests for denom_safe_signed"""

    def test_large_positive_value_unchanged(self) -> None:
        """Large positive values pass through"""
        assert denom_safe_signed(100.0, eps=1e-6) == 100.0
        assert denom_safe_signed(1.0, eps=1e-6) == 1.0

    def test_large_negative_value_unchanged(self) -> None:
        """Large negative values pass through"""
        assert denom_safe_signed(-100.0, eps=1e-6) == -100.0

    def test_small_values_keep_sign(self) -> None:
        """Tiny values are floored to +/-eps"""
        assert denom_safe_signed(1e-9, eps=1e-6) == 1e-6
        assert denom_safe_signed(-1e-9, eps=1e-6) == -1e-6

    def test_zero_maps_to_positive_eps(self) -> None:
        """Zero becomes +eps"""
        assert denom_safe_signed(0.0, eps=1e-6) == 1e-6

    def test_default_is_lentz_floor(self) -> None:
        """Default eps is the Lentz floor"""
        assert denom_safe_signed(0.0) == EPS_LENTZ_FLOOR

    def test_non_positive_eps_rejected(self) -> None:
        """eps must be positive"""
        with pytest.raises(ValueError, match="eps must be positive"):
            denom_safe_signed(1.0, eps=0.0)


class TestSafeDivide:
    """Tests for safe_divide"""

    def test_normal_division(self) -> None:
        assert safe_divide(10.0, 2.0) == 5.0

    def test_zero_denominator_returns_fallback(self) -> None:
        """Denominators below eps give the fallback"""
        assert safe_divide(10.0, 0.0) == 0.0
        assert safe_divide(10.0, EPS_FLOAT_COMPARE_ABS / 2, fallback=-1.0) == -1.0


# =============================================================================
# NaN/Inf
# =============================================================================


class TestFiniteChecks:
    """Tests for is_valid_float"""

    def test_is_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(math.nan)
        assert not is_valid_float(math.inf)
        assert not is_valid_float(-math.inf)


# =============================================================================
# COMPARISONS
# =============================================================================


class TestComparisons:
    """Tests for is_integer / clamp"""

    def test_is_integer(self) -> None:
        assert is_integer(3.0)
        assert is_integer(-2.0)
        assert not is_integer(2.5)
        assert not is_integer(math.inf)
        assert not is_integer(math.nan)

    def test_clamp(self) -> None:
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(15.0, 0.0, 10.0) == 10.0
        assert clamp(5.0, 0.0, 10.0) == 5.0
        assert clamp(5.0, min_value=6.0) == 6.0
        assert clamp(5.0, max_value=4.0) == 4.0


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidation:
    """Tests for validate_* helpers"""

    def test_validate_finite(self) -> None:
        validate_finite(1.0, "x")
        with pytest.raises(DomainViolation, match="x must be a valid float"):
            validate_finite(math.nan, "x")

    def test_validate_positive(self) -> None:
        validate_positive(1.0, "shape")
        with pytest.raises(DomainViolation, match="shape must be positive"):
            validate_positive(0.0, "shape")
        with pytest.raises(DomainViolation, match="shape must be positive"):
            validate_positive(0.5, "shape", eps=1.0)

    def test_validate_non_negative(self) -> None:
        validate_non_negative(0.0, "x")
        with pytest.raises(DomainViolation, match="non-negative"):
            validate_non_negative(-1e-9, "x")

    def test_validate_in_range(self) -> None:
        validate_in_range(0.5, "x", 0.0, 1.0)
        validate_in_range(0.0, "x", 0.0, 1.0)
        with pytest.raises(DomainViolation, match="x must be <= 1.0"):
            validate_in_range(1.5, "x", 0.0, 1.0)
        with pytest.raises(DomainViolation, match="x must be >= 0.0"):
            validate_in_range(-0.5, "x", 0.0, 1.0)

    def test_validate_probability_open(self) -> None:
        """Default interval is open"""
        validate_probability(0.5)
        with pytest.raises(DomainViolation, match=r"\(0, 1\)"):
            validate_probability(0.0)
        with pytest.raises(DomainViolation, match=r"\(0, 1\)"):
            validate_probability(1.0)

    def test_validate_probability_closed(self) -> None:
        validate_probability(0.0, open_interval=False)
        validate_probability(1.0, open_interval=False)
        with pytest.raises(DomainViolation, match=r"\[0, 1\]"):
            validate_probability(1.01, open_interval=False)
