"""
Tests for Bessel functions J, Y, I, K.
"""

import math

import pytest

from src.core.domain.outcomes import DomainViolation
from src.core.math.bessel import (
    bessel_i,
    bessel_i0,
    bessel_i1,
    bessel_j,
    bessel_j0,
    bessel_j1,
    bessel_k,
    bessel_k0,
    bessel_k1,
    bessel_y,
    bessel_y0,
    bessel_y1,
)

TOL = 1e-6


class TestOrderZeroAndOne:
    """Polynomial approximations at x = 1"""

    def test_first_kind(self) -> None:
        assert bessel_j0(1.0) == pytest.approx(0.7651976866, abs=TOL)
        assert bessel_j1(1.0) == pytest.approx(0.4400505857, abs=TOL)

    def test_second_kind(self) -> None:
        assert bessel_y0(1.0) == pytest.approx(0.0882569642, abs=TOL)
        assert bessel_y1(1.0) == pytest.approx(-0.7812128213, abs=TOL)

    def test_modified_first_kind(self) -> None:
        assert bessel_i0(1.0) == pytest.approx(1.266065878, abs=TOL)
        assert bessel_i1(1.0) == pytest.approx(0.565159104, abs=TOL)

    def test_modified_second_kind(self) -> None:
        assert bessel_k0(1.0) == pytest.approx(0.4210244382, abs=TOL)
        assert bessel_k1(1.0) == pytest.approx(0.6019072302, abs=TOL)

    def test_j0_at_origin_is_exact(self) -> None:
        assert bessel_j0(0.0) == 1.0

    @pytest.mark.parametrize("x", [0.5, 3.0, 9.0, 15.0])
    def test_large_and_small_argument_branches(self, x: float) -> None:
        """Both approximation branches satisfy the Wronskian J1 Y0 - J0 Y1 = 2 / (pi x)"""
        wronskian = bessel_j1(x) * bessel_y0(x) - bessel_j0(x) * bessel_y1(x)
        assert wronskian == pytest.approx(2.0 / (math.pi * x), abs=1e-6)


class TestHigherOrders:
    """Recurrences for n >= 2"""

    def test_besselj_miller_branch(self) -> None:
        """|x| < n goes through backward recurrence"""
        assert bessel_j(1.9, 2) == pytest.approx(0.329925829, abs=TOL)
        assert bessel_j(1.0, 2) == pytest.approx(0.1149034849, abs=TOL)
        assert bessel_j(1.0, 3) == pytest.approx(0.01956335398, abs=TOL)

    def test_besselj_upward_branch(self) -> None:
        """|x| > n goes through upward recurrence"""
        x = 10.0
        for n in range(2, 6):
            lhs = bessel_j(x, n - 1) + bessel_j(x, n + 1)
            assert lhs == pytest.approx(2.0 * n / x * bessel_j(x, n), abs=1e-6)

    def test_besselj_odd_order_is_odd(self) -> None:
        assert bessel_j(-2.5, 3) == pytest.approx(-bessel_j(2.5, 3), abs=1e-12)
        assert bessel_j(-2.5, 2) == pytest.approx(bessel_j(2.5, 2), abs=1e-12)

    def test_besselj_zero_argument(self) -> None:
        assert bessel_j(0.0, 0) == 1.0
        assert bessel_j(0.0, 3) == 0.0

    def test_bessely(self) -> None:
        assert bessel_y(1.0, 2) == pytest.approx(-1.650682607, abs=TOL)

    def test_besseli(self) -> None:
        assert bessel_i(1.0, 2) == pytest.approx(0.1357476698, abs=TOL)
        assert bessel_i(0.0, 2) == 0.0

    def test_besselk(self) -> None:
        assert bessel_k(1.0, 2) == pytest.approx(1.624838899, abs=TOL)


class TestDomain:
    """Invalid arguments"""

    @pytest.mark.parametrize("n", [-1, 1.5, -2.0, math.nan, True, "2"])
    def test_order_must_be_non_negative_integer(self, n: object) -> None:
        with pytest.raises(DomainViolation, match="order n"):
            bessel_j(1.0, n)  # type: ignore[arg-type]

    def test_integral_float_order(self) -> None:
        """An order of 2.0 is the same as 2"""
        assert bessel_j(1.5, 2.0) == bessel_j(1.5, 2)
        assert bessel_y(1.5, 3.0) == bessel_y(1.5, 3)
        assert bessel_i(1.5, 2.0) == bessel_i(1.5, 2)
        assert bessel_k(1.5, 1.0) == bessel_k(1.5, 1)

    @pytest.mark.parametrize("x", [0.0, -1.0])
    def test_second_kind_needs_positive_x(self, x: float) -> None:
        with pytest.raises(DomainViolation):
            bessel_y(x, 1)
        with pytest.raises(DomainViolation):
            bessel_k(x, 1)

    def test_nan_argument(self) -> None:
        with pytest.raises(DomainViolation):
            bessel_i(math.nan, 1)
