"""
Tests for continuous distribution models.

Checks:
1. Standard normal kernel accuracy and round trip
2. pdf / cdf against reference values
3. Inverse cdf round trips over a probability grid
4. Boundary densities and parameter validation
"""

import math

import pytest
from pydantic import ValidationError

from src.core.domain.outcomes import DomainViolation
from src.distributions.base import ContinuousDistribution
from src.distributions import (
    BetaDistribution,
    ChiSquared,
    Exponential,
    FDistribution,
    GammaDistribution,
    LogNormal,
    Normal,
    StandardNormal,
    StudentT,
    Weibull,
    standard_normal_cdf,
    standard_normal_inverse,
    standard_normal_pdf,
)

P_GRID = [0.001, 0.01, 0.05, 0.25, 0.5, 0.75, 0.95, 0.99, 0.999]

# =============================================================================
# STANDARD NORMAL
# =============================================================================


class TestStandardNormal:
    """Kernel functions"""

    def test_reference_values(self) -> None:
        assert standard_normal_cdf(1.96) == pytest.approx(0.9750021, abs=1e-6)
        assert standard_normal_cdf(0.0) == pytest.approx(0.5, abs=1e-12)
        assert standard_normal_inverse(0.975) == pytest.approx(1.959963985, abs=1e-8)
        assert standard_normal_pdf(0.0) == pytest.approx(1.0 / math.sqrt(2.0 * math.pi), rel=1e-14)

    def test_inverse_is_odd(self) -> None:
        for p in (0.001, 0.02, 0.2, 0.4):
            assert standard_normal_inverse(p) == pytest.approx(-standard_normal_inverse(1.0 - p), abs=1e-8)

    @pytest.mark.parametrize("z", [i / 2.0 for i in range(-12, 13)])
    def test_round_trip_wide(self, z: float) -> None:
        """
        Tails are limited by the erf approximation: at z = +/-6 the round
        trip is off by about 6e-4, hence the 1e-3 tolerance
        """
        assert standard_normal_inverse(standard_normal_cdf(z)) == pytest.approx(z, abs=1e-3)

    @pytest.mark.parametrize("z", [i / 10.0 for i in range(-20, 21)])
    def test_round_trip_central(self, z: float) -> None:
        assert standard_normal_inverse(standard_normal_cdf(z)) == pytest.approx(z, abs=1e-5)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.1, math.nan])
    def test_inverse_domain(self, p: float) -> None:
        with pytest.raises(DomainViolation):
            standard_normal_inverse(p)

    def test_model_wraps_kernel(self) -> None:
        model = StandardNormal()
        assert model.cdf(1.0) == standard_normal_cdf(1.0)
        assert model.inverse_cdf(0.3) == standard_normal_inverse(0.3)
        assert model.sf(1.0) == pytest.approx(1.0 - standard_normal_cdf(1.0))

    def test_nan_point_rejected(self) -> None:
        with pytest.raises(DomainViolation, match="NaN"):
            StandardNormal().cdf(math.nan)


# =============================================================================
# REFERENCE VALUES
# =============================================================================


class TestReferenceValues:
    """pdf / cdf / inverse at published spreadsheet values"""

    def test_normal(self) -> None:
        model = Normal(mean=40.0, std_dev=1.5)
        assert model.cdf(42.0) == pytest.approx(0.9087888, abs=1e-6)
        assert model.pdf(42.0) == pytest.approx(0.10934005, abs=1e-7)
        assert model.inverse_cdf(0.908789) == pytest.approx(42.000002, abs=1e-5)

    def test_lognormal(self) -> None:
        model = LogNormal(mean=3.5, std_dev=1.2)
        assert model.cdf(4.0) == pytest.approx(0.0390836, abs=1e-6)
        assert model.pdf(4.0) == pytest.approx(0.0176176, abs=1e-6)
        assert model.inverse_cdf(0.039084) == pytest.approx(4.0000252, abs=1e-3)

    def test_student_t(self) -> None:
        assert StudentT(degrees_freedom=1).cdf(60.0) == pytest.approx(0.99469533, abs=1e-6)
        assert StudentT(degrees_freedom=3).pdf(8.0) == pytest.approx(0.00073691, abs=1e-7)
        assert StudentT(degrees_freedom=2).inverse_cdf(0.75) == pytest.approx(0.8164966, abs=1e-6)
        assert StudentT(degrees_freedom=7).cdf(0.0) == pytest.approx(0.5, abs=1e-12)
        assert StudentT(degrees_freedom=7).inverse_cdf(0.5) == 0.0

    def test_chi_squared(self) -> None:
        assert ChiSquared(degrees_freedom=1).cdf(0.5) == pytest.approx(0.52049988, abs=1e-6)
        assert ChiSquared(degrees_freedom=3).pdf(2.0) == pytest.approx(0.20755375, abs=1e-7)
        assert ChiSquared(degrees_freedom=1).inverse_cdf(0.93) == pytest.approx(3.283020287, abs=1e-6)
        assert ChiSquared(degrees_freedom=2).inverse_cdf(0.6) == pytest.approx(1.832581464, abs=1e-6)
        assert ChiSquared(degrees_freedom=10).inverse_cdf(1.0 - 0.050001) == pytest.approx(18.306973, abs=1e-4)

    def test_f(self) -> None:
        model = FDistribution(numerator_df=6, denominator_df=4)
        assert model.cdf(15.2069) == pytest.approx(0.99, abs=1e-5)
        assert model.pdf(15.2069) == pytest.approx(0.0012238, abs=1e-6)
        assert model.inverse_cdf(0.01) == pytest.approx(0.10930991, abs=1e-6)

    def test_gamma(self) -> None:
        model = GammaDistribution(alpha=9, beta=2)
        assert model.cdf(10.00001131) == pytest.approx(0.068094, abs=1e-6)
        assert model.pdf(10.00001131) == pytest.approx(0.032639, abs=1e-6)
        assert model.inverse_cdf(0.068094) == pytest.approx(10.0000112, abs=1e-3)
        assert model.inverse_cdf(0.0) == 0.0

    def test_beta(self) -> None:
        model = BetaDistribution(alpha=8, beta=10, lower=1, upper=3)
        assert model.cdf(2.0) == pytest.approx(0.6854706, abs=1e-5)
        assert model.pdf(2.0) == pytest.approx(1.4837646, abs=1e-6)
        assert model.inverse_cdf(0.685470581) == pytest.approx(2.0, abs=1e-4)
        assert model.inverse_cdf(0.0) == 1.0
        assert model.inverse_cdf(1.0) == 3.0

    def test_exponential(self) -> None:
        model = Exponential(rate=10)
        assert model.cdf(0.2) == pytest.approx(0.86466472, abs=1e-8)
        assert model.pdf(0.2) == pytest.approx(1.35335283, abs=1e-8)
        assert model.inverse_cdf(model.cdf(0.2)) == pytest.approx(0.2, abs=1e-12)

    def test_weibull(self) -> None:
        model = Weibull(alpha=20, beta=100)
        assert model.cdf(105.0) == pytest.approx(0.929581, abs=1e-6)
        assert model.pdf(105.0) == pytest.approx(0.035589, abs=1e-6)
        assert model.cdf(model.inverse_cdf(0.4)) == pytest.approx(0.4, abs=1e-12)


# =============================================================================
# ROUND TRIPS
# =============================================================================

ROUND_TRIP_MODELS = [
    LogNormal(mean=0.5, std_dev=0.8),
    StudentT(degrees_freedom=1),
    StudentT(degrees_freedom=2),
    StudentT(degrees_freedom=5),
    StudentT(degrees_freedom=30),
    ChiSquared(degrees_freedom=2),
    ChiSquared(degrees_freedom=5),
    ChiSquared(degrees_freedom=10),
    FDistribution(numerator_df=2, denominator_df=3),
    FDistribution(numerator_df=6, denominator_df=4),
    FDistribution(numerator_df=10, denominator_df=20),
    GammaDistribution(alpha=1, beta=1),
    GammaDistribution(alpha=2.5, beta=0.5),
    GammaDistribution(alpha=9, beta=2),
    BetaDistribution(alpha=1, beta=1),
    BetaDistribution(alpha=2, beta=5),
    BetaDistribution(alpha=3.5, beta=1.5),
]


class TestInverseRoundTrip:
    """cdf(inverse_cdf(p)) == p"""

    @pytest.mark.parametrize("model", ROUND_TRIP_MODELS, ids=lambda m: repr(m))
    @pytest.mark.parametrize("p", P_GRID)
    def test_round_trip(self, model, p: float) -> None:
        assert abs(model.cdf(model.inverse_cdf(p)) - p) < 1e-6

    @pytest.mark.parametrize("model", ROUND_TRIP_MODELS, ids=lambda m: repr(m))
    def test_quantiles_increase(self, model) -> None:
        quantiles = [model.inverse_cdf(p) for p in P_GRID]
        assert all(b > a for a, b in zip(quantiles, quantiles[1:]))

    def test_inverse_rejects_endpoints(self) -> None:
        with pytest.raises(DomainViolation):
            ChiSquared(degrees_freedom=3).inverse_cdf(1.0)
        with pytest.raises(DomainViolation):
            StudentT(degrees_freedom=3).inverse_cdf(0.0)
        with pytest.raises(DomainViolation):
            GammaDistribution(alpha=2, beta=1).inverse_cdf(1.0)


# =============================================================================
# BOUNDARIES / VALIDATION
# =============================================================================


class TestBoundaries:
    """Densities at the edge of the support"""

    def test_outside_support_is_zero(self) -> None:
        assert GammaDistribution(alpha=2, beta=1).pdf(-1.0) == 0.0
        assert GammaDistribution(alpha=2, beta=1).cdf(-1.0) == 0.0
        assert ChiSquared(degrees_freedom=3).cdf(-5.0) == 0.0
        assert LogNormal().pdf(0.0) == 0.0
        assert BetaDistribution(alpha=2, beta=2).pdf(1.5) == 0.0
        assert Exponential(rate=1).cdf(-1.0) == 0.0

    def test_density_at_zero(self) -> None:
        assert GammaDistribution(alpha=1, beta=2).pdf(0.0) == 0.5
        assert GammaDistribution(alpha=3, beta=2).pdf(0.0) == 0.0
        assert math.isinf(GammaDistribution(alpha=0.5, beta=2).pdf(0.0))
        assert ChiSquared(degrees_freedom=2).pdf(0.0) == 0.5
        assert math.isinf(ChiSquared(degrees_freedom=1).pdf(0.0))
        assert FDistribution(numerator_df=2, denominator_df=5).pdf(0.0) == 1.0
        assert Weibull(alpha=1, beta=4).pdf(0.0) == 0.25

    def test_infinite_points(self) -> None:
        assert StudentT(degrees_freedom=3).cdf(math.inf) == 1.0
        assert StudentT(degrees_freedom=3).cdf(-math.inf) == 0.0
        assert GammaDistribution(alpha=2, beta=1).cdf(math.inf) == 1.0
        assert Weibull(alpha=2, beta=1).cdf(math.inf) == 1.0

    def test_weibull_far_tail_does_not_overflow(self) -> None:
        model = Weibull(alpha=50, beta=1)
        assert model.cdf(1e6) == 1.0
        assert model.pdf(1e6) == 0.0

    def test_cdf_monotone(self) -> None:
        model = FDistribution(numerator_df=3, denominator_df=7)
        values = [model.cdf(x / 10.0) for x in range(0, 100)]
        assert all(b >= a for a, b in zip(values, values[1:]))


class TestValidation:
    """Parameter checks at construction"""

    @pytest.mark.parametrize(
        ("factory", "kwargs"),
        [
            (Normal, {"mean": 0.0, "std_dev": 0.0}),
            (LogNormal, {"mean": 0.0, "std_dev": -1.0}),
            (StudentT, {"degrees_freedom": 0.0}),
            (ChiSquared, {"degrees_freedom": -2.0}),
            (FDistribution, {"numerator_df": 1.0, "denominator_df": 0.0}),
            (GammaDistribution, {"alpha": 0.0, "beta": 1.0}),
            (BetaDistribution, {"alpha": 1.0, "beta": 1.0, "lower": 2.0, "upper": 1.0}),
            (Exponential, {"rate": 0.0}),
            (Weibull, {"alpha": 1.0, "beta": -1.0}),
            (Normal, {"mean": math.nan, "std_dev": 1.0}),
            (Normal, {"mean": 0.0, "std_dev": 1.0, "skew": 1.0}),
        ],
    )
    def test_invalid_parameters(self, factory, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            factory(**kwargs)

    def test_models_are_frozen(self) -> None:
        model = Normal(mean=1.0, std_dev=2.0)
        with pytest.raises(ValidationError):
            model.mean = 3.0

    def test_inverse_cdf_is_required(self) -> None:
        """A distribution without a quantile function cannot be instantiated"""

        class Triangle(ContinuousDistribution):
            def pdf(self, x: float) -> float:
                return max(0.0, 1.0 - abs(x))

            def cdf(self, x: float) -> float:
                if x <= 0.0:
                    return 0.5 * max(0.0, 1.0 + x) ** 2
                return 1.0 - 0.5 * max(0.0, 1.0 - x) ** 2

        with pytest.raises(TypeError, match="inverse_cdf"):
            Triangle()
