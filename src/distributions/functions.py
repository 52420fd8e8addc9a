"""
Distribution Functions — Caller-Facing Entry Points

Spreadsheet-named entry points over the distribution models. Each one
builds the model, evaluates, and returns an Outcome:
- Success(value) for a finite result
- Failure(INVALID_PARAMETER) for bad parameters or arguments
- Failure(DID_NOT_CONVERGE / SINGULAR) when an inverse cannot be solved
- Failure(OVERFLOW) for NaN/Inf results (including density poles)

None of these functions raise for out-of-domain input.
"""

import math
from collections.abc import Callable

from src.core.domain.outcomes import DomainViolation, Outcome, capture
from src.core.math import special_functions
from src.core.math.numerical_safeguards import validate_non_negative, validate_probability
from src.distributions.base import ContinuousDistribution, DiscreteDistribution
from src.distributions.continuous import (
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
    standard_normal_inverse,
)
from src.distributions.discrete import Binomial, Hypergeometric, NegativeBinomial, Poisson


def _distribution_value(
    factory: Callable[[], ContinuousDistribution | DiscreteDistribution],
    x: float,
    cumulative: bool,
) -> Outcome[float]:
    def evaluate() -> float:
        distribution = factory()
        if cumulative:
            return distribution.cdf(x)
        if isinstance(distribution, DiscreteDistribution):
            return distribution.pmf(x)
        return distribution.pdf(x)

    return capture(evaluate)


def _quantile(factory: Callable[[], ContinuousDistribution], p: float) -> Outcome[float]:
    return capture(lambda: factory().inverse_cdf(p))


# =============================================================================
# NORMAL FAMILY
# =============================================================================


def norm_dist(x: float, mean: float, std_dev: float, cumulative: bool) -> Outcome[float]:
    return _distribution_value(lambda: Normal(mean=mean, std_dev=std_dev), x, cumulative)


def norm_s_dist(z: float, cumulative: bool = True) -> Outcome[float]:
    return _distribution_value(StandardNormal, z, cumulative)


def norm_inv(p: float, mean: float, std_dev: float) -> Outcome[float]:
    return _quantile(lambda: Normal(mean=mean, std_dev=std_dev), p)


def norm_s_inv(p: float) -> Outcome[float]:
    return capture(standard_normal_inverse, p)


def lognorm_dist(x: float, mean: float, std_dev: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        if x <= 0:
            raise DomainViolation(f"x must be positive, got {x}")
        distribution = LogNormal(mean=mean, std_dev=std_dev)
        return distribution.cdf(x) if cumulative else distribution.pdf(x)

    return capture(evaluate)


def lognorm_inv(p: float, mean: float, std_dev: float) -> Outcome[float]:
    return _quantile(lambda: LogNormal(mean=mean, std_dev=std_dev), p)


# =============================================================================
# STUDENT T
# =============================================================================


def t_dist(x: float, degrees_freedom: float, cumulative: bool) -> Outcome[float]:
    return _distribution_value(lambda: StudentT(degrees_freedom=degrees_freedom), x, cumulative)


def t_dist_rt(x: float, degrees_freedom: float) -> Outcome[float]:
    """Right tail P(T > x)."""
    return capture(lambda: StudentT(degrees_freedom=degrees_freedom).sf(x))


def t_dist_2t(x: float, degrees_freedom: float) -> Outcome[float]:
    """Two-tailed P(|T| > x) for x >= 0."""

    def evaluate() -> float:
        validate_non_negative(x, "x")
        return 2.0 * StudentT(degrees_freedom=degrees_freedom).sf(x)

    return capture(evaluate)


def t_inv(p: float, degrees_freedom: float) -> Outcome[float]:
    return _quantile(lambda: StudentT(degrees_freedom=degrees_freedom), p)


def t_inv_2t(p: float, degrees_freedom: float) -> Outcome[float]:
    """Positive t with two-tailed probability p, p in (0, 1]."""

    def evaluate() -> float:
        validate_probability(p, "p", open_interval=False)
        distribution = StudentT(degrees_freedom=degrees_freedom)
        if p == 0.0:
            raise DomainViolation("p must be in (0, 1]")
        if p == 1.0:
            return 0.0
        return abs(distribution.inverse_cdf(1.0 - p / 2.0))

    return capture(evaluate)


# =============================================================================
# CHI-SQUARED / F
# =============================================================================


def chisq_dist(x: float, degrees_freedom: float, cumulative: bool) -> Outcome[float]:
    return _distribution_value(lambda: ChiSquared(degrees_freedom=degrees_freedom), x, cumulative)


def chisq_dist_rt(x: float, degrees_freedom: float) -> Outcome[float]:
    return capture(lambda: ChiSquared(degrees_freedom=degrees_freedom).sf(x))


def chisq_inv(p: float, degrees_freedom: float) -> Outcome[float]:
    return _quantile(lambda: ChiSquared(degrees_freedom=degrees_freedom), p)


def chisq_inv_rt(p: float, degrees_freedom: float) -> Outcome[float]:
    def evaluate() -> float:
        validate_probability(p, "p")
        return ChiSquared(degrees_freedom=degrees_freedom).inverse_cdf(1.0 - p)

    return capture(evaluate)


def f_dist(x: float, numerator_df: float, denominator_df: float, cumulative: bool) -> Outcome[float]:
    return _distribution_value(
        lambda: FDistribution(numerator_df=numerator_df, denominator_df=denominator_df),
        x,
        cumulative,
    )


def f_dist_rt(x: float, numerator_df: float, denominator_df: float) -> Outcome[float]:
    return capture(lambda: FDistribution(numerator_df=numerator_df, denominator_df=denominator_df).sf(x))


def f_inv(p: float, numerator_df: float, denominator_df: float) -> Outcome[float]:
    return _quantile(lambda: FDistribution(numerator_df=numerator_df, denominator_df=denominator_df), p)


def f_inv_rt(p: float, numerator_df: float, denominator_df: float) -> Outcome[float]:
    def evaluate() -> float:
        validate_probability(p, "p")
        distribution = FDistribution(numerator_df=numerator_df, denominator_df=denominator_df)
        return distribution.inverse_cdf(1.0 - p)

    return capture(evaluate)


# =============================================================================
# GAMMA / BETA / EXPONENTIAL / WEIBULL
# =============================================================================


def gamma_dist(x: float, alpha: float, beta: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        validate_non_negative(x, "x")
        distribution = GammaDistribution(alpha=alpha, beta=beta)
        return distribution.cdf(x) if cumulative else distribution.pdf(x)

    return capture(evaluate)


def gamma_inv(p: float, alpha: float, beta: float) -> Outcome[float]:
    def evaluate() -> float:
        validate_probability(p, "p", open_interval=False)
        if p == 1.0:
            raise DomainViolation("p must be < 1")
        return GammaDistribution(alpha=alpha, beta=beta).inverse_cdf(p)

    return capture(evaluate)


def beta_dist(
    x: float,
    alpha: float,
    beta: float,
    cumulative: bool,
    lower: float = 0.0,
    upper: float = 1.0,
) -> Outcome[float]:
    def evaluate() -> float:
        distribution = BetaDistribution(alpha=alpha, beta=beta, lower=lower, upper=upper)
        if not lower <= x <= upper:
            raise DomainViolation(f"x must be in [{lower}, {upper}], got {x}")
        return distribution.cdf(x) if cumulative else distribution.pdf(x)

    return capture(evaluate)


def beta_inv(p: float, alpha: float, beta: float, lower: float = 0.0, upper: float = 1.0) -> Outcome[float]:
    def evaluate() -> float:
        validate_probability(p, "p", open_interval=False)
        return BetaDistribution(alpha=alpha, beta=beta, lower=lower, upper=upper).inverse_cdf(p)

    return capture(evaluate)


def expon_dist(x: float, rate: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        validate_non_negative(x, "x")
        distribution = Exponential(rate=rate)
        return distribution.cdf(x) if cumulative else distribution.pdf(x)

    return capture(evaluate)


def weibull_dist(x: float, alpha: float, beta: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        validate_non_negative(x, "x")
        distribution = Weibull(alpha=alpha, beta=beta)
        return distribution.cdf(x) if cumulative else distribution.pdf(x)

    return capture(evaluate)


# =============================================================================
# DISCRETE
# =============================================================================


def binom_dist(successes: float, trials: int, probability: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        distribution = Binomial(trials=trials, probability=probability)
        if not 0 <= successes <= trials:
            raise DomainViolation(f"successes must be in [0, {trials}], got {successes}")
        return distribution.cdf(successes) if cumulative else distribution.pmf(successes)

    return capture(evaluate)


def binom_inv(trials: int, probability: float, alpha: float) -> Outcome[int]:
    return capture(lambda: Binomial(trials=trials, probability=probability).inverse_cdf(alpha))


def poisson_dist(x: float, mean: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        validate_non_negative(x, "x")
        distribution = Poisson(mean=mean)
        return distribution.cdf(x) if cumulative else distribution.pmf(x)

    return capture(evaluate)


def hypgeom_dist(
    sample_successes: float,
    sample_size: int,
    population_successes: int,
    population_size: int,
    cumulative: bool,
) -> Outcome[float]:
    def evaluate() -> float:
        distribution = Hypergeometric(
            population=population_size,
            successes=population_successes,
            draws=sample_size,
        )
        validate_non_negative(sample_successes, "sample_successes")
        return distribution.cdf(sample_successes) if cumulative else distribution.pmf(sample_successes)

    return capture(evaluate)


def negbinom_dist(failures: float, successes: float, probability: float, cumulative: bool) -> Outcome[float]:
    def evaluate() -> float:
        validate_non_negative(failures, "failures")
        distribution = NegativeBinomial(successes=successes, probability=probability)
        return distribution.cdf(failures) if cumulative else distribution.pmf(failures)

    return capture(evaluate)


# =============================================================================
# CONFIDENCE INTERVALS
# =============================================================================


def confidence_norm(alpha: float, std_dev: float, size: int) -> Outcome[float]:
    """Half-width of the normal confidence interval for a mean."""

    def evaluate() -> float:
        validate_probability(alpha, "alpha")
        if std_dev <= 0 or size < 1:
            raise DomainViolation(f"std_dev must be > 0 and size >= 1, got {std_dev}, {size}")
        return standard_normal_inverse(1.0 - alpha / 2.0) * std_dev / math.sqrt(size)

    return capture(evaluate)


def confidence_t(alpha: float, std_dev: float, size: int) -> Outcome[float]:
    """Half-width of the Student-t confidence interval for a mean."""

    def evaluate() -> float:
        validate_probability(alpha, "alpha")
        if std_dev <= 0 or size < 2:
            raise DomainViolation(f"std_dev must be > 0 and size >= 2, got {std_dev}, {size}")
        t = StudentT(degrees_freedom=size - 1).inverse_cdf(1.0 - alpha / 2.0)
        return t * std_dev / math.sqrt(size)

    return capture(evaluate)


# =============================================================================
# SPECIAL FUNCTIONS
# =============================================================================


def gammaln(x: float) -> Outcome[float]:
    return capture(special_functions.log_gamma, x)


def gamma(x: float) -> Outcome[float]:
    return capture(special_functions.gamma_function, x)


def erf(lower: float, upper: float | None = None) -> Outcome[float]:
    """erf(lower), or erf(upper) - erf(lower) when upper is given."""
    if upper is None:
        return capture(special_functions.erf, lower)
    return capture(lambda: special_functions.erf(upper) - special_functions.erf(lower))


def erfc(x: float) -> Outcome[float]:
    return capture(special_functions.erfc, x)
