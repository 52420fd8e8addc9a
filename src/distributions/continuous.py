"""
Continuous Distributions — PDF / CDF / Inverse CDF

Normal, standard normal, lognormal, Student t, chi-squared, F, gamma, beta,
exponential and Weibull.

CDFs route through the special-function kernel:
- normal: 0.5 * erfc(-z / sqrt(2))
- t: incomplete beta with x = df / (df + t^2)
- chi-squared: gamma_cdf(x / 2, df / 2)
- F: incomplete beta with t = df2 / (df2 + df1 * x)
- gamma: gamma_cdf(x / beta, alpha)

Densities are evaluated in log space and define their own limits at finite
support endpoints. Inverse CDFs start from a distribution-specific seed and
are refined by the shared Newton-Raphson solver (standard normal excepted:
its rational approximation is used directly).

CRITICAL INVARIANTS:
1. pdf(x) >= 0 everywhere, 0 outside the support
2. cdf is non-decreasing and maps the support onto [0, 1]
3. cdf(inverse_cdf(p)) == p within solver tolerance for p in (0, 1)
4. An inverse that fails to converge raises, never returns the seed
"""

import math
from typing import Final

from pydantic import Field, model_validator

from src.core.math.numerical_safeguards import clamp
from src.core.math.special_functions import (
    erfc,
    gamma_cdf,
    incomplete_beta,
    log_beta,
    log_gamma,
)
from src.distributions.base import ContinuousDistribution, check_point, require_probability

SQRT_TWO: Final[float] = math.sqrt(2.0)
LOG_SQRT_TWO_PI: Final[float] = 0.5 * math.log(2.0 * math.pi)

# exp() overflows above ~709.78
_MAX_EXP_ARGUMENT: Final[float] = 700.0

# Regime boundaries of the rational normal quantile
NORMAL_INVERSE_P_LOW: Final[float] = 0.02425
NORMAL_INVERSE_P_HIGH: Final[float] = 1.0 - NORMAL_INVERSE_P_LOW

_NORMAL_INVERSE_A: Final[tuple[float, ...]] = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_NORMAL_INVERSE_B: Final[tuple[float, ...]] = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_NORMAL_INVERSE_C: Final[tuple[float, ...]] = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_NORMAL_INVERSE_D: Final[tuple[float, ...]] = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)


def _polynomial(coefficients: tuple[float, ...], x: float) -> float:
    """Horner evaluation, highest-order coefficient first."""
    result = 0.0
    for coefficient in coefficients:
        result = result * x + coefficient
    return result


# =============================================================================
# STANDARD NORMAL KERNEL
# =============================================================================


def standard_normal_pdf(z: float) -> float:
    return math.exp(-0.5 * z * z - LOG_SQRT_TWO_PI)


def standard_normal_cdf(z: float) -> float:
    """
    Phi(z) = 0.5 * erfc(-z / sqrt(2)).

    Examples:
        >>> round(standard_normal_cdf(1.96), 6)
        0.975002
    """
    return 0.5 * erfc(-z / SQRT_TWO)


def standard_normal_inverse(p: float) -> float:
    """
    Quantile of the standard normal distribution.

    Beasley-Springer-Moro style rational approximation (relative error
    ~1.15e-9) with separate lower-tail, central and upper-tail regimes. No
    iteration.

    Raises:
        DomainViolation: If p is not in (0, 1)

    Examples:
        >>> round(standard_normal_inverse(0.975), 6)
        1.959964
    """
    p = require_probability(p)

    if p < NORMAL_INVERSE_P_LOW:
        q = math.sqrt(-2.0 * math.log(p))
        return _polynomial(_NORMAL_INVERSE_C, q) / (_polynomial(_NORMAL_INVERSE_D, q) * q + 1.0)

    if p > NORMAL_INVERSE_P_HIGH:
        q = math.sqrt(-2.0 * math.log1p(-p))
        return -_polynomial(_NORMAL_INVERSE_C, q) / (_polynomial(_NORMAL_INVERSE_D, q) * q + 1.0)

    q = p - 0.5
    r = q * q
    return _polynomial(_NORMAL_INVERSE_A, r) * q / (_polynomial(_NORMAL_INVERSE_B, r) * r + 1.0)


# =============================================================================
# SEEDS
# =============================================================================


def _gamma_quantile_seed(p: float, shape: float, scale: float) -> float:
    """Wilson-Hilferty cube approximation, small-x power law as fallback."""
    if shape >= 1.0:
        z = standard_normal_inverse(p)
        base = 1.0 - 1.0 / (9.0 * shape) + z / (3.0 * math.sqrt(shape))
        if base > 0.0:
            return shape * scale * base**3
    # P(a, x) ~ x^a / Gamma(a + 1) as x -> 0
    return scale * math.exp((math.log(p) + log_gamma(shape + 1.0)) / shape)


def _beta_quantile_seed(p: float, a: float, b: float) -> float:
    """Initial guess for the beta quantile (tail power law or normal mapping)."""
    if a >= 1.0 and b >= 1.0:
        tail = p if p < 0.5 else 1.0 - p
        t = math.sqrt(-2.0 * math.log(tail))
        x = (2.30753 + t * 0.27061) / (1.0 + t * (0.99229 + t * 0.04481)) - t
        if p < 0.5:
            x = -x
        al = (x * x - 3.0) / 6.0
        h = 2.0 / (1.0 / (2.0 * a - 1.0) + 1.0 / (2.0 * b - 1.0))
        w = x * math.sqrt(al + h) / h - (1.0 / (2.0 * b - 1.0) - 1.0 / (2.0 * a - 1.0)) * (
            al + 5.0 / 6.0 - 2.0 / (3.0 * h)
        )
        return a / (a + b * math.exp(2.0 * w))

    lower_tail = math.exp(a * math.log(a / (a + b))) / a
    upper_tail = math.exp(b * math.log(b / (a + b))) / b
    total = lower_tail + upper_tail
    if p < lower_tail / total:
        return (a * total * p) ** (1.0 / a)
    return 1.0 - (b * total * (1.0 - p)) ** (1.0 / b)


def _student_t_seed(p: float, df: float) -> float:
    """Exact for df = 1, 2; Cornish-Fisher expansion around z otherwise."""
    if df == 1.0:
        return math.tan(math.pi * (p - 0.5))
    if df == 2.0:
        return (2.0 * p - 1.0) / math.sqrt(2.0 * p * (1.0 - p))

    z = standard_normal_inverse(p)
    z2 = z * z
    g1 = (z2 + 1.0) * z / 4.0
    g2 = ((5.0 * z2 + 16.0) * z2 + 3.0) * z / 96.0
    g3 = (((3.0 * z2 + 19.0) * z2 + 17.0) * z2 - 15.0) * z / 384.0
    return z + g1 / df + g2 / df**2 + g3 / df**3


# =============================================================================
# NORMAL FAMILY
# =============================================================================


class StandardNormal(ContinuousDistribution):
    """N(0, 1)."""

    def pdf(self, x: float) -> float:
        return standard_normal_pdf(check_point(x))

    def cdf(self, x: float) -> float:
        return standard_normal_cdf(check_point(x))

    def inverse_cdf(self, p: float) -> float:
        return standard_normal_inverse(p)


class Normal(ContinuousDistribution):
    """N(mean, std_dev^2)."""

    mean: float = Field(default=0.0, description="Location")
    std_dev: float = Field(default=1.0, gt=0, description="Scale (> 0)")

    def pdf(self, x: float) -> float:
        z = (check_point(x) - self.mean) / self.std_dev
        return standard_normal_pdf(z) / self.std_dev

    def cdf(self, x: float) -> float:
        return standard_normal_cdf((check_point(x) - self.mean) / self.std_dev)

    def inverse_cdf(self, p: float) -> float:
        return self.mean + self.std_dev * standard_normal_inverse(p)


class LogNormal(ContinuousDistribution):
    """ln(X) ~ N(mean, std_dev^2)."""

    mean: float = Field(default=0.0, description="Mean of ln(X)")
    std_dev: float = Field(default=1.0, gt=0, description="Standard deviation of ln(X) (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        if x <= 0.0 or math.isinf(x):
            return 0.0
        z = (math.log(x) - self.mean) / self.std_dev
        return math.exp(-0.5 * z * z - LOG_SQRT_TWO_PI - math.log(x * self.std_dev))

    def cdf(self, x: float) -> float:
        x = check_point(x)
        if x <= 0.0:
            return 0.0
        if math.isinf(x):
            return 1.0
        return standard_normal_cdf((math.log(x) - self.mean) / self.std_dev)

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        seed = math.exp(self.mean + self.std_dev * standard_normal_inverse(p))
        return self._refine_quantile(p, seed)


# =============================================================================
# SAMPLING DISTRIBUTIONS
# =============================================================================


class StudentT(ContinuousDistribution):
    """Student's t with `degrees_freedom` degrees of freedom."""

    degrees_freedom: float = Field(..., gt=0, description="Degrees of freedom (> 0)")

    def pdf(self, x: float) -> float:
        t = check_point(x)
        if math.isinf(t):
            return 0.0
        df = self.degrees_freedom
        log_density = (
            log_gamma((df + 1.0) / 2.0)
            - log_gamma(df / 2.0)
            - 0.5 * math.log(df * math.pi)
            - (df + 1.0) / 2.0 * math.log1p(t * t / df)
        )
        return math.exp(log_density)

    def cdf(self, x: float) -> float:
        t = check_point(x)
        if math.isinf(t):
            return 0.0 if t < 0 else 1.0
        df = self.degrees_freedom
        tail = 0.5 * incomplete_beta(df / (df + t * t), df / 2.0, 0.5)
        return tail if t < 0 else 1.0 - tail

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        if p == 0.5:
            return 0.0
        return self._refine_quantile(p, _student_t_seed(p, self.degrees_freedom))


class ChiSquared(ContinuousDistribution):
    """Chi-squared with `degrees_freedom` degrees of freedom."""

    degrees_freedom: float = Field(..., gt=0, description="Degrees of freedom (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        k = self.degrees_freedom
        if x < 0.0 or math.isinf(x):
            return 0.0
        if x == 0.0:
            if k < 2.0:
                return math.inf
            return 0.5 if k == 2.0 else 0.0
        half = k / 2.0
        return math.exp((half - 1.0) * math.log(x) - x / 2.0 - half * math.log(2.0) - log_gamma(half))

    def cdf(self, x: float) -> float:
        return gamma_cdf(check_point(x) / 2.0, self.degrees_freedom / 2.0)

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        seed = _gamma_quantile_seed(p, self.degrees_freedom / 2.0, 2.0)
        return self._refine_quantile(p, seed)


class FDistribution(ContinuousDistribution):
    """Fisher-Snedecor F(numerator_df, denominator_df)."""

    numerator_df: float = Field(..., gt=0, description="Numerator degrees of freedom (> 0)")
    denominator_df: float = Field(..., gt=0, description="Denominator degrees of freedom (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        d1, d2 = self.numerator_df, self.denominator_df
        if x < 0.0 or math.isinf(x):
            return 0.0
        if x == 0.0:
            if d1 < 2.0:
                return math.inf
            return 1.0 if d1 == 2.0 else 0.0
        log_density = (
            0.5 * (d1 * math.log(d1) + d2 * math.log(d2))
            + (d1 / 2.0 - 1.0) * math.log(x)
            - (d1 + d2) / 2.0 * math.log(d2 + d1 * x)
            - log_beta(d1 / 2.0, d2 / 2.0)
        )
        return math.exp(log_density)

    def cdf(self, x: float) -> float:
        x = check_point(x)
        if x <= 0.0:
            return 0.0
        if math.isinf(x):
            return 1.0
        d1, d2 = self.numerator_df, self.denominator_df
        return 1.0 - incomplete_beta(d2 / (d2 + d1 * x), d2 / 2.0, d1 / 2.0)

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        d1, d2 = self.numerator_df, self.denominator_df
        # d1 X / (d1 X + d2) ~ Beta(d1/2, d2/2)
        u = clamp(_beta_quantile_seed(p, d1 / 2.0, d2 / 2.0), 1e-12, 1.0 - 1e-12)
        seed = d2 * u / (d1 * (1.0 - u))
        return self._refine_quantile(p, seed)


# =============================================================================
# GAMMA / BETA
# =============================================================================


class GammaDistribution(ContinuousDistribution):
    """Gamma with shape `alpha` and scale `beta`."""

    alpha: float = Field(..., gt=0, description="Shape (> 0)")
    beta: float = Field(..., gt=0, description="Scale (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        if x < 0.0 or math.isinf(x):
            return 0.0
        if x == 0.0:
            if self.alpha < 1.0:
                return math.inf
            return 1.0 / self.beta if self.alpha == 1.0 else 0.0
        log_density = (
            (self.alpha - 1.0) * math.log(x)
            - x / self.beta
            - self.alpha * math.log(self.beta)
            - log_gamma(self.alpha)
        )
        return math.exp(log_density)

    def cdf(self, x: float) -> float:
        return gamma_cdf(check_point(x) / self.beta, self.alpha)

    def inverse_cdf(self, p: float) -> float:
        """Quantile for p in [0, 1); p = 0 maps to 0."""
        if p == 0.0:
            return 0.0
        p = require_probability(p)
        return self._refine_quantile(p, _gamma_quantile_seed(p, self.alpha, self.beta))


class BetaDistribution(ContinuousDistribution):
    """Beta(alpha, beta) rescaled to [lower, upper]."""

    alpha: float = Field(..., gt=0, description="First shape (> 0)")
    beta: float = Field(..., gt=0, description="Second shape (> 0)")
    lower: float = Field(default=0.0, description="Lower bound of the support")
    upper: float = Field(default=1.0, description="Upper bound of the support")

    @model_validator(mode="after")
    def validate_bounds(self) -> "BetaDistribution":
        if self.lower >= self.upper:
            raise ValueError(f"lower ({self.lower}) must be < upper ({self.upper})")
        return self

    @property
    def support(self) -> tuple[float, float]:
        return (self.lower, self.upper)

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def pdf(self, x: float) -> float:
        x = check_point(x)
        if x < self.lower or x > self.upper:
            return 0.0
        a, b = self.alpha, self.beta
        y = (x - self.lower) / self.width
        if y == 0.0:
            if a < 1.0:
                return math.inf
            return b / self.width if a == 1.0 else 0.0
        if y == 1.0:
            if b < 1.0:
                return math.inf
            return a / self.width if b == 1.0 else 0.0
        log_density = (
            (a - 1.0) * math.log(y) + (b - 1.0) * math.log1p(-y) - log_beta(a, b) - math.log(self.width)
        )
        return math.exp(log_density)

    def cdf(self, x: float) -> float:
        x = check_point(x)
        if x <= self.lower:
            return 0.0
        if x >= self.upper:
            return 1.0
        return incomplete_beta((x - self.lower) / self.width, self.alpha, self.beta)

    def inverse_cdf(self, p: float) -> float:
        """Quantile for p in [0, 1]; the endpoints map to lower / upper."""
        if p == 0.0:
            return self.lower
        if p == 1.0:
            return self.upper
        p = require_probability(p)
        seed = clamp(_beta_quantile_seed(p, self.alpha, self.beta), 0.0, 1.0)
        return self._refine_quantile(p, self.lower + self.width * seed)


# =============================================================================
# EXPONENTIAL / WEIBULL
# =============================================================================


class Exponential(ContinuousDistribution):
    """Exponential with rate `rate` (lambda)."""

    rate: float = Field(..., gt=0, description="Rate lambda (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        if x < 0.0:
            return 0.0
        return self.rate * math.exp(-self.rate * x)

    def cdf(self, x: float) -> float:
        x = check_point(x)
        if x <= 0.0:
            return 0.0
        return -math.expm1(-self.rate * x)

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        return -math.log1p(-p) / self.rate


class Weibull(ContinuousDistribution):
    """Weibull with shape `alpha` and scale `beta`."""

    alpha: float = Field(..., gt=0, description="Shape (> 0)")
    beta: float = Field(..., gt=0, description="Scale (> 0)")

    @property
    def support(self) -> tuple[float, float]:
        return (0.0, math.inf)

    def pdf(self, x: float) -> float:
        x = check_point(x)
        if x < 0.0 or math.isinf(x):
            return 0.0
        if x == 0.0:
            if self.alpha < 1.0:
                return math.inf
            return self.alpha / self.beta if self.alpha == 1.0 else 0.0
        log_ratio = math.log(x / self.beta)
        if self.alpha * log_ratio > _MAX_EXP_ARGUMENT:
            return 0.0
        log_density = (
            math.log(self.alpha)
            - math.log(self.beta)
            + (self.alpha - 1.0) * log_ratio
            - math.exp(self.alpha * log_ratio)
        )
        return math.exp(log_density)

    def cdf(self, x: float) -> float:
        x = check_point(x)
        if x <= 0.0:
            return 0.0
        exponent = self.alpha * math.log(x / self.beta)
        if exponent > _MAX_EXP_ARGUMENT:
            return 1.0
        return -math.expm1(-math.exp(exponent))

    def inverse_cdf(self, p: float) -> float:
        p = require_probability(p)
        return self.beta * (-math.log1p(-p)) ** (1.0 / self.alpha)
