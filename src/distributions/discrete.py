"""
Discrete Distributions — PMF / CDF

Binomial, Poisson, hypergeometric and negative binomial. Probability masses
are computed in log space (log-gamma binomial coefficients), so large counts
neither overflow nor underflow prematurely. Non-integer arguments are
truncated toward -inf.

CRITICAL INVARIANTS:
1. pmf(k) = 0 outside the support
2. cdf is a non-decreasing step function in [0, 1]
3. Binomial.inverse_cdf(alpha) is the smallest k with cdf(k) >= alpha
"""

import math

from pydantic import Field, model_validator

from src.core.math.numerical_safeguards import clamp, validate_probability
from src.core.math.special_functions import gamma_cdf, incomplete_beta, log_gamma
from src.distributions.base import DiscreteDistribution, check_point


def log_binomial_coefficient(n: float, k: float) -> float:
    """ln C(n, k) for 0 <= k <= n."""
    return log_gamma(n + 1.0) - log_gamma(k + 1.0) - log_gamma(n - k + 1.0)


def _floor_point(k: float) -> float:
    k = check_point(k, "k")
    return k if math.isinf(k) else math.floor(k)


class Binomial(DiscreteDistribution):
    """Number of successes in `trials` independent Bernoulli(`probability`) trials."""

    trials: int = Field(..., ge=0, description="Number of trials")
    probability: float = Field(..., ge=0, le=1, description="Success probability per trial")

    def log_pmf(self, k: int) -> float:
        n, p = self.trials, self.probability
        if k < 0 or k > n:
            return -math.inf
        if p == 0.0:
            return 0.0 if k == 0 else -math.inf
        if p == 1.0:
            return 0.0 if k == n else -math.inf
        return log_binomial_coefficient(n, k) + k * math.log(p) + (n - k) * math.log1p(-p)

    def cdf(self, k: float) -> float:
        k = _floor_point(k)
        if k < 0:
            return 0.0
        if k >= self.trials:
            return 1.0
        total = math.fsum(self.pmf(i) for i in range(int(k) + 1))
        return clamp(total, 0.0, 1.0)

    def inverse_cdf(self, alpha: float) -> int:
        """
        Smallest k such that cdf(k) >= alpha.

        Raises:
            DomainViolation: If alpha is not in (0, 1)
        """
        validate_probability(alpha, "alpha")
        cumulative = 0.0
        for k in range(self.trials + 1):
            cumulative += self.pmf(k)
            if cumulative >= alpha:
                return k
        return self.trials


class Poisson(DiscreteDistribution):
    """Poisson with mean `mean` (lambda)."""

    mean: float = Field(..., gt=0, description="Expected count lambda (> 0)")

    def log_pmf(self, k: int) -> float:
        if k < 0:
            return -math.inf
        return k * math.log(self.mean) - self.mean - log_gamma(k + 1.0)

    def cdf(self, k: float) -> float:
        k = _floor_point(k)
        if k < 0:
            return 0.0
        if math.isinf(k):
            return 1.0
        # P(X <= k) = Q(k + 1, lambda)
        return 1.0 - gamma_cdf(self.mean, k + 1.0)


class Hypergeometric(DiscreteDistribution):
    """Successes in `draws` draws without replacement from a finite population."""

    population: int = Field(..., ge=1, description="Population size N")
    successes: int = Field(..., ge=0, description="Successes in the population K")
    draws: int = Field(..., ge=1, description="Sample size n")

    @model_validator(mode="after")
    def validate_sizes(self) -> "Hypergeometric":
        if self.successes > self.population:
            raise ValueError(f"successes ({self.successes}) must be <= population ({self.population})")
        if self.draws > self.population:
            raise ValueError(f"draws ({self.draws}) must be <= population ({self.population})")
        return self

    @property
    def support(self) -> tuple[int, int]:
        failures = self.population - self.successes
        return (max(0, self.draws - failures), min(self.draws, self.successes))

    def log_pmf(self, k: int) -> float:
        low, high = self.support
        if k < low or k > high:
            return -math.inf
        return (
            log_binomial_coefficient(self.successes, k)
            + log_binomial_coefficient(self.population - self.successes, self.draws - k)
            - log_binomial_coefficient(self.population, self.draws)
        )

    def cdf(self, k: float) -> float:
        k = _floor_point(k)
        low, high = self.support
        if k < low:
            return 0.0
        if k >= high:
            return 1.0
        total = math.fsum(self.pmf(i) for i in range(low, int(k) + 1))
        return clamp(total, 0.0, 1.0)


class NegativeBinomial(DiscreteDistribution):
    """Failures before the `successes`-th success with success `probability`."""

    successes: float = Field(..., gt=0, description="Required successes r (> 0)")
    probability: float = Field(..., gt=0, le=1, description="Success probability per trial")

    def log_pmf(self, k: int) -> float:
        if k < 0:
            return -math.inf
        r, p = self.successes, self.probability
        if p == 1.0:
            return 0.0 if k == 0 else -math.inf
        return log_binomial_coefficient(k + r - 1.0, k) + r * math.log(p) + k * math.log1p(-p)

    def cdf(self, k: float) -> float:
        k = _floor_point(k)
        if k < 0:
            return 0.0
        if math.isinf(k):
            return 1.0
        # P(X <= k) = I_p(r, k + 1)
        return incomplete_beta(self.probability, self.successes, k + 1.0)
