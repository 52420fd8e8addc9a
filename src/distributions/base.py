"""
Distribution base classes.

Every distribution is an immutable pydantic model: its parameters are
validated once at construction (pydantic.ValidationError on violation), so
no density, cumulative or inverse is ever evaluated on invalid parameters.
Continuous inverses share one Newton-Raphson refinement seeded by each
distribution's own heuristic.
"""

import math
from abc import abstractmethod

from pydantic import BaseModel

from src.core.domain.outcomes import DomainViolation, error_for
from src.core.math.numerical_safeguards import validate_probability
from src.core.math.root_finding import INVERSE_CDF_SETTINGS, NewtonSettings, newton_raphson

DISTRIBUTION_MODEL_CONFIG = {"frozen": True, "allow_inf_nan": False, "extra": "forbid"}


def check_point(x: float, name: str = "x") -> float:
    """Reject NaN evaluation points; infinities are valid CDF arguments."""
    if math.isnan(x):
        raise DomainViolation(f"{name} must not be NaN")
    return float(x)


class ContinuousDistribution(BaseModel):
    """Continuous distribution with pdf, cdf and inverse_cdf."""

    model_config = DISTRIBUTION_MODEL_CONFIG

    @property
    def support(self) -> tuple[float, float]:
        """Closed hull of the support."""
        return (-math.inf, math.inf)

    @abstractmethod
    def pdf(self, x: float) -> float:
        """Probability density at x (0 outside the support)."""

    @abstractmethod
    def cdf(self, x: float) -> float:
        """P(X <= x)."""

    def sf(self, x: float) -> float:
        """Survival function P(X > x)."""
        return 1.0 - self.cdf(x)

    @abstractmethod
    def inverse_cdf(self, p: float) -> float:
        """Quantile function; p must lie in (0, 1)."""

    def _refine_quantile(
        self,
        p: float,
        seed: float,
        settings: NewtonSettings = INVERSE_CDF_SETTINGS,
    ) -> float:
        """
        Solve cdf(x) = p by Newton-Raphson from `seed`.

        The iterate is clamped strictly inside the support so densities with
        a pole at a finite endpoint stay finite.

        Raises:
            NonConvergence / SingularDerivative / InvalidFloat: On solver failure
        """
        lower, upper = self.support
        bounded = settings.with_bounds(
            None if math.isinf(lower) else math.nextafter(lower, math.inf),
            None if math.isinf(upper) else math.nextafter(upper, -math.inf),
        )
        result = newton_raphson(lambda x: self.cdf(x) - p, seed, self.pdf, bounded)
        if result.failure is not None:
            raise error_for(
                result.failure,
                f"{type(self).__name__} inverse cdf failed for p={p}: {result.details.get('reason', '')}",
            )
        return result.root


class DiscreteDistribution(BaseModel):
    """Integer-valued distribution with pmf and cdf."""

    model_config = DISTRIBUTION_MODEL_CONFIG

    @abstractmethod
    def log_pmf(self, k: int) -> float:
        """ln P(X = k) for k inside the support (-inf outside)."""

    def pmf(self, k: float) -> float:
        """P(X = floor(k))."""
        k = check_point(k, "k")
        if math.isinf(k):
            return 0.0
        log_probability = self.log_pmf(math.floor(k))
        if log_probability == -math.inf:
            return 0.0
        return math.exp(log_probability)

    @abstractmethod
    def cdf(self, k: float) -> float:
        """P(X <= floor(k))."""


def require_probability(p: float) -> float:
    """Inverse-cdf argument check, p in (0, 1)."""
    validate_probability(p, "p")
    return float(p)
