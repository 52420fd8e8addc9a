"""
Probability distributions.

Immutable parameter models with pdf/pmf, cdf and inverse cdf, plus
spreadsheet-named entry points returning Outcome values (see functions).
"""

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
    standard_normal_cdf,
    standard_normal_inverse,
    standard_normal_pdf,
)
from src.distributions.discrete import Binomial, Hypergeometric, NegativeBinomial, Poisson

__all__ = [
    # Base classes
    "ContinuousDistribution",
    "DiscreteDistribution",
    # Continuous
    "BetaDistribution",
    "ChiSquared",
    "Exponential",
    "FDistribution",
    "GammaDistribution",
    "LogNormal",
    "Normal",
    "StandardNormal",
    "StudentT",
    "Weibull",
    # Standard normal kernel
    "standard_normal_cdf",
    "standard_normal_inverse",
    "standard_normal_pdf",
    # Discrete
    "Binomial",
    "Hypergeometric",
    "NegativeBinomial",
    "Poisson",
]
