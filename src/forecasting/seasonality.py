"""Seasonal period detection.

The period is the lag (2..min(n/2, 24)) with the highest autocorrelation
above 0.5, computed on the series after removing its least-squares linear
trend. Without detrending, any trending series is strongly autocorrelated
at every lag and would be reported as seasonal.
"""

import logging
from collections.abc import Sequence
from typing import Final

import numpy as np

logger = logging.getLogger(__name__)

# Longest period considered
MAX_SEASONAL_PERIOD: Final[int] = 24

# Autocorrelation a lag must exceed to count as seasonal
SEASONALITY_THRESHOLD: Final[float] = 0.5

# Fewer points than this never show seasonality
MIN_POINTS: Final[int] = 4

# Residual energy (relative to the raw series) treated as pure trend
_NEGLIGIBLE_RESIDUAL_RATIO: Final[float] = 1e-12


def autocorrelation(values: Sequence[float] | np.ndarray, lag: int) -> float:
    """Sample autocorrelation at `lag` (0 for a constant series)."""
    x = np.asarray(values, dtype=float)
    if lag <= 0 or lag >= len(x):
        return 0.0
    centered = x - x.mean()
    denominator = float(np.dot(centered, centered))
    if denominator == 0.0:
        return 0.0
    return float(np.dot(centered[lag:], centered[:-lag]) / denominator)


def detrend(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Residuals of the least-squares line through (t, values[t])."""
    y = np.asarray(values, dtype=float)
    t = np.arange(len(y), dtype=float)
    slope, intercept = np.polyfit(t, y, 1)
    return y - (intercept + slope * t)


def detect_seasonality(values: Sequence[float] | np.ndarray, max_period: int = MAX_SEASONAL_PERIOD) -> int:
    """
    Detect the dominant seasonal period of a series.

    Args:
        values: Ordered observations
        max_period: Longest period considered

    Returns:
        Period >= 2, or 0 when no lag correlates above the threshold

    Examples:
        >>> detect_seasonality([1, 2, 3, 4, 5, 6])
        0
        >>> detect_seasonality([10, 20, 30, 10, 20, 30, 10, 20, 30, 10, 20, 30])
        3
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    if n < MIN_POINTS:
        return 0

    residuals = detrend(y)
    centered = y - y.mean()
    if np.dot(residuals, residuals) <= _NEGLIGIBLE_RESIDUAL_RATIO * np.dot(centered, centered):
        return 0

    best_period = 0
    best_correlation = SEASONALITY_THRESHOLD
    for lag in range(2, min(n // 2, max_period) + 1):
        correlation = autocorrelation(residuals, lag)
        if correlation > best_correlation:
            best_period, best_correlation = lag, correlation

    logger.debug("detected seasonal period %d (autocorrelation %.3f)", best_period, best_correlation)
    return best_period
