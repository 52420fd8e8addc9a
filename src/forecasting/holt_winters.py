"""
Holt-Winters — Triple Exponential Smoothing (ETS AAM)

Additive trend with optional multiplicative seasonality:
    fitted[t] = (L + B) * S[t]
    L' = alpha * y[t] / S[t] + (1 - alpha) * (L + B)
    B' = beta * (L' - L) + (1 - beta) * B
    S[t + m] = gamma * y[t] / L' + (1 - gamma) * S[t]

Pipeline of fit_holt_winters:
1. Seasonal period: caller-supplied or detected by autocorrelation
2. Initial state from the first two seasons (or the first two points)
3. Smoothing coefficients: caller-supplied or grid search minimising RMSE
4. One smoothing pass producing fitted values and residuals
5. MAE / RMSE / MASE / SMAPE

CRITICAL INVARIANTS:
1. Fewer than 2 observations is a DomainViolation
2. Seasonality requires period >= 2, n >= 2 * period and all values > 0
3. A strictly linear series is fitted exactly (zero residuals, constant trend)
4. EtsFit is immutable; projection only reads it
5. Timeline forecasts sort by timeline, reject duplicate points and need a
   target strictly after the last point
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from itertools import product
from typing import Final, NamedTuple

import numpy as np
from pydantic import BaseModel, Field

from src.core.domain.outcomes import DomainViolation
from src.core.math.numerical_safeguards import validate_finite, validate_in_range, validate_probability
from src.distributions.continuous import standard_normal_inverse
from src.forecasting.metrics import ErrorMetrics, compute_error_metrics
from src.forecasting.seasonality import detect_seasonality

logger = logging.getLogger(__name__)

# =============================================================================
# PARAMETERS
# =============================================================================

ALPHA_GRID: Final[tuple[float, ...]] = (0.1, 0.3, 0.5)
BETA_GRID: Final[tuple[float, ...]] = (0.05, 0.1, 0.2)
GAMMA_GRID: Final[tuple[float, ...]] = (0.05, 0.1, 0.2)

MIN_OBSERVATIONS: Final[int] = 2

# Prediction interval widens by sqrt(1 + 0.1 * h)
INTERVAL_GROWTH_PER_STEP: Final[float] = 0.1


class EtsStatistic(IntEnum):
    """Selector codes of FORECAST.ETS.STAT."""

    ALPHA = 1
    BETA = 2
    GAMMA = 3
    MASE = 4
    SMAPE = 5
    MAE = 6
    RMSE = 7
    STEP_SIZE = 8


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class EtsConfig:
    """
    Fitting options.

    seasonal_period: None detects it, 0 or 1 disables seasonality, >= 2 forces it.
    alpha / beta / gamma: fixed coefficients in [0, 1]; None searches the grid.
    """

    seasonal_period: int | None = None
    alpha: float | None = None
    beta: float | None = None
    gamma: float | None = None
    alpha_grid: tuple[float, ...] = ALPHA_GRID
    beta_grid: tuple[float, ...] = BETA_GRID
    gamma_grid: tuple[float, ...] = GAMMA_GRID

    def __post_init__(self) -> None:
        if self.seasonal_period is not None and self.seasonal_period < 0:
            raise DomainViolation(f"seasonal_period must be >= 0, got {self.seasonal_period}")
        for name in ("alpha", "beta", "gamma"):
            value = getattr(self, name)
            if value is not None:
                validate_in_range(value, name, 0.0, 1.0)
        for name in ("alpha_grid", "beta_grid", "gamma_grid"):
            grid = getattr(self, name)
            if not grid:
                raise DomainViolation(f"{name} must not be empty")
            for value in grid:
                validate_in_range(value, name, 0.0, 1.0)

    def candidates(self, name: str) -> tuple[float, ...]:
        fixed = getattr(self, name)
        return (fixed,) if fixed is not None else getattr(self, f"{name}_grid")


DEFAULT_ETS_CONFIG: Final[EtsConfig] = EtsConfig()


# =============================================================================
# FIT RESULT
# =============================================================================


class EtsFit(BaseModel):
    """
    Fitted ETS model.

    level / trend / fitted / residuals have one entry per observation.
    seasonal holds n + m multiplicative indices (empty without seasonality):
    entry t is the index used at time t, entries n..n+m-1 drive projection.
    """

    alpha: float = Field(..., ge=0.0, le=1.0)
    beta: float = Field(..., ge=0.0, le=1.0)
    gamma: float = Field(..., ge=0.0, le=1.0)
    seasonal_period: int = Field(..., ge=0)
    level: tuple[float, ...]
    trend: tuple[float, ...]
    seasonal: tuple[float, ...]
    fitted: tuple[float, ...]
    residuals: tuple[float, ...]
    metrics: ErrorMetrics

    model_config = {"frozen": True}

    @property
    def has_seasonality(self) -> bool:
        return self.seasonal_period >= 2

    @property
    def final_level(self) -> float:
        return self.level[-1]

    @property
    def final_trend(self) -> float:
        return self.trend[-1]


class _SmoothingPass(NamedTuple):
    level: np.ndarray
    trend: np.ndarray
    seasonal: np.ndarray
    fitted: np.ndarray


# =============================================================================
# INITIAL STATE
# =============================================================================


def _initial_state(y: np.ndarray, period: int) -> tuple[float, float, np.ndarray]:
    """Initial level, trend and seasonal indices."""
    if period < 2:
        trend = float(y[1] - y[0])
        return float(y[0]) - trend, trend, np.empty(0)

    first_season = y[:period]
    second_season = y[period : 2 * period]
    level = float(first_season.mean())
    trend = float(second_season.sum() - first_season.sum()) / (period * period)

    cycles = len(y) // period
    seasons = y[: cycles * period].reshape(cycles, period)
    indices = (seasons / seasons.mean(axis=1, keepdims=True)).mean(axis=0)
    indices *= period / indices.sum()
    return level, trend, indices


def _smooth(y: np.ndarray, period: int, alpha: float, beta: float, gamma: float) -> _SmoothingPass:
    """One smoothing pass over the observations."""
    n = len(y)
    level, trend, initial_indices = _initial_state(y, period)

    seasonal = np.ones(n + period) if period >= 2 else np.ones(n)
    if period >= 2:
        seasonal[:period] = initial_indices

    levels = np.empty(n)
    trends = np.empty(n)
    fitted = np.empty(n)

    for t in range(n):
        index = seasonal[t]
        fitted[t] = (level + trend) * index

        new_level = alpha * y[t] / index + (1.0 - alpha) * (level + trend)
        trend = beta * (new_level - level) + (1.0 - beta) * trend
        if period >= 2:
            seasonal[t + period] = gamma * y[t] / new_level + (1.0 - gamma) * index
        level = new_level

        levels[t] = level
        trends[t] = trend

    return _SmoothingPass(
        level=levels,
        trend=trends,
        seasonal=seasonal if period >= 2 else np.empty(0),
        fitted=fitted,
    )


def _resolve_period(y: np.ndarray, config: EtsConfig) -> int:
    period = config.seasonal_period
    if period is None:
        period = detect_seasonality(y)
    if period < 2:
        return 0
    if len(y) < 2 * period:
        logger.debug("seasonality %d dropped: %d observations cover fewer than two seasons", period, len(y))
        return 0
    if np.any(y <= 0.0):
        logger.debug("seasonality %d dropped: multiplicative indices need positive values", period)
        return 0
    return period


# =============================================================================
# FITTING
# =============================================================================


def _rmse(y: np.ndarray, fitted: np.ndarray) -> float:
    return float(np.sqrt(np.mean((y - fitted) ** 2)))


def fit_holt_winters(values: Sequence[float] | np.ndarray, config: EtsConfig = DEFAULT_ETS_CONFIG) -> EtsFit:
    """
    Fit additive-trend Holt-Winters smoothing to an ordered series.

    Coefficients left as None in `config` are chosen from the grids by
    minimum in-sample RMSE; ties keep the first combination.

    Args:
        values: Observations at equally spaced times
        config: Period and coefficient options

    Returns:
        EtsFit with states, fitted values, residuals and metrics

    Raises:
        DomainViolation: Fewer than 2 observations or non-finite values

    Examples:
        >>> fit = fit_holt_winters([1, 2, 3, 4, 5, 6])
        >>> round(fit.final_trend, 12)
        1.0
    """
    y = np.asarray(values, dtype=float)
    if y.ndim != 1 or len(y) < MIN_OBSERVATIONS:
        raise DomainViolation(f"at least {MIN_OBSERVATIONS} observations required, got {y.size}")
    if not np.all(np.isfinite(y)):
        raise DomainViolation("observations must be finite")

    period = _resolve_period(y, config)
    gamma_candidates = config.candidates("gamma") if period >= 2 else (config.gamma or 0.0,)

    combinations = product(config.candidates("alpha"), config.candidates("beta"), gamma_candidates)
    # Grids are non-empty (EtsConfig), so the first combination seeds the search
    alpha, beta, gamma = next(combinations)
    smoothing = _smooth(y, period, alpha, beta, gamma)
    best_rmse = _rmse(y, smoothing.fitted)
    for candidate in combinations:
        trial = _smooth(y, period, *candidate)
        error = _rmse(y, trial.fitted)
        if error < best_rmse:
            (alpha, beta, gamma), smoothing, best_rmse = candidate, trial, error

    logger.debug(
        "ETS fit: period=%d alpha=%.2f beta=%.2f gamma=%.2f rmse=%.6g",
        period,
        alpha,
        beta,
        gamma,
        best_rmse,
    )

    residuals = y - smoothing.fitted
    return EtsFit(
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        seasonal_period=period,
        level=tuple(smoothing.level.tolist()),
        trend=tuple(smoothing.trend.tolist()),
        seasonal=tuple(smoothing.seasonal.tolist()),
        fitted=tuple(smoothing.fitted.tolist()),
        residuals=tuple(residuals.tolist()),
        metrics=compute_error_metrics(y, smoothing.fitted),
    )


# =============================================================================
# PROJECTION
# =============================================================================


def _validate_steps(steps: int) -> None:
    if int(steps) != steps or steps < 1:
        raise DomainViolation(f"steps must be a positive integer, got {steps}")


def project(fit: EtsFit, steps: int) -> tuple[float, ...]:
    """
    Extrapolate a fitted model h = 1..steps periods past the last observation.

    forecast[h] = (L + h * B) * S[n + (h - 1) mod m]
    """
    _validate_steps(steps)
    n = len(fit.fitted)
    forecasts = []
    for h in range(1, int(steps) + 1):
        value = fit.final_level + h * fit.final_trend
        if fit.has_seasonality:
            value *= fit.seasonal[n + (h - 1) % fit.seasonal_period]
        forecasts.append(value)
    return tuple(forecasts)


def forecast_ets(
    values: Sequence[float] | np.ndarray,
    steps: int,
    config: EtsConfig = DEFAULT_ETS_CONFIG,
) -> float:
    """Point forecast `steps` periods ahead (FORECAST.ETS)."""
    _validate_steps(steps)
    return project(fit_holt_winters(values, config), steps)[-1]


def confidence_interval(fit: EtsFit, steps: int, confidence_level: float = 0.95) -> float:
    """
    Half-width of the prediction interval `steps` periods ahead (FORECAST.ETS.CONFINT).

    z(level) * RMSE * sqrt(1 + 0.1 * steps)
    """
    _validate_steps(steps)
    validate_probability(confidence_level, "confidence_level")
    z = standard_normal_inverse(0.5 + confidence_level / 2.0)
    return z * fit.metrics.rmse * math.sqrt(1.0 + INTERVAL_GROWTH_PER_STEP * steps)


# =============================================================================
# TIMELINE FORECASTS
# =============================================================================


class AlignedSeries(NamedTuple):
    """Observations ordered by their timeline, and the horizon to a target point."""

    values: np.ndarray
    steps: int


def align_to_timeline(
    target: float,
    values: Sequence[float] | np.ndarray,
    timeline: Sequence[float] | np.ndarray,
) -> AlignedSeries:
    """
    Sort observations by timeline and convert a target point into a horizon.

    steps = ceil((target - last point) / average timeline step), at least 1.

    Raises:
        DomainViolation: Mismatched lengths, fewer than 2 points, non-finite
            timeline, duplicate points, or a target not after the last point

    Examples:
        >>> aligned = align_to_timeline(75, [3.0, 1.0, 2.0], [30, 10, 20])
        >>> aligned.values.tolist(), aligned.steps
        ([1.0, 2.0, 3.0], 5)
    """
    validate_finite(target, "target")
    y = np.asarray(values, dtype=float)
    points = np.asarray(timeline, dtype=float)
    if y.shape != points.shape or y.ndim != 1:
        raise DomainViolation("values and timeline must be one-dimensional and of equal length")
    if len(points) < MIN_OBSERVATIONS:
        raise DomainViolation(f"at least {MIN_OBSERVATIONS} observations required, got {points.size}")
    if not np.all(np.isfinite(points)):
        raise DomainViolation("timeline must be finite")

    order = np.argsort(points, kind="stable")
    points, y = points[order], y[order]
    if np.any(np.diff(points) <= 0.0):
        raise DomainViolation("timeline must not contain duplicate points")

    last = float(points[-1])
    if target <= last:
        raise DomainViolation(f"target {target} must lie after the last timeline point {last}")

    average_step = (last - float(points[0])) / (len(points) - 1)
    steps = max(1, math.ceil((target - last) / average_step))
    return AlignedSeries(values=y, steps=steps)


def forecast_ets_at(
    target: float,
    values: Sequence[float] | np.ndarray,
    timeline: Sequence[float] | np.ndarray,
    config: EtsConfig = DEFAULT_ETS_CONFIG,
) -> float:
    """Point forecast at a timeline position after the data (FORECAST.ETS with a timeline)."""
    aligned = align_to_timeline(target, values, timeline)
    return project(fit_holt_winters(aligned.values, config), aligned.steps)[-1]


def confidence_interval_at(
    target: float,
    values: Sequence[float] | np.ndarray,
    timeline: Sequence[float] | np.ndarray,
    confidence_level: float = 0.95,
    config: EtsConfig = DEFAULT_ETS_CONFIG,
) -> float:
    """Prediction interval half-width at a timeline position (FORECAST.ETS.CONFINT with a timeline)."""
    aligned = align_to_timeline(target, values, timeline)
    return confidence_interval(fit_holt_winters(aligned.values, config), aligned.steps, confidence_level)


def ets_statistic(fit: EtsFit, statistic: int) -> float:
    """Fit statistic by selector code 1..8 (FORECAST.ETS.STAT)."""
    try:
        selector = EtsStatistic(int(statistic))
    except ValueError:
        raise DomainViolation(f"statistic must be 1..8, got {statistic}") from None

    if selector is EtsStatistic.ALPHA:
        return fit.alpha
    if selector is EtsStatistic.BETA:
        return fit.beta
    if selector is EtsStatistic.GAMMA:
        return fit.gamma
    if selector is EtsStatistic.MASE:
        return fit.metrics.mase
    if selector is EtsStatistic.SMAPE:
        return fit.metrics.smape
    if selector is EtsStatistic.MAE:
        return fit.metrics.mae
    if selector is EtsStatistic.RMSE:
        return fit.metrics.rmse
    return 1.0


# =============================================================================
# LINEAR FORECAST
# =============================================================================


def linear_forecast(
    x: float,
    known_y: Sequence[float] | np.ndarray,
    known_x: Sequence[float] | np.ndarray,
) -> float:
    """
    Value at `x` of the least-squares line through (known_x, known_y) (FORECAST.LINEAR).

    Raises:
        DomainViolation: Mismatched or empty inputs, or constant known_x

    Examples:
        >>> round(linear_forecast(30, [6, 7, 9, 15, 21], [20, 28, 31, 38, 40]), 6)
        10.607253
    """
    ys = np.asarray(known_y, dtype=float)
    xs = np.asarray(known_x, dtype=float)
    if ys.shape != xs.shape or ys.ndim != 1 or len(ys) == 0:
        raise DomainViolation("known_y and known_x must be non-empty and of equal length")

    dx = xs - xs.mean()
    variance = float(np.dot(dx, dx))
    if variance == 0.0:
        raise DomainViolation("known_x must not be constant")

    slope = float(np.dot(dx, ys - ys.mean())) / variance
    intercept = float(ys.mean()) - slope * float(xs.mean())
    return intercept + slope * x
