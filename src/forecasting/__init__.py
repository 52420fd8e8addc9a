"""
Time-series forecasting.

Holt-Winters exponential smoothing with grid-searched coefficients,
seasonal period detection, accuracy metrics and linear extrapolation.
"""

from src.forecasting.holt_winters import (
    ALPHA_GRID,
    BETA_GRID,
    DEFAULT_ETS_CONFIG,
    GAMMA_GRID,
    AlignedSeries,
    EtsConfig,
    EtsFit,
    EtsStatistic,
    align_to_timeline,
    confidence_interval,
    confidence_interval_at,
    ets_statistic,
    fit_holt_winters,
    forecast_ets,
    forecast_ets_at,
    linear_forecast,
    project,
)
from src.forecasting.metrics import ErrorMetrics, compute_error_metrics, mae, mase, rmse, smape
from src.forecasting.seasonality import autocorrelation, detect_seasonality, detrend

__all__ = [
    # Holt-Winters
    "ALPHA_GRID",
    "BETA_GRID",
    "DEFAULT_ETS_CONFIG",
    "GAMMA_GRID",
    "AlignedSeries",
    "EtsConfig",
    "EtsFit",
    "EtsStatistic",
    "align_to_timeline",
    "confidence_interval",
    "confidence_interval_at",
    "ets_statistic",
    "fit_holt_winters",
    "forecast_ets",
    "forecast_ets_at",
    "linear_forecast",
    "project",
    # Metrics
    "ErrorMetrics",
    "compute_error_metrics",
    "mae",
    "mase",
    "rmse",
    "smape",
    # Seasonality
    "autocorrelation",
    "detect_seasonality",
    "detrend",
]
