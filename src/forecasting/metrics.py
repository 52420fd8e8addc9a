"""Forecast accuracy metrics.

In-sample error measures for a fitted series: MAE, RMSE, MASE (scaled by
the one-step naive forecast) and SMAPE (percent).
"""

from typing import NamedTuple

import numpy as np

from src.core.math.numerical_safeguards import safe_divide


class ErrorMetrics(NamedTuple):
    """In-sample accuracy of a fit."""

    mae: float
    rmse: float
    mase: float
    smape: float


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean Absolute Error."""
    return float(np.mean(np.abs(np.asarray(y_true, dtype=float) - np.asarray(y_pred, dtype=float))))


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Root Mean Squared Error."""
    errors = np.asarray(y_true, dtype=float) - np.asarray(y_pred, dtype=float)
    return float(np.sqrt(np.mean(errors**2)))


def naive_mae(y_true: np.ndarray) -> float:
    """MAE of the one-step naive forecast y_hat[t] = y[t-1]."""
    y_true = np.asarray(y_true, dtype=float)
    if len(y_true) < 2:
        return 0.0
    return float(np.mean(np.abs(np.diff(y_true))))


def mase(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean Absolute Scaled Error.

    Forecast MAE divided by the in-sample MAE of the one-step naive
    forecast. A constant series (naive MAE of zero) gives 0.

    Args:
        y_true: Actual values
        y_pred: Fitted values

    Returns:
        MASE value (1.0 means same error as the naive forecast)
    """
    return safe_divide(mae(y_true, y_pred), naive_mae(y_true), fallback=0.0)


def smape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Symmetric Mean Absolute Percentage Error, in percent (0-200).

    Observations where both actual and fitted values are zero are skipped.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    denominator = np.abs(y_true) + np.abs(y_pred)
    mask = denominator != 0

    if not np.any(mask):
        return 0.0

    return float(200.0 * np.mean(np.abs(y_true[mask] - y_pred[mask]) / denominator[mask]))


def compute_error_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> ErrorMetrics:
    """All four in-sample metrics at once."""
    return ErrorMetrics(
        mae=mae(y_true, y_pred),
        rmse=rmse(y_true, y_pred),
        mase=mase(y_true, y_pred),
        smape=smape(y_true, y_pred),
    )
