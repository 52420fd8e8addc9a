"""
Tests for forecast accuracy metrics and seasonal period detection.
"""

import numpy as np
import pytest

from src.forecasting.metrics import ErrorMetrics, compute_error_metrics, mae, mase, naive_mae, rmse, smape
from src.forecasting.seasonality import autocorrelation, detect_seasonality, detrend

# =============================================================================
# METRICS
# =============================================================================


class TestMetrics:
    """MAE / RMSE / MASE / SMAPE"""

    def test_values(self) -> None:
        y_true = np.array([1.0, 2.0, 3.0])
        y_pred = np.array([1.0, 2.0, 5.0])
        assert mae(y_true, y_pred) == pytest.approx(2.0 / 3.0)
        assert rmse(y_true, y_pred) == pytest.approx(np.sqrt(4.0 / 3.0))
        assert naive_mae(y_true) == pytest.approx(1.0)
        assert mase(y_true, y_pred) == pytest.approx(2.0 / 3.0)
        assert smape(y_true, y_pred) == pytest.approx(200.0 * (2.0 / 8.0) / 3.0)

    def test_perfect_fit(self) -> None:
        y = [3.0, 5.0, 4.0]
        assert compute_error_metrics(y, y) == ErrorMetrics(mae=0.0, rmse=0.0, mase=0.0, smape=0.0)

    def test_constant_series_mase_is_zero(self) -> None:
        """Naive MAE of zero gives MASE 0 rather than a division error"""
        assert mase([2.0, 2.0, 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_naive_mae_single_point(self) -> None:
        assert naive_mae([4.0]) == 0.0

    def test_smape_skips_double_zeros(self) -> None:
        assert smape([0.0, 0.0], [0.0, 0.0]) == 0.0
        assert smape([0.0, 2.0], [0.0, 2.0]) == 0.0
        assert smape([0.0, 1.0], [0.0, 3.0]) == pytest.approx(100.0)

    def test_accepts_lists(self) -> None:
        metrics = compute_error_metrics([1, 2, 3, 4], [1, 2, 3, 5])
        assert metrics.mae == pytest.approx(0.25)
        assert metrics.rmse == pytest.approx(0.5)


# =============================================================================
# SEASONALITY
# =============================================================================


class TestAutocorrelation:
    def test_alternating(self) -> None:
        assert autocorrelation([1.0, -1.0, 1.0, -1.0], 1) == pytest.approx(-0.75)
        assert autocorrelation([1.0, -1.0, 1.0, -1.0], 2) == pytest.approx(0.5)

    def test_degenerate(self) -> None:
        assert autocorrelation([5.0, 5.0, 5.0], 1) == 0.0
        assert autocorrelation([1.0, 2.0, 3.0], 0) == 0.0
        assert autocorrelation([1.0, 2.0, 3.0], 3) == 0.0


class TestDetectSeasonality:
    def test_detrend_removes_line(self) -> None:
        residuals = detrend([2.0 + 0.5 * t for t in range(10)])
        assert np.allclose(residuals, 0.0, atol=1e-10)

    def test_linear_series_has_no_season(self) -> None:
        assert detect_seasonality([1, 2, 3, 4, 5, 6]) == 0

    def test_repeating_pattern(self) -> None:
        assert detect_seasonality([10, 20, 30] * 4) == 3

    def test_trend_with_season(self) -> None:
        pattern = (0.8, 1.2, 1.1, 0.9)
        values = [(10.0 + t) * pattern[t % 4] for t in range(24)]
        assert detect_seasonality(values) == 4

    def test_short_series(self) -> None:
        assert detect_seasonality([1.0, 5.0, 1.0]) == 0

    def test_max_period_limits_search(self) -> None:
        assert detect_seasonality([10, 20, 30] * 4, max_period=2) == 0

    def test_pure_trend_is_not_seasonal(self) -> None:
        """A ramp is strongly autocorrelated before detrending but has no season after it"""
        ramp = [float(t) for t in range(1, 25)]
        assert autocorrelation(ramp, 1) > 0.5
        assert detect_seasonality(ramp) == 0
