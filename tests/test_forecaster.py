import numpy as np
import pytest
from conftest import LastValueRegressor, MeanWindowRegressor

from price_forecast.cancellation import CancellationToken
from price_forecast.errors import CancelledError, InsufficientDataError
from price_forecast.features.scaler import ScalingParameters, fit_scaler, normalize
from price_forecast.forecasting.forecaster import forecast

SERIES = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]


@pytest.mark.parametrize("horizon", [1, 5, 30])
def test_forecast_length_matches_horizon(horizon):
    result = forecast(MeanWindowRegressor(), SERIES, 5, fit_scaler(SERIES), horizon)
    assert len(result.values) == horizon
    assert result.horizon == horizon


def test_mean_regressor_rollout_matches_closed_form():
    # Windows in price terms: [6..10] -> 8, [7,8,9,10,8] -> 8.4, and so on.
    result = forecast(MeanWindowRegressor(), SERIES, 5, fit_scaler(SERIES), 5, variant="mean")

    assert result.variant == "mean"
    assert result.values == pytest.approx([8.0, 8.4, 8.68, 8.816, 8.7792], rel=1e-12)


def test_normalized_prediction_is_fed_back_into_window():
    scaling = fit_scaler(SERIES)
    regressor = MeanWindowRegressor()
    forecast(regressor, SERIES, 5, scaling, 3)

    first, second, third = regressor.windows
    np.testing.assert_allclose(first, normalize(SERIES[-5:], scaling))
    assert second[:-1] == first[1:]
    assert second[-1] == pytest.approx(np.mean(first))
    assert third[-1] == pytest.approx(np.mean(second))


def test_predictions_outside_range_are_not_clamped():
    class Overshoot(MeanWindowRegressor):
        def predict(self, window):
            return 1.5

    scaling = ScalingParameters(minimum=100.0, maximum=200.0)
    result = forecast(Overshoot(), [120.0, 150.0, 180.0], 3, scaling, 2)
    assert result.values == (250.0, 250.0)


def test_series_shorter_than_window_is_insufficient():
    with pytest.raises(InsufficientDataError):
        forecast(MeanWindowRegressor(), SERIES[:4], 5, fit_scaler(SERIES), 5)


def test_series_equal_to_window_is_enough():
    result = forecast(LastValueRegressor(), SERIES[:5], 5, fit_scaler(SERIES), 2)
    assert result.values == pytest.approx((5.0, 5.0))


def test_horizon_must_be_positive():
    with pytest.raises(ValueError):
        forecast(MeanWindowRegressor(), SERIES, 5, fit_scaler(SERIES), 0)


def test_step_callback_and_cancellation():
    token = CancellationToken()
    steps = []

    def on_step(step, value):
        steps.append((step, value))
        if step == 2:
            token.cancel()

    with pytest.raises(CancelledError):
        forecast(LastValueRegressor(), SERIES, 5, fit_scaler(SERIES), 5, on_step=on_step, cancel_token=token)
    assert [step for step, _ in steps] == [1, 2]
    assert steps[0][1] == pytest.approx(10.0)
