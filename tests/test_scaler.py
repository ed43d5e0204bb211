import numpy as np
import pytest

from price_forecast.errors import DegenerateSeriesError
from price_forecast.features.scaler import ScalingParameters, denormalize, fit_scaler, normalize


@pytest.mark.parametrize(
    "series",
    [
        [1.0, 2.0, 3.0, 4.0],
        [101.25, 99.5, 130.75, 87.0, 87.0, 150.2],
        list(np.linspace(-5, 5, 17)),
    ],
)
def test_normalize_then_denormalize_returns_original(series):
    params = fit_scaler(series)
    restored = denormalize(normalize(series, params), params)
    np.testing.assert_allclose(restored, series, rtol=1e-12, atol=1e-9)


def test_normalized_values_span_unit_interval():
    series = [10.0, 30.0, 20.0, 15.0]
    params = fit_scaler(series)
    scaled = normalize(series, params)
    assert params == ScalingParameters(minimum=10.0, maximum=30.0)
    assert scaled.min() == 0.0
    assert scaled.max() == 1.0
    assert scaled[2] == pytest.approx(0.5)


def test_constant_series_is_degenerate():
    with pytest.raises(DegenerateSeriesError):
        fit_scaler([100.0] * 10)


def test_empty_series_is_degenerate():
    with pytest.raises(DegenerateSeriesError):
        fit_scaler([])


def test_non_finite_values_are_rejected():
    with pytest.raises(DegenerateSeriesError):
        fit_scaler([1.0, float("nan"), 3.0])


def test_denormalize_extrapolates_outside_fitted_range():
    params = ScalingParameters(minimum=50.0, maximum=150.0)
    np.testing.assert_allclose(denormalize([1.5, -0.25], params), [200.0, 25.0])


def test_scaling_parameters_dict_round_trip_rejects_inverted_bounds():
    params = ScalingParameters(minimum=1.0, maximum=2.0)
    assert ScalingParameters.from_dict(params.to_dict()) == params
    with pytest.raises(DegenerateSeriesError):
        ScalingParameters.from_dict({"min": 5.0, "max": 5.0})


def test_degenerate_error_is_a_value_error():
    assert issubclass(DegenerateSeriesError, ValueError)
