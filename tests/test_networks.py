import numpy as np
import pytest

pytest.importorskip("tensorflow")

from price_forecast.features.windows import build_window_dataset  # noqa: E402
from price_forecast.models.factory import default_builders, load_network_configs  # noqa: E402
from price_forecast.models.networks import CNNConfig, build_cnn_model  # noqa: E402
from price_forecast.models.trainer import SequenceTrainer  # noqa: E402


@pytest.fixture(scope="module")
def dataset():
    series = (np.sin(np.linspace(0, 6, 40)) + 1) / 2
    return build_window_dataset(series, window_size=8)


@pytest.mark.parametrize("variant", ["lstm", "cnn"])
def test_keras_regressors_fit_and_predict(variant, dataset):
    regressor = default_builders(seed=1)[variant](8)
    seen = []
    outcome = SequenceTrainer(epochs=2, batch_size=16).fit(
        regressor, dataset, lambda epoch, metrics: seen.append((epoch, metrics)), variant=variant
    )

    assert [epoch for epoch, _ in seen] == [1, 2]
    assert all("loss" in metrics and "mae" in metrics for _, metrics in seen)
    assert outcome.epochs_completed == 2
    prediction = regressor.predict(dataset[0].inputs)
    assert isinstance(prediction, float)
    assert np.isfinite(prediction)


def test_cnn_rejects_windows_too_short_for_kernel_and_pool():
    with pytest.raises(ValueError):
        build_cnn_model(3, CNNConfig(kernel_size=3, pool_size=2))


def test_network_configs_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "models:\n  lstm:\n    hidden_units: [32]\n  cnn:\n    filters: 16\n    kernel_size: 5\n",
        encoding="utf-8",
    )
    lstm_config, cnn_config = load_network_configs(path)
    assert lstm_config.lstm_units == (32,)
    assert cnn_config.filters == 16
    assert cnn_config.min_window_size() == 6
