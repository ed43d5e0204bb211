import json

import pandas as pd
import pytest
from conftest import RecordingSink

from price_forecast.pipeline.orchestrator import PipelineConfig, run_pipeline
from price_forecast.pipeline.records import load_forecast_record, save_forecast_record, to_record


@pytest.fixture
def ensemble(trending_series, fake_builders):
    builders, _ = fake_builders
    index = pd.date_range("2024-03-01", periods=len(trending_series), freq="D", tz="UTC")
    return run_pipeline(
        pd.Series(trending_series, index=index),
        PipelineConfig(window_size=10, epochs=2, horizon=3),
        builders=builders,
        progress=RecordingSink(),
        symbol="reliance.ns",
    )


def test_record_is_flat_and_json_serialisable(ensemble):
    record = to_record(ensemble)
    assert record["symbol"] == "reliance.ns"
    assert record["window_size"] == 10
    assert record["horizon"] == 3
    assert set(record["scaling"]) == {"min", "max"}
    assert set(record["per_model"]) == {"lstm", "cnn"}
    assert all(len(values) == 3 for values in record["per_model"].values())
    json.dumps(record)


def test_saved_record_loads_back(ensemble, tmp_path):
    path = save_forecast_record(ensemble, tmp_path / "forecasts")
    assert path.name.startswith("RELIANCE.NS_")
    assert path.suffix == ".json"

    loaded = load_forecast_record(path)
    assert loaded.symbol == ensemble.symbol
    assert loaded.scaling == ensemble.scaling
    assert loaded.generated_at == ensemble.generated_at
    for variant in ensemble.variants:
        assert loaded.values(variant) == pytest.approx(ensemble.values(variant))
    assert list(loaded.forecast_index()) == list(ensemble.forecast_index())
