from datetime import datetime, timezone

import pytest
from conftest import LastValueRegressor, MeanWindowRegressor
from fastapi.testclient import TestClient

from price_forecast.api import server
from price_forecast.data.sources import SyntheticSeriesSource
from price_forecast.pipeline.orchestrator import PipelineConfig

client = TestClient(server.app)


@pytest.fixture(autouse=True)
def fake_collaborators(monkeypatch):
    monkeypatch.setattr(
        server,
        "regressor_builders",
        {"lstm": lambda w: MeanWindowRegressor(), "cnn": lambda w: LastValueRegressor()},
    )
    monkeypatch.setattr(server, "base_config", PipelineConfig(window_size=5, epochs=2, horizon=3))
    monkeypatch.setattr(
        server, "series_source", SyntheticSeriesSource(days=120, end=datetime(2024, 6, 30, tzinfo=timezone.utc))
    )


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_forecast_from_closes():
    closes = [float(v) for v in range(1, 21)]
    r = client.post("/forecast", json={"closes": closes})
    assert r.status_code == 200
    data = r.json()
    assert data["horizon"] == 3
    assert set(data["per_model"]) == {"lstm", "cnn"}
    assert data["per_model"]["cnn"] == pytest.approx([20.0, 20.0, 20.0])
    assert data["scaling"] == {"min": 1.0, "max": 20.0}
    assert data["index"] == ["1", "2", "3"]
    assert len(data["average"]) == 3


def test_forecast_from_symbol_uses_series_source():
    r = client.post("/forecast", json={"symbol": "WIPRO.NS", "horizon": 4})
    assert r.status_code == 200
    data = r.json()
    assert data["symbol"] == "WIPRO.NS"
    assert data["horizon"] == 4
    assert data["index"][0].startswith("2024-07-01")


def test_forecast_with_holdout_evaluation():
    closes = [float(v) for v in range(1, 31)]
    r = client.post("/forecast", json={"closes": closes, "evaluate": True})
    assert r.status_code == 200
    metrics = r.json()["holdout_metrics"]
    assert set(metrics) == {"lstm", "cnn", "average"}
    assert metrics["cnn"]["mae"] == pytest.approx(2.0)


def test_forecast_requires_input():
    r = client.post("/forecast", json={})
    assert r.status_code == 400


def test_short_series_is_unprocessable():
    r = client.post("/forecast", json={"closes": [1.0, 2.0, 3.0]})
    assert r.status_code == 422


def test_constant_series_is_unprocessable():
    r = client.post("/forecast", json={"closes": [5.0] * 20})
    assert r.status_code == 422
    assert "constant" in r.json()["detail"]


def test_metrics_counts_requests():
    before = client.get("/metrics").json()["metrics_state"]["forecast_requests"]
    client.post("/forecast", json={"closes": [float(v) for v in range(1, 21)]})
    after = client.get("/metrics").json()["metrics_state"]
    assert after["forecast_requests"] == before + 1
