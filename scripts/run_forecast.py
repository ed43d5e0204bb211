"""CLI for running the dual-model forecast pipeline on one symbol."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

from price_forecast.config import get_settings  # noqa: E402
from price_forecast.data.sources import CsvSeriesSource, SyntheticSeriesSource  # noqa: E402
from price_forecast.errors import ForecastPipelineError  # noqa: E402
from price_forecast.models.factory import default_builders, load_network_configs  # noqa: E402
from price_forecast.pipeline.evaluation import evaluate_holdout  # noqa: E402
from price_forecast.pipeline.orchestrator import load_pipeline_config, run_pipeline  # noqa: E402
from price_forecast.pipeline.records import save_forecast_record, to_record  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train LSTM and CNN regressors and forecast the next closes.")
    parser.add_argument("symbol", help="Ticker symbol, e.g. RELIANCE.NS.")
    parser.add_argument("--csv-dir", help="Directory of <SYMBOL>.csv files; synthetic data is used when omitted.")
    parser.add_argument("--config", help="YAML config (defaults to PIPELINE_CONFIG / config/config.yaml).")
    parser.add_argument("--window-size", type=int, help="Input window length.")
    parser.add_argument("--epochs", type=int, help="Training epochs per model.")
    parser.add_argument("--batch-size", type=int, help="Mini-batch size.")
    parser.add_argument("--horizon", type=int, help="Number of future steps to forecast.")
    parser.add_argument("--parallel", action="store_true", help="Train both models concurrently.")
    parser.add_argument("--evaluate", action="store_true", help="Also score a held-out tail of the series.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility.")
    parser.add_argument("--save-record", action="store_true", help="Write the forecast record JSON to FORECASTS_DIR.")
    parser.add_argument("--output", help="Optional path to write the forecast record JSON.")
    return parser.parse_args()


def dump_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def main() -> None:
    args = parse_args()
    settings = get_settings()
    config_path = args.config or settings.pipeline_config_path

    config = load_pipeline_config(config_path).replace(
        window_size=args.window_size,
        epochs=args.epochs,
        batch_size=args.batch_size,
        horizon=args.horizon,
        parallel=True if args.parallel else None,
    )
    lstm_config, cnn_config = load_network_configs(config_path)
    seed = args.seed if args.seed is not None else settings.random_seed
    builders = default_builders(lstm_config, cnn_config, seed=seed)

    source = CsvSeriesSource(args.csv_dir) if args.csv_dir else SyntheticSeriesSource()
    series = source.fetch(args.symbol)

    try:
        ensemble = run_pipeline(series, config, builders=builders, symbol=args.symbol)
        evaluation = evaluate_holdout(series, config, builders) if args.evaluate else None
    except ForecastPipelineError as exc:
        raise SystemExit(f"Forecast failed: {exc}") from exc

    print(ensemble.to_frame().to_string(float_format=lambda value: f"{value:,.2f}"))
    record = to_record(ensemble)
    if evaluation is not None:
        record["holdout_metrics"] = evaluation.metrics
        print(json.dumps(evaluation.metrics, indent=2))

    if args.output:
        dump_json(Path(args.output), record)
    if args.save_record:
        path = save_forecast_record(ensemble, settings.forecasts_dir)
        print(f"Saved forecast record to {path}")


if __name__ == "__main__":
    main()
