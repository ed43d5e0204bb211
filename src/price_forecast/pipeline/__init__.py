"""Pipeline orchestration, progress reporting, evaluation and records."""

from .evaluation import HoldoutEvaluation, evaluate_holdout
from .orchestrator import ForecastPipeline, PipelineConfig, load_pipeline_config, run_pipeline
from .progress import LoggingProgressSink, ProgressEvent, ProgressSink, QueueProgressSink
from .records import from_record, load_forecast_record, save_forecast_record, to_record

__all__ = [
    "HoldoutEvaluation",
    "evaluate_holdout",
    "ForecastPipeline",
    "PipelineConfig",
    "load_pipeline_config",
    "run_pipeline",
    "LoggingProgressSink",
    "ProgressEvent",
    "ProgressSink",
    "QueueProgressSink",
    "from_record",
    "load_forecast_record",
    "save_forecast_record",
    "to_record",
]
