"""Regressor contract, Keras variants and the training driver."""

from .factory import CNN_VARIANT, LSTM_VARIANT, RegressorBuilder, default_builders, load_network_configs
from .metrics import regression_metrics
from .networks import CNNConfig, KerasSequenceRegressor, LSTMConfig, build_cnn_model, build_lstm_model
from .regressor import EpochCallback, Regressor, TrainingOutcome, ensure_finite_outcome
from .trainer import SequenceTrainer

__all__ = [
    "CNN_VARIANT",
    "LSTM_VARIANT",
    "RegressorBuilder",
    "default_builders",
    "load_network_configs",
    "regression_metrics",
    "CNNConfig",
    "LSTMConfig",
    "KerasSequenceRegressor",
    "build_cnn_model",
    "build_lstm_model",
    "EpochCallback",
    "Regressor",
    "TrainingOutcome",
    "ensure_finite_outcome",
    "SequenceTrainer",
]
