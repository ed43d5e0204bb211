"""Keras LSTM and CNN regressors behind the Regressor protocol."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np
import tensorflow as tf
from tensorflow.keras import Model, layers, optimizers

from ..features.windows import WindowDataset
from .regressor import EpochCallback, TrainingOutcome


@dataclass
class LSTMConfig:
    lstm_units: Tuple[int, ...] = (50, 50)
    dense_units: int = 25
    dropout: float = 0.2
    learning_rate: float = 1e-3

    @classmethod
    def from_dict(cls, data: dict) -> "LSTMConfig":
        return cls(
            lstm_units=tuple(data.get("hidden_units", [50, 50])),
            dense_units=int(data.get("dense_units", 25)),
            dropout=float(data.get("dropout", 0.2)),
            learning_rate=float(data.get("learning_rate", 1e-3)),
        )


@dataclass
class CNNConfig:
    filters: int = 64
    kernel_size: int = 3
    pool_size: int = 2
    dense_units: int = 50
    dropout: float = 0.2
    learning_rate: float = 1e-3

    @classmethod
    def from_dict(cls, data: dict) -> "CNNConfig":
        return cls(
            filters=int(data.get("filters", 64)),
            kernel_size=int(data.get("kernel_size", 3)),
            pool_size=int(data.get("pool_size", 2)),
            dense_units=int(data.get("dense_units", 50)),
            dropout=float(data.get("dropout", 0.2)),
            learning_rate=float(data.get("learning_rate", 1e-3)),
        )

    def min_window_size(self) -> int:
        return self.kernel_size + self.pool_size - 1


def set_random_seeds(seed: int | None) -> None:
    if seed is None:
        return
    random.seed(seed)
    np.random.seed(seed)
    tf.random.set_seed(seed)


def build_lstm_model(window_size: int, config: LSTMConfig | None = None) -> Model:
    config = config or LSTMConfig()
    if not config.lstm_units:
        raise ValueError("LSTMConfig.lstm_units must name at least one layer.")
    inputs = layers.Input(shape=(window_size, 1))

    x = inputs
    last = len(config.lstm_units) - 1
    for position, units in enumerate(config.lstm_units):
        x = layers.LSTM(units, return_sequences=position < last)(x)
        if position < last:
            x = layers.Dropout(config.dropout)(x)

    x = layers.Dense(config.dense_units)(x)
    x = layers.Dropout(config.dropout)(x)
    outputs = layers.Dense(1)(x)

    model = Model(inputs=inputs, outputs=outputs, name="lstm_price_regressor")
    model.compile(
        optimizer=optimizers.Adam(learning_rate=config.learning_rate),
        loss="mse",
        metrics=["mae"],
    )
    return model


def build_cnn_model(window_size: int, config: CNNConfig | None = None) -> Model:
    config = config or CNNConfig()
    if window_size < config.min_window_size():
        raise ValueError(
            f"CNN needs window_size >= {config.min_window_size()} "
            f"(kernel {config.kernel_size}, pool {config.pool_size}), got {window_size}"
        )
    inputs = layers.Input(shape=(window_size, 1))
    x = layers.Conv1D(config.filters, config.kernel_size, activation="relu")(inputs)
    x = layers.MaxPooling1D(pool_size=config.pool_size)(x)
    x = layers.Flatten()(x)
    x = layers.Dense(config.dense_units, activation="relu")(x)
    x = layers.Dropout(config.dropout)(x)
    outputs = layers.Dense(1)(x)

    model = Model(inputs=inputs, outputs=outputs, name="cnn_price_regressor")
    model.compile(
        optimizer=optimizers.Adam(learning_rate=config.learning_rate),
        loss="mse",
        metrics=["mae"],
    )
    return model


class KerasSequenceRegressor:
    """Adapts a compiled single-output Keras model to the Regressor protocol."""

    def __init__(self, model: Model, window_size: int) -> None:
        self.model = model
        self.window_size = window_size

    def fit(
        self,
        dataset: WindowDataset,
        epochs: int,
        batch_size: int,
        on_epoch_end: EpochCallback,
    ) -> TrainingOutcome:
        X, y = dataset.as_model_inputs()

        def _report(epoch: int, logs: Dict[str, float] | None = None) -> None:
            on_epoch_end(epoch + 1, {name: float(value) for name, value in (logs or {}).items()})

        history = self.model.fit(
            X,
            y,
            epochs=epochs,
            batch_size=batch_size,
            shuffle=False,
            verbose=0,
            callbacks=[tf.keras.callbacks.LambdaCallback(on_epoch_end=_report)],
        )
        return TrainingOutcome(
            history={name: [float(v) for v in values] for name, values in history.history.items()}
        )

    def predict(self, window: Sequence[float]) -> float:
        x = np.asarray(window, dtype=np.float32).reshape(1, self.window_size, 1)
        output = self.model(x, training=False)
        return float(np.asarray(output).reshape(-1)[0])
