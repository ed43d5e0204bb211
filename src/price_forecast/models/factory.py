"""Registry of regressor variants selectable by id."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Mapping, Tuple

from ..config.settings import load_config_section
from .networks import (
    CNNConfig,
    KerasSequenceRegressor,
    LSTMConfig,
    build_cnn_model,
    build_lstm_model,
    set_random_seeds,
)
from .regressor import Regressor

RegressorBuilder = Callable[[int], Regressor]

LSTM_VARIANT = "lstm"
CNN_VARIANT = "cnn"


def load_network_configs(path: str | Path | None) -> Tuple[LSTMConfig, CNNConfig]:
    models_cfg = load_config_section(path, "models")
    return (
        LSTMConfig.from_dict(models_cfg.get("lstm", {}) or {}),
        CNNConfig.from_dict(models_cfg.get("cnn", {}) or {}),
    )


def default_builders(
    lstm_config: LSTMConfig | None = None,
    cnn_config: CNNConfig | None = None,
    seed: int | None = None,
) -> Dict[str, RegressorBuilder]:
    """Map each variant id to a callable building a fresh regressor for a window size."""

    def _lstm(window_size: int) -> Regressor:
        set_random_seeds(seed)
        return KerasSequenceRegressor(build_lstm_model(window_size, lstm_config), window_size)

    def _cnn(window_size: int) -> Regressor:
        set_random_seeds(seed)
        return KerasSequenceRegressor(build_cnn_model(window_size, cnn_config), window_size)

    return {LSTM_VARIANT: _lstm, CNN_VARIANT: _cnn}


def select_builders(
    builders: Mapping[str, RegressorBuilder], variants: Tuple[str, ...]
) -> Dict[str, RegressorBuilder]:
    unknown = [variant for variant in variants if variant not in builders]
    if unknown:
        raise KeyError(
            f"Unknown model variant(s) {unknown}; available: {sorted(builders)}"
        )
    return {variant: builders[variant] for variant in variants}
