"""Application settings loader with environment variable support."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

# Resolve project root (three levels up from this file: src/price_forecast/config)
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _load_dotenv_files() -> None:
    """
    Load `.env` style files if they exist.

    We attempt multiple locations so developers can choose their preferred workflow
    (e.g., `.env`, `.env.local`, `config/.env`). Missing files are ignored.
    """
    candidate_files = [
        PROJECT_ROOT / ".env",
        PROJECT_ROOT / ".env.local",
        PROJECT_ROOT / "config" / ".env",
        PROJECT_ROOT / "config" / ".env.local",
    ]

    for env_file in candidate_files:
        if env_file.exists():
            load_dotenv(env_file, override=False)


_load_dotenv_files()


@dataclass(frozen=True)
class Settings:
    """Container for application-wide configuration values."""

    log_level: str = "INFO"
    logs_dir: Path = PROJECT_ROOT / "logs"
    forecasts_dir: Path = PROJECT_ROOT / "data" / "forecasts"
    pipeline_config_path: Path = PROJECT_ROOT / "config" / "config.yaml"
    random_seed: Optional[int] = None

    @staticmethod
    def _get_int(name: str) -> Optional[int]:
        value = os.getenv(name)
        if value is None or not value.strip():
            return None
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable '{name}' must be an integer, got {value!r}.") from exc

    @classmethod
    def load(cls) -> "Settings":
        """Instantiate settings from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            logs_dir=Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs")),
            forecasts_dir=Path(os.getenv("FORECASTS_DIR", PROJECT_ROOT / "data" / "forecasts")),
            pipeline_config_path=Path(
                os.getenv("PIPELINE_CONFIG", PROJECT_ROOT / "config" / "config.yaml")
            ),
            random_seed=cls._get_int("RANDOM_SEED"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.load()


def load_config_section(path: str | Path | None, section: str) -> dict:
    """Return one top-level section of a YAML config file, or ``{}`` if absent."""
    if path is None:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return data.get(section, {}) or {}
