"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      committed static defaults
  2. ``config/local.toml``        optional local overrides (gitignored)
  3. ``.env``                     local secrets and env overrides (gitignored)
  4. Environment variables        ``BITE_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The model registry, the forecast service and the CLI all receive an
``AppConfig`` instance rather than reading env vars themselves.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class WeightsConfig(BaseModel):
    """Initial model weights.

    The values are the documented defaults of the scoring model.  Only
    ``temp_weight``, ``pressure_weight``, ``wind_weight`` and ``bias`` are
    changed by training; the rest stay at what is configured here.
    """

    model_config = ConfigDict(frozen=True)

    temp_weight: float = 0.25
    temp_threshold: float = 18.0
    pressure_weight: float = 0.20
    pressure_optimal: float = 1013.0
    wind_weight: float = 0.10
    wind_optimal: float = 4.0
    morning_weight: float = 0.15
    evening_weight: float = 0.12
    moon_weight: float = 0.08
    season_weight: float = 0.05
    rain_penalty: float = 0.15
    cloud_penalty: float = 0.05
    bias: float = 0.35


class ModelConfig(BaseModel):
    """Scoring model hyperparameters."""

    model_config = ConfigDict(frozen=True)

    n_iterations: int = 100
    learning_rate: float = 0.1
    max_samples: Optional[int] = None   # None → keep every sample ever added
    weights: WeightsConfig = WeightsConfig()

    @field_validator("n_iterations")
    @classmethod
    def validate_iterations(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"n_iterations must be >= 1, got {v}.")
        return v

    @field_validator("learning_rate")
    @classmethod
    def validate_learning_rate(cls, v: float) -> float:
        if not v > 0.0:
            raise ValueError(f"learning_rate must be > 0.0, got {v}.")
        return v

    @field_validator("max_samples")
    @classmethod
    def validate_max_samples(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"max_samples must be >= 1 or unset, got {v}.")
        return v


class TrainingConfig(BaseModel):
    """Retraining policy used by the forecast service."""

    model_config = ConfigDict(frozen=True)

    retrain_every: int = 100      # 0 disables automatic retraining
    copy_on_write: bool = False   # train a private copy, then swap it in

    @field_validator("retrain_every")
    @classmethod
    def validate_retrain_every(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"retrain_every must be >= 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration; the single source of truth."""

    model_config = ConfigDict(frozen=True)

    model: ModelConfig = ModelConfig()
    training: TrainingConfig = TrainingConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file
            is absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            raw = _read_toml_with_local(default_path)
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_toml_with_local(config_path)

    # 3. Apply BITE_FORECASTER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml_with_local(config_path: Path) -> dict[str, Any]:
    """Read ``config_path`` and merge a sibling ``local.toml`` if present."""
    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)
    return raw


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply BITE_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      BITE_FORECASTER_LOG_LEVEL      → raw["logging"]["level"]
      BITE_FORECASTER_LEARNING_RATE  → raw["model"]["learning_rate"]
      BITE_FORECASTER_N_ITERATIONS   → raw["model"]["n_iterations"]
      BITE_FORECASTER_RETRAIN_EVERY  → raw["training"]["retrain_every"]
      BITE_FORECASTER_DEBUG          → raw["debug"]

    Numeric values are passed through as strings; pydantic coerces them.
    """
    if log_level := os.environ.get("BITE_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if learning_rate := os.environ.get("BITE_FORECASTER_LEARNING_RATE"):
        raw.setdefault("model", {})["learning_rate"] = learning_rate

    if n_iterations := os.environ.get("BITE_FORECASTER_N_ITERATIONS"):
        raw.setdefault("model", {})["n_iterations"] = n_iterations

    if retrain_every := os.environ.get("BITE_FORECASTER_RETRAIN_EVERY"):
        raw.setdefault("training", {})["retrain_every"] = retrain_every

    if debug := os.environ.get("BITE_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    model_raw = dict(raw.get("model", {}))
    weights_raw = model_raw.pop("weights", {})

    return AppConfig(
        model=ModelConfig(weights=WeightsConfig(**weights_raw), **model_raw),
        training=TrainingConfig(**raw.get("training", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
