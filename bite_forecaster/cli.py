"""
Bite forecaster CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Build a model/registry from config and run it.
  5. Report result to stdout.

Install and run::

    pip install -e .
    bite-forecaster --help
    bite-forecaster validate-config
    bite-forecaster predict --temperature 18 --pressure 1013 --wind 4 --latitude 52
    bite-forecaster train --samples data/samples.json
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="bite-forecaster",
    help="Fish bite forecaster: score conditions and train on catch reports.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from bite_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from bite_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Iterations:       {config.model.n_iterations}")
    typer.echo(f"  Learning rate:    {config.model.learning_rate}")
    typer.echo(f"  Max samples:      {config.model.max_samples or 'unbounded'}")
    typer.echo(f"  Retrain every:    {config.training.retrain_every or 'disabled'}")
    typer.echo(f"  Copy-on-write:    {config.training.copy_on_write}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("predict")
def predict(
    temperature: float = typer.Option(..., "--temperature", help="Air temperature (°C)."),
    pressure: float = typer.Option(..., "--pressure", help="Pressure (hPa)."),
    wind: float = typer.Option(..., "--wind", help="Wind speed (m/s)."),
    latitude: float = typer.Option(..., "--latitude", help="Latitude (degrees, negative = south)."),
    wind_direction: Optional[float] = typer.Option(None, "--wind-dir", help="Wind direction (degrees)."),
    precipitation: Optional[float] = typer.Option(None, "--precip", help="Precipitation (mm)."),
    cloud_cover: Optional[float] = typer.Option(None, "--cloud", help="Cloud cover fraction 0-1."),
    humidity: Optional[float] = typer.Option(None, "--humidity", help="Relative humidity (%)."),
    at: Optional[str] = typer.Option(
        None,
        "--at",
        help="ISO datetime to forecast for; without a UTC offset it is read as local time. Default: now.",
    ),
    hour: Optional[int] = typer.Option(None, "--hour", help="Hour 0-23 (with --day and --moon-phase)."),
    day_of_year: Optional[int] = typer.Option(None, "--day", help="Day of year 1-366."),
    moon_phase: Optional[float] = typer.Option(None, "--moon-phase", help="Moon phase 0-1."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score the given conditions with the configured (untrained) model.

    Either pass --hour, --day and --moon-phase explicitly, or let them be
    derived from --at (or the current time).
    """
    from bite_forecaster.features.builder import build_features, build_features_at
    from bite_forecaster.ml.model import BiteModel
    from bite_forecaster.reporting.formatters import format_prediction

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    explicit = (hour, day_of_year, moon_phase)
    if all(v is not None for v in explicit):
        snapshot = build_features(
            temperature_c=temperature,
            pressure_hpa=pressure,
            wind_speed_ms=wind,
            wind_direction_deg=wind_direction,
            precipitation_mm=precipitation,
            hour=hour,
            day_of_year=day_of_year,
            moon_phase=moon_phase,
            latitude=latitude,
            cloud_cover=cloud_cover,
            humidity=humidity,
        )
    elif any(v is not None for v in explicit):
        typer.echo("[ERROR] --hour, --day and --moon-phase must be given together.", err=True)
        raise typer.Exit(code=1)
    else:
        try:
            observed_at = datetime.fromisoformat(at) if at else datetime.now()
            if observed_at.tzinfo is None:
                observed_at = observed_at.astimezone()   # naive -> system local zone
        except ValueError as exc:
            typer.echo(f"[ERROR] Invalid --at datetime: {exc}", err=True)
            raise typer.Exit(code=1)
        snapshot = build_features_at(
            observed_at,
            temperature_c=temperature,
            pressure_hpa=pressure,
            wind_speed_ms=wind,
            latitude=latitude,
            wind_direction_deg=wind_direction,
            precipitation_mm=precipitation,
            cloud_cover=cloud_cover,
            humidity=humidity,
        )

    model = BiteModel.from_config(config.model)
    result = model.predict_detailed(snapshot)

    if as_json:
        typer.echo(json.dumps(
            {"features": snapshot.model_dump(), "prediction": result.model_dump(mode="json")},
            indent=2,
        ))
        return

    typer.echo(format_prediction(result, moon_phase=snapshot.moon_phase))


@app.command("train")
def train(
    samples_path: Path = typer.Option(
        ...,
        "--samples",
        help="JSON file holding an array of training samples.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print stats as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Train a fresh model on a samples file and report stats and importance.

    Nothing is persisted: the trained weights are printed and discarded.
    """
    from pydantic import TypeAdapter, ValidationError

    from bite_forecaster.ml.model import BiteModel
    from bite_forecaster.ml.registry import ModelRegistry
    from bite_forecaster.models.snapshot import TrainingSample
    from bite_forecaster.reporting.formatters import (
        format_feature_importance,
        format_stats,
        format_training_summary,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if not samples_path.exists():
        typer.echo(f"[ERROR] Samples file not found: {samples_path}", err=True)
        raise typer.Exit(code=1)

    try:
        samples = TypeAdapter(list[TrainingSample]).validate_json(samples_path.read_bytes())
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid samples file:\n{exc}", err=True)
        raise typer.Exit(code=1)

    registry = ModelRegistry(BiteModel.from_config(config.model))
    registry.add_samples(samples)
    summary = registry.train()

    stats = registry.get_stats()
    try:
        importance = registry.feature_importance()
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        with registry.read() as model:
            weights = model.weights.model_dump()
        typer.echo(json.dumps(
            {
                "stats": stats.model_dump(),
                "importance": importance.model_dump(),
                "weights": weights,
            },
            indent=2,
        ))
        return

    typer.echo(f"Loaded {len(samples)} sample(s) from: {samples_path}")
    typer.echo(format_training_summary(summary))
    typer.echo("")
    typer.echo(format_stats(stats))
    typer.echo("")
    typer.echo(format_feature_importance(importance))
    typer.echo("")
    typer.echo("[OK] Training complete.")


if __name__ == "__main__":
    app()
