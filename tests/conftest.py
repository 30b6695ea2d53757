"""
Shared pytest fixtures for the bite forecaster test suite.

Provides:
  - ``good_snapshot`` / ``bad_snapshot``: the two reference condition sets,
    constructed directly so their derived fields match the documented values.
  - ``make_sample``: factory for ``TrainingSample`` objects.
  - ``default_model`` / ``registry``: fresh model objects with default weights.
"""

from __future__ import annotations

from typing import Callable

import pytest

from bite_forecaster.ml.model import BiteModel
from bite_forecaster.ml.registry import ModelRegistry
from bite_forecaster.models.snapshot import FeatureSnapshot, TrainingSample


@pytest.fixture
def good_snapshot() -> FeatureSnapshot:
    """Near-ideal conditions: on-reference temperature/pressure/wind, dawn, full moon."""
    return FeatureSnapshot(
        temperature_c=18.0,
        pressure_hpa=1013.0,
        wind_speed_ms=4.0,
        wind_direction_deg=180.0,
        precipitation_mm=0.0,
        hour=7,
        day_of_year=120,
        moon_phase=0.5,
        moon_illumination=1.0,
        latitude=52.0,
        season_factor=0.8,
        time_category=1,
        cloud_cover=0.3,
        humidity=60.0,
    )


@pytest.fixture
def bad_snapshot() -> FeatureSnapshot:
    """Cold, low pressure, gale, heavy rain, midday, quarter moon, overcast."""
    return FeatureSnapshot(
        temperature_c=5.0,
        pressure_hpa=980.0,
        wind_speed_ms=15.0,
        wind_direction_deg=270.0,
        precipitation_mm=10.0,
        hour=14,
        day_of_year=30,
        moon_phase=0.25,
        moon_illumination=0.5,
        latitude=52.0,
        season_factor=0.3,
        time_category=2,
        cloud_cover=0.9,
        humidity=90.0,
    )


@pytest.fixture
def make_sample() -> Callable[..., TrainingSample]:
    """Return a factory: ``make_sample(snapshot, bite_intensity=0.5, success_rate=0.5)``."""

    def _make(
        features: FeatureSnapshot,
        bite_intensity: float = 0.5,
        success_rate: float = 0.5,
    ) -> TrainingSample:
        return TrainingSample(
            features=features,
            bite_intensity=bite_intensity,
            success_rate=success_rate,
        )

    return _make


@pytest.fixture
def default_model() -> BiteModel:
    return BiteModel()


@pytest.fixture
def registry() -> ModelRegistry:
    return ModelRegistry(BiteModel())
