"""
Model inputs: the feature snapshot and labeled training samples.

``FeatureSnapshot`` is the canonical, already-derived view of the conditions
at one place and time.  The derived fields (``moon_illumination``,
``season_factor``, ``time_category``) are filled in once by
``bite_forecaster.features.builder`` and read as-is by everything downstream.

Numeric ranges are NOT validated here.  NaN or physically impossible values
are accepted and flow through the scoring arithmetic; range checks are the
caller's job.

Both models are frozen.  A ``TrainingSample`` is appended to a model's sample
history and never mutated afterwards.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

TIME_NIGHT = 0
TIME_MORNING = 1
TIME_DAY = 2
TIME_EVENING = 3


class FeatureSnapshot(BaseModel):
    """Environmental and temporal conditions used as model input.

    Attributes:
        temperature_c: Air temperature in °C.
        pressure_hpa: Atmospheric pressure in hPa.
        wind_speed_ms: Wind speed in m/s.
        wind_direction_deg: Wind direction in degrees, if known.
        precipitation_mm: Precipitation in mm, if known.
        hour: Local hour of day, 0–23.
        day_of_year: Day of year, 1–366.
        moon_phase: Lunar phase, 0.0 = new moon, 0.5 = full moon.
        moon_illumination: Derived illuminated fraction, 0.0–1.0.
        latitude: Latitude in degrees; negative = southern hemisphere.
        season_factor: Derived seasonality signal, 0.0–1.0.
        time_category: Derived bucket: 0 night, 1 morning, 2 day, 3 evening.
        cloud_cover: Cloud cover fraction 0.0–1.0, if known.
        humidity: Relative humidity 0–100, if known.
    """

    model_config = ConfigDict(frozen=True)

    temperature_c: float
    pressure_hpa: float
    wind_speed_ms: float
    wind_direction_deg: Optional[float] = None
    precipitation_mm: Optional[float] = None
    hour: int
    day_of_year: int
    moon_phase: float
    moon_illumination: float
    latitude: float
    season_factor: float
    time_category: int
    cloud_cover: Optional[float] = None
    humidity: Optional[float] = None


class TrainingSample(BaseModel):
    """A historical snapshot paired with the observed outcome.

    Attributes:
        features: Conditions at the time of the catch report.
        bite_intensity: Observed bite intensity, 0.0–1.0.  This is the label
            the trainer fits against.
        success_rate: Observed catch success rate, 0.0–1.0.
    """

    model_config = ConfigDict(frozen=True)

    features: FeatureSnapshot
    bite_intensity: float
    success_rate: float

    @field_validator("bite_intensity", "success_rate")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"label must be in [0.0, 1.0], got {v}.")
        return v
