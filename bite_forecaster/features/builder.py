"""
FeatureBuilder: raw observations -> ``FeatureSnapshot``.

This is the only place the derived snapshot fields are computed:

moon_illumination
    ``(1 - cos(2π·phase)) / 2``, clamped to [0, 1].

season_factor
    Two cosine bumps over a 365-day period, one centred on day 120 (spring
    run, ~1 May) and one on day 300 (autumn feeding, ~27 Oct)::

        (cos((d - 120)/365 · 2π) + cos((d - 300)/365 · 2π) + 1) / 3

    South of the equator the day is shifted by half a year first:
    ``d = (day_of_year + 180) % 365``.  The two peaks sit almost half a
    period apart, so in practice the factor stays close to 1/3 and only
    nudges the score.

time_category
    0–5 night, 6–11 morning, 12–17 day, 18–23 evening.

Nothing here validates ranges or raises; garbage in, garbage out.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from bite_forecaster.models.snapshot import (
    TIME_DAY,
    TIME_EVENING,
    TIME_MORNING,
    TIME_NIGHT,
    FeatureSnapshot,
)
from bite_forecaster.utils.moon import moon_illumination, moon_phase

_YEAR_DAYS = 365.0
_SPRING_PEAK_DAY = 120.0
_FALL_PEAK_DAY = 300.0
_HEMISPHERE_SHIFT_DAYS = 180


def season_factor(day_of_year: int, latitude: float) -> float:
    """Seasonality signal in [0, 1] for a day of year and latitude."""
    day = day_of_year if latitude >= 0.0 else (day_of_year + _HEMISPHERE_SHIFT_DAYS) % 365

    spring = math.cos((day - _SPRING_PEAK_DAY) / _YEAR_DAYS * 2.0 * math.pi)
    fall = math.cos((day - _FALL_PEAK_DAY) / _YEAR_DAYS * 2.0 * math.pi)
    return (spring + fall + 1.0) / 3.0


def time_category(hour: int) -> int:
    """Bucket an hour of day into night / morning / day / evening."""
    if hour <= 5:
        return TIME_NIGHT
    if hour <= 11:
        return TIME_MORNING
    if hour <= 17:
        return TIME_DAY
    return TIME_EVENING


def build_features(
    temperature_c: float,
    pressure_hpa: float,
    wind_speed_ms: float,
    wind_direction_deg: Optional[float],
    precipitation_mm: Optional[float],
    hour: int,
    day_of_year: int,
    moon_phase: float,
    latitude: float,
    cloud_cover: Optional[float] = None,
    humidity: Optional[float] = None,
) -> FeatureSnapshot:
    """Build a snapshot from raw observations, deriving the computed fields.

    Args:
        temperature_c:      Air temperature (°C).
        pressure_hpa:       Atmospheric pressure (hPa).
        wind_speed_ms:      Wind speed (m/s).
        wind_direction_deg: Wind direction (degrees) or None.
        precipitation_mm:   Precipitation (mm) or None.
        hour:               Local hour of day, 0–23.
        day_of_year:        1–366.
        moon_phase:         0.0 new moon, 0.5 full moon.
        latitude:           Degrees; negative for the southern hemisphere.
        cloud_cover:        Fraction 0–1 or None.
        humidity:           Percent 0–100 or None.

    Returns:
        Frozen ``FeatureSnapshot``.
    """
    return FeatureSnapshot(
        temperature_c=temperature_c,
        pressure_hpa=pressure_hpa,
        wind_speed_ms=wind_speed_ms,
        wind_direction_deg=wind_direction_deg,
        precipitation_mm=precipitation_mm,
        hour=hour,
        day_of_year=day_of_year,
        moon_phase=moon_phase,
        moon_illumination=moon_illumination(moon_phase),
        latitude=latitude,
        season_factor=season_factor(day_of_year, latitude),
        time_category=time_category(hour),
        cloud_cover=cloud_cover,
        humidity=humidity,
    )


def build_features_at(
    observed_at: datetime,
    temperature_c: float,
    pressure_hpa: float,
    wind_speed_ms: float,
    latitude: float,
    wind_direction_deg: Optional[float] = None,
    precipitation_mm: Optional[float] = None,
    cloud_cover: Optional[float] = None,
    humidity: Optional[float] = None,
) -> FeatureSnapshot:
    """Build a snapshot for a point in time.

    ``hour`` and ``day_of_year`` are taken from ``observed_at`` as given (pass
    a local-time datetime to get local hours); the moon phase is computed in
    UTC.  Naive datetimes are treated as UTC.
    """
    if observed_at.tzinfo is None:
        observed_at = observed_at.replace(tzinfo=timezone.utc)

    return build_features(
        temperature_c=temperature_c,
        pressure_hpa=pressure_hpa,
        wind_speed_ms=wind_speed_ms,
        wind_direction_deg=wind_direction_deg,
        precipitation_mm=precipitation_mm,
        hour=observed_at.hour,
        day_of_year=observed_at.timetuple().tm_yday,
        moon_phase=moon_phase(observed_at),
        latitude=latitude,
        cloud_cover=cloud_cover,
        humidity=humidity,
    )
