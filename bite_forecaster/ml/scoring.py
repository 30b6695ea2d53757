"""
Scoring model: ``FeatureSnapshot`` + ``ModelWeights`` -> bite probability.

Formula
-------
Three distance scores share one shape, ``1 - clamp(|x - ref| / span, 0, 1)``:

    temperature   ref = temp_threshold     span = 20 °C
    pressure      ref = pressure_optimal   span = 50 hPa
    wind          ref = wind_optimal       span = 10 m/s

The remaining terms are already weighted:

    time      morning_weight | evening_weight | 0.05 (day) | 0.02 (night)
    moon      moon_weight · (1 - moon_distance(phase))
    season    season_weight · season_factor
    rain      rain_penalty · clamp(precip / 10, 0, 1)   only when precip > 0.5 mm
    cloud     cloud_penalty · cloud_cover               0 when unknown

    z = bias + temp_weight·temp + pressure_weight·pressure + wind_weight·wind
        + time + moon + season - rain - cloud

    probability = sigmoid(3·z)

The factor 3 is a fixed sharpening constant.  Everything here is a pure
function; no state, no logging.
"""

from __future__ import annotations

import math

from bite_forecaster.ml.weights import ModelWeights
from bite_forecaster.models.snapshot import TIME_DAY, TIME_EVENING, TIME_MORNING, FeatureSnapshot

TEMP_SPAN_C = 20.0
PRESSURE_SPAN_HPA = 50.0
WIND_SPAN_MS = 10.0

DAY_TIME_SCORE = 0.05
NIGHT_TIME_SCORE = 0.02

RAIN_THRESHOLD_MM = 0.5
RAIN_SATURATION_MM = 10.0

SIGMOID_SHARPNESS = 3.0


def distance_score(actual: float, reference: float, span: float) -> float:
    """``1 - clamp(|actual - reference| / span, 0, 1)``."""
    return 1.0 - _clamp(abs(actual - reference) / span, 0.0, 1.0)


def temperature_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return distance_score(snapshot.temperature_c, weights.temp_threshold, TEMP_SPAN_C)


def pressure_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return distance_score(snapshot.pressure_hpa, weights.pressure_optimal, PRESSURE_SPAN_HPA)


def wind_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return distance_score(snapshot.wind_speed_ms, weights.wind_optimal, WIND_SPAN_MS)


def time_of_day_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    if snapshot.time_category == TIME_MORNING:
        return weights.morning_weight
    if snapshot.time_category == TIME_EVENING:
        return weights.evening_weight
    if snapshot.time_category == TIME_DAY:
        return DAY_TIME_SCORE
    return NIGHT_TIME_SCORE


def moon_distance(phase: float) -> float:
    """Phase distance to the nearest of new (0.0), full (0.5) or new (1.0) moon.

    ``moon_distance(0.0) == moon_distance(0.5) == 0.0``; quarters give 0.25.
    """
    to_new = abs(phase)
    to_full = abs(phase - 0.5)
    return min(to_new, to_full, 1.0 - to_new)


def moon_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return weights.moon_weight * (1.0 - moon_distance(snapshot.moon_phase))


def season_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return weights.season_weight * snapshot.season_factor


def rain_penalty(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    precip = snapshot.precipitation_mm or 0.0
    if precip > RAIN_THRESHOLD_MM:
        return weights.rain_penalty * _clamp(precip / RAIN_SATURATION_MM, 0.0, 1.0)
    return 0.0


def cloud_penalty(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    return (snapshot.cloud_cover or 0.0) * weights.cloud_penalty


def linear_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    """The pre-activation value ``z``."""
    return (
        weights.bias
        + weights.temp_weight * temperature_score(snapshot, weights)
        + weights.pressure_weight * pressure_score(snapshot, weights)
        + weights.wind_weight * wind_score(snapshot, weights)
        + time_of_day_score(snapshot, weights)
        + moon_score(snapshot, weights)
        + season_score(snapshot, weights)
        - rain_penalty(snapshot, weights)
        - cloud_penalty(snapshot, weights)
    )


def sigmoid(x: float) -> float:
    """Logistic function, safe against overflow for large negative ``x``."""
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    exp_x = math.exp(x)
    return exp_x / (1.0 + exp_x)


def predict(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    """Bite probability in (0, 1) for one snapshot."""
    return sigmoid(SIGMOID_SHARPNESS * linear_score(snapshot, weights))


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
