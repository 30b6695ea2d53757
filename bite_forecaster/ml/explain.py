"""
Detailed, user-facing prediction breakdown.

``predict_detailed()`` returns the real probability from
``bite_forecaster.ml.scoring`` plus six display factors.  The factor scores
are recomputed here for display and are not all the numbers the probability
was built from:

- Temperature / Pressure / Wind: the same distance scores as the model.
- Moon Phase: ``1 - moon_distance`` (unweighted).
- Time of Day: the configured morning/evening weight divided by its default
  value (0.15 / 0.12), or 0.3 for midday and 0.1 for night, clamped to
  [0, 1].  The model itself adds the raw weight (or 0.05 / 0.02).
- Precipitation: ``1 - 2·rain_penalty`` whenever precipitation > 0.5 mm,
  regardless of the amount.

Keep the two time-of-day formulas separate; the displayed number is meant to
read on a 0–1 scale while the model term stays small.
"""

from __future__ import annotations

from bite_forecaster.ml.scoring import (
    RAIN_THRESHOLD_MM,
    moon_distance,
    predict,
    pressure_score,
    temperature_score,
    wind_score,
)
from bite_forecaster.ml.weights import ModelWeights
from bite_forecaster.models.prediction import FactorScore, PredictionResult, Recommendation
from bite_forecaster.models.snapshot import TIME_DAY, TIME_EVENING, TIME_MORNING, FeatureSnapshot

# Default morning/evening weights; the displayed time score is relative to them.
_MORNING_REFERENCE = 0.15
_EVENING_REFERENCE = 0.12
_MIDDAY_DISPLAY_SCORE = 0.3
_NIGHT_DISPLAY_SCORE = 0.1

_TIME_LABELS: dict[int, str] = {
    TIME_MORNING: "Morning (dawn)",
    TIME_EVENING: "Evening (dusk)",
    TIME_DAY:     "Midday",
}

# Confidence grows by 0.1 per 100 samples and caps at 0.9.
_BASE_CONFIDENCE = 0.5
_MAX_CONFIDENCE_GAIN = 0.4
_SAMPLES_FOR_FULL_GAIN = 1000.0


def predict_detailed(
    snapshot: FeatureSnapshot,
    weights: ModelWeights,
    n_samples: int,
) -> PredictionResult:
    """Probability, confidence, factor breakdown and advice for one snapshot.

    Args:
        snapshot:  Conditions to score.
        weights:   Current model weights.
        n_samples: Number of training samples the model holds (drives
                   confidence only).
    """
    probability = predict(snapshot, weights)

    return PredictionResult(
        probability=probability,
        confidence=confidence_for(n_samples),
        factors=_factor_scores(snapshot, weights),
        best_time=best_time_for(snapshot.hour),
        recommendation=Recommendation.from_probability(probability),
    )


def confidence_for(n_samples: int) -> float:
    gain = max(0.0, min(_MAX_CONFIDENCE_GAIN, n_samples / _SAMPLES_FOR_FULL_GAIN))
    return _BASE_CONFIDENCE + gain


def best_time_for(hour: int) -> str:
    """Coarse fishing-time advice for the current hour."""
    if 5 <= hour <= 9:
        return "Now - Morning bite is active"
    if 17 <= hour <= 21:
        return "Now - Evening bite is active"
    if 10 <= hour <= 15:
        return "Best in 1-2 hours"
    return "Early morning or late evening recommended"


def display_time_score(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    if snapshot.time_category == TIME_MORNING:
        score = weights.morning_weight / _MORNING_REFERENCE
    elif snapshot.time_category == TIME_EVENING:
        score = weights.evening_weight / _EVENING_REFERENCE
    elif snapshot.time_category == TIME_DAY:
        score = _MIDDAY_DISPLAY_SCORE
    else:
        score = _NIGHT_DISPLAY_SCORE
    return max(0.0, min(1.0, score))


def display_rain_penalty(snapshot: FeatureSnapshot, weights: ModelWeights) -> float:
    if (snapshot.precipitation_mm or 0.0) > RAIN_THRESHOLD_MM:
        return weights.rain_penalty * 2.0
    return 0.0


def _tier(score: float, high: str, mid: str, low: str) -> str:
    if score > 0.7:
        return high
    if score > 0.4:
        return mid
    return low


def _moon_label(distance: float) -> str:
    if distance < 0.1:
        return "New/Full Moon"
    if distance < 0.3:
        return "Near peak"
    return "Off peak"


def _rain_label(penalty: float) -> str:
    if penalty < 0.05:
        return "Dry"
    if penalty < 0.15:
        return "Light rain"
    return "Heavy rain"


def _factor_scores(snapshot: FeatureSnapshot, weights: ModelWeights) -> list[FactorScore]:
    temp = temperature_score(snapshot, weights)
    pressure = pressure_score(snapshot, weights)
    wind = wind_score(snapshot, weights)
    moon_dist = moon_distance(snapshot.moon_phase)
    rain = display_rain_penalty(snapshot, weights)

    return [
        FactorScore(name="Temperature", score=temp,
                    impact=_tier(temp, "Excellent", "Good", "Poor")),
        FactorScore(name="Pressure", score=pressure,
                    impact=_tier(pressure, "Stable", "Moderate", "Unstable")),
        FactorScore(name="Wind", score=wind,
                    impact=_tier(wind, "Light breeze", "Moderate", "Strong")),
        FactorScore(name="Moon Phase", score=1.0 - moon_dist,
                    impact=_moon_label(moon_dist)),
        FactorScore(name="Time of Day", score=display_time_score(snapshot, weights),
                    impact=_TIME_LABELS.get(snapshot.time_category, "Night")),
        FactorScore(name="Precipitation", score=1.0 - rain,
                    impact=_rain_label(rain)),
    ]
