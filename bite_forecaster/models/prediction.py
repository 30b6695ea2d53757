"""
Model outputs: detailed predictions, training statistics, feature importance.

``PredictionResult`` is the user-facing breakdown returned by
``predict_detailed()``.  Its factor scores are display values and are NOT the
numbers that went into the probability (see ``bite_forecaster.ml.explain``).

All models are frozen.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from bite_forecaster.ml.model import BiteModel
    from bite_forecaster.ml.weights import ModelWeights


class Recommendation(StrEnum):
    """Qualitative bucket for a bite probability."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    AVOID = "Avoid"

    @classmethod
    def from_probability(cls, probability: float) -> "Recommendation":
        """Bucket a probability: ≥0.8, ≥0.6, ≥0.4, ≥0.2, else Avoid."""
        if probability >= 0.8:
            return cls.EXCELLENT
        if probability >= 0.6:
            return cls.GOOD
        if probability >= 0.4:
            return cls.MODERATE
        if probability >= 0.2:
            return cls.POOR
        return cls.AVOID


class FactorScore(BaseModel):
    """One named factor in a prediction breakdown."""

    model_config = ConfigDict(frozen=True)

    name: str
    score: float
    impact: str


class PredictionResult(BaseModel):
    """Bite probability plus a human-readable explanation.

    Attributes:
        probability: Model output in (0, 1).
        confidence: Heuristic confidence, 0.5–0.9, growing with sample count.
        factors: Per-factor display scores and qualitative labels.
        best_time: Short advice on when to fish.
        recommendation: Bucketed probability.
    """

    model_config = ConfigDict(frozen=True)

    probability: float
    confidence: float
    factors: list[FactorScore]
    best_time: str
    recommendation: Recommendation


class ModelStats(BaseModel):
    """Summary of a model's training state."""

    model_config = ConfigDict(frozen=True)

    n_samples: int
    n_iterations: int
    learning_rate: float
    avg_prediction: float


class FeatureImportance(BaseModel):
    """Share of each factor in the total weight mass of a model.

    Every weight and penalty coefficient, plus the bias, is divided by their
    sum.  The shares are a rough indicator only: the bias can go negative
    during training, which can push individual shares above 1.0.
    """

    model_config = ConfigDict(frozen=True)

    temperature: float
    pressure: float
    wind: float
    time_of_day: float
    moon_phase: float
    season: float
    precipitation: float
    cloud_cover: float

    @classmethod
    def from_weights(cls, weights: "ModelWeights") -> "FeatureImportance":
        """Normalize a weight set.

        Raises:
            ValueError: If the weights sum to exactly zero.
        """
        total = (
            weights.temp_weight
            + weights.pressure_weight
            + weights.wind_weight
            + weights.morning_weight
            + weights.evening_weight
            + weights.moon_weight
            + weights.season_weight
            + weights.rain_penalty
            + weights.cloud_penalty
            + weights.bias
        )
        if total == 0.0:
            raise ValueError("Cannot normalize feature importance: weights sum to zero.")

        return cls(
            temperature=weights.temp_weight / total,
            pressure=weights.pressure_weight / total,
            wind=weights.wind_weight / total,
            time_of_day=(weights.morning_weight + weights.evening_weight) / total,
            moon_phase=weights.moon_weight / total,
            season=weights.season_weight / total,
            precipitation=weights.rain_penalty / total,
            cloud_cover=weights.cloud_penalty / total,
        )

    @classmethod
    def from_model(cls, model: "BiteModel") -> "FeatureImportance":
        return cls.from_weights(model.weights)
