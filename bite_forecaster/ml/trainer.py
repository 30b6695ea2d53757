"""
Batch weight update over accumulated training samples.

Each of the ``n_iterations`` passes walks every sample once:

    error_i = bite_intensity_i - predict(features_i)

and accumulates four sums:

    bias      Σ error_i
    temp      Σ error_i · (temperature_i - temp_threshold)
    pressure  Σ error_i · (pressure_i - pressure_optimal)
    wind      Σ error_i · (wind_speed_i - wind_optimal)

After the pass every target moves by ``learning_rate · mean(sum)`` and the
three coefficients are clamped back into their safe ranges
(``ModelWeights.clamp_trainable``).  The bias is not clamped.

Caveat
------
This is a perceptron-style coordinate nudge, not the gradient of any
particular loss: the coefficient terms use raw feature offsets instead of the
derivative of the clamped distance scores.  Mean error is NOT guaranteed to
go down pass over pass.  Only the clamp ranges are guaranteed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from bite_forecaster.ml.scoring import predict
from bite_forecaster.ml.weights import ModelWeights
from bite_forecaster.models.snapshot import TrainingSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingSummary:
    """Outcome of one ``train()`` call.

    Attributes:
        n_samples:       Samples used in every pass.
        n_iterations:    Passes performed.
        mae_before:      Mean |bite_intensity - prediction| before training.
        mae_after:       Same metric after the last pass.
    """

    n_samples:    int
    n_iterations: int
    mae_before:   float
    mae_after:    float


def mean_absolute_error(weights: ModelWeights, samples: Sequence[TrainingSample]) -> float:
    """Mean |bite_intensity - prediction| over ``samples`` (0.0 when empty)."""
    if not samples:
        return 0.0
    total = sum(abs(s.bite_intensity - predict(s.features, weights)) for s in samples)
    return total / len(samples)


def train(
    weights: ModelWeights,
    samples: Sequence[TrainingSample],
    n_iterations: int,
    learning_rate: float,
) -> TrainingSummary | None:
    """Update ``weights`` in place from ``samples``.

    Args:
        weights:       Weight set to mutate.
        samples:       Labeled samples; read only.
        n_iterations:  Number of full passes over ``samples``.
        learning_rate: Step size applied to every mean update.

    Returns:
        A ``TrainingSummary``, or ``None`` when ``samples`` is empty (a
        warning is logged and ``weights`` is left untouched).
    """
    n = len(samples)
    if n == 0:
        logger.warning("No training samples available; skipping training.")
        return None

    mae_before = mean_absolute_error(weights, samples)

    for _ in range(n_iterations):
        error_sum = 0.0
        temp_sum = 0.0
        pressure_sum = 0.0
        wind_sum = 0.0

        for sample in samples:
            features = sample.features
            error = sample.bite_intensity - predict(features, weights)
            error_sum += error
            temp_sum += error * (features.temperature_c - weights.temp_threshold)
            pressure_sum += error * (features.pressure_hpa - weights.pressure_optimal)
            wind_sum += error * (features.wind_speed_ms - weights.wind_optimal)

        weights.bias += learning_rate * error_sum / n
        weights.temp_weight += learning_rate * temp_sum / n
        weights.pressure_weight += learning_rate * pressure_sum / n
        weights.wind_weight += learning_rate * wind_sum / n
        weights.clamp_trainable()

    summary = TrainingSummary(
        n_samples=n,
        n_iterations=n_iterations,
        mae_before=mae_before,
        mae_after=mean_absolute_error(weights, samples),
    )
    logger.info(
        "Model trained on %d samples (%d iterations): MAE %.4f -> %.4f",
        n, n_iterations, summary.mae_before, summary.mae_after,
        extra={
            "n_samples": n,
            "n_iterations": n_iterations,
            "mae_before": round(summary.mae_before, 6),
            "mae_after": round(summary.mae_after, 6),
        },
    )
    logger.debug(
        "Weights after training: bias=%.4f temp=%.4f pressure=%.4f wind=%.4f",
        weights.bias, weights.temp_weight, weights.pressure_weight, weights.wind_weight,
    )
    return summary
