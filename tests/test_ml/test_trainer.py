"""
Tests for bite_forecaster/ml/trainer.py.

What we test
------------
train():
  - Empty sample set: returns None, logs a warning, weights untouched.
  - One iteration on one sample matches the hand-computed update.
  - Samples sitting exactly on the reference values move only the bias.
  - Trainable weights always end inside their clamp ranges.
  - Non-trainable weights are never changed.
  - TrainingSummary reports sample/iteration counts and MAE.

Convergence is deliberately NOT asserted; the update rule does not promise
a monotone error decrease.
"""

from __future__ import annotations

import logging
import random

import pytest

from bite_forecaster.features.builder import build_features
from bite_forecaster.ml.scoring import predict
from bite_forecaster.ml.trainer import TrainingSummary, mean_absolute_error, train
from bite_forecaster.ml.weights import (
    PRESSURE_WEIGHT_RANGE,
    TEMP_WEIGHT_RANGE,
    WIND_WEIGHT_RANGE,
    ModelWeights,
)
from bite_forecaster.models.snapshot import TrainingSample


def _random_samples(seed: int, n: int) -> list[TrainingSample]:
    rng = random.Random(seed)
    samples = []
    for _ in range(n):
        features = build_features(
            temperature_c=rng.uniform(-10.0, 35.0),
            pressure_hpa=rng.uniform(960.0, 1050.0),
            wind_speed_ms=rng.uniform(0.0, 20.0),
            wind_direction_deg=rng.uniform(0.0, 360.0),
            precipitation_mm=rng.choice([None, 0.0, rng.uniform(0.0, 30.0)]),
            hour=rng.randint(0, 23),
            day_of_year=rng.randint(1, 365),
            moon_phase=rng.random(),
            latitude=rng.uniform(-60.0, 60.0),
            cloud_cover=rng.random(),
            humidity=rng.uniform(20.0, 100.0),
        )
        samples.append(
            TrainingSample(
                features=features,
                bite_intensity=rng.random(),
                success_rate=rng.random(),
            )
        )
    return samples


class TestEmptyTraining:
    def test_returns_none_and_leaves_weights(self, caplog):
        weights = ModelWeights()
        before = weights.model_dump()
        with caplog.at_level(logging.WARNING, logger="bite_forecaster.ml.trainer"):
            result = train(weights, [], n_iterations=100, learning_rate=0.1)
        assert result is None
        assert weights.model_dump() == before
        assert "No training samples" in caplog.text


class TestUpdateRule:
    def test_single_step_on_reference_sample(self, good_snapshot, make_sample):
        weights = ModelWeights()
        p0 = predict(good_snapshot, weights)
        train(weights, [make_sample(good_snapshot, bite_intensity=0.0)], 1, 0.1)

        assert weights.bias == pytest.approx(0.35 + 0.1 * (0.0 - p0))
        # temperature/pressure/wind sit on the reference values -> zero terms
        assert weights.temp_weight == pytest.approx(0.25)
        assert weights.pressure_weight == pytest.approx(0.20)
        assert weights.wind_weight == pytest.approx(0.10)

    def test_single_step_off_reference(self, bad_snapshot, make_sample):
        weights = ModelWeights()
        p0 = predict(bad_snapshot, weights)
        error = 0.9 - p0
        train(weights, [make_sample(bad_snapshot, bite_intensity=0.9)], 1, 0.01)

        assert weights.bias == pytest.approx(0.35 + 0.01 * error)
        expected_temp = 0.25 + 0.01 * error * (5.0 - 18.0)
        assert weights.temp_weight == pytest.approx(min(0.5, max(0.0, expected_temp)))
        expected_wind = 0.10 + 0.01 * error * (15.0 - 4.0)
        assert weights.wind_weight == pytest.approx(min(0.3, max(0.0, expected_wind)))

    def test_low_labels_pull_bias_down(self, good_snapshot, make_sample):
        weights = ModelWeights()
        samples = [make_sample(good_snapshot, bite_intensity=0.0) for _ in range(5)]
        train(weights, samples, 50, 0.1)
        assert weights.bias < 0.35

    def test_high_labels_push_bias_up(self, bad_snapshot, make_sample):
        weights = ModelWeights()
        samples = [make_sample(bad_snapshot, bite_intensity=1.0) for _ in range(5)]
        train(weights, samples, 10, 0.1)
        assert weights.bias > 0.35

    def test_non_trainable_weights_unchanged(self):
        weights = ModelWeights()
        fixed = {
            k: v for k, v in weights.model_dump().items()
            if k not in {"bias", "temp_weight", "pressure_weight", "wind_weight"}
        }
        train(weights, _random_samples(3, 40), 20, 0.1)
        for key, val in fixed.items():
            assert getattr(weights, key) == val


class TestClamping:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_weights_stay_in_range(self, seed):
        weights = ModelWeights()
        train(weights, _random_samples(seed, 60), 100, 0.1)
        assert TEMP_WEIGHT_RANGE[0] <= weights.temp_weight <= TEMP_WEIGHT_RANGE[1]
        assert PRESSURE_WEIGHT_RANGE[0] <= weights.pressure_weight <= PRESSURE_WEIGHT_RANGE[1]
        assert WIND_WEIGHT_RANGE[0] <= weights.wind_weight <= WIND_WEIGHT_RANGE[1]

    def test_large_offsets_hit_upper_clamp(self, make_sample):
        hot = build_features(38.0, 1013.0, 4.0, None, None, 7, 120, 0.5, 50.0)
        weights = ModelWeights()
        train(weights, [make_sample(hot, bite_intensity=1.0)], 5, 0.5)
        assert weights.temp_weight == TEMP_WEIGHT_RANGE[1]

    def test_large_offsets_hit_lower_clamp(self, make_sample):
        windy = build_features(18.0, 1013.0, 24.0, None, None, 7, 120, 0.5, 50.0)
        weights = ModelWeights()
        train(weights, [make_sample(windy, bite_intensity=0.0)], 5, 0.5)
        assert weights.wind_weight == WIND_WEIGHT_RANGE[0]


class TestSummary:
    def test_summary_fields(self, good_snapshot, make_sample):
        weights = ModelWeights()
        samples = [make_sample(good_snapshot, bite_intensity=0.2)] * 3
        summary = train(weights, samples, 7, 0.1)
        assert isinstance(summary, TrainingSummary)
        assert summary.n_samples == 3
        assert summary.n_iterations == 7
        assert summary.mae_after == pytest.approx(mean_absolute_error(weights, samples))
        assert summary.mae_before >= 0.0

    def test_mean_absolute_error_empty(self):
        assert mean_absolute_error(ModelWeights(), []) == 0.0
