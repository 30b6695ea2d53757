"""
Tests for bite_forecaster/models/snapshot.py and prediction.py.

What we test
------------
FeatureSnapshot:
  - Frozen: attribute assignment raises.
  - Optional fields default to None.
  - Out-of-range and NaN values are accepted as-is.

TrainingSample:
  - Labels outside [0, 1] are rejected.
  - Boundary labels 0.0 and 1.0 are accepted.
  - Round-trips through JSON (the CLI's sample file format).

PredictionResult:
  - Recommendation serializes to its display string.
"""

from __future__ import annotations

import math

import pytest
from pydantic import TypeAdapter, ValidationError

from bite_forecaster.models.prediction import FactorScore, PredictionResult, Recommendation
from bite_forecaster.models.snapshot import FeatureSnapshot, TrainingSample


class TestFeatureSnapshot:
    def test_frozen(self, good_snapshot):
        with pytest.raises(ValidationError):
            good_snapshot.temperature_c = 30.0

    def test_optional_fields_default_none(self):
        snap = FeatureSnapshot(
            temperature_c=10.0, pressure_hpa=1000.0, wind_speed_ms=2.0,
            hour=6, day_of_year=200, moon_phase=0.1, moon_illumination=0.1,
            latitude=40.0, season_factor=0.9, time_category=1,
        )
        assert snap.wind_direction_deg is None
        assert snap.precipitation_mm is None
        assert snap.cloud_cover is None
        assert snap.humidity is None

    def test_no_range_validation(self, good_snapshot):
        snap = good_snapshot.model_copy(
            update={"hour": 99, "moon_phase": float("nan"), "cloud_cover": 7.0}
        )
        assert snap.hour == 99
        assert math.isnan(snap.moon_phase)


class TestTrainingSample:
    @pytest.mark.parametrize("field", ["bite_intensity", "success_rate"])
    @pytest.mark.parametrize("value", [-0.01, 1.01])
    def test_label_out_of_range_rejected(self, good_snapshot, field, value):
        kwargs = {"features": good_snapshot, "bite_intensity": 0.5, "success_rate": 0.5}
        kwargs[field] = value
        with pytest.raises(ValidationError, match=r"\[0.0, 1.0\]"):
            TrainingSample(**kwargs)

    @pytest.mark.parametrize("value", [0.0, 1.0])
    def test_boundaries_accepted(self, good_snapshot, value):
        sample = TrainingSample(features=good_snapshot, bite_intensity=value, success_rate=value)
        assert sample.bite_intensity == value

    def test_json_list_round_trip(self, good_snapshot, bad_snapshot, make_sample):
        adapter = TypeAdapter(list[TrainingSample])
        samples = [make_sample(good_snapshot, 0.8), make_sample(bad_snapshot, 0.1)]
        restored = adapter.validate_json(adapter.dump_json(samples))
        assert restored == samples


class TestPredictionResult:
    def test_recommendation_serializes_as_text(self):
        result = PredictionResult(
            probability=0.7,
            confidence=0.5,
            factors=[FactorScore(name="Wind", score=1.0, impact="Light breeze")],
            best_time="Best in 1-2 hours",
            recommendation=Recommendation.GOOD,
        )
        assert result.model_dump(mode="json")["recommendation"] == "Good"
