"""
Tests for bite_forecaster/service.py.

What we test
------------
ForecastService:
  - No retrain until the sample count reaches a multiple of retrain_every.
  - A batch crossing one or more boundaries retrains exactly once.
  - retrain_every = 0 never retrains automatically.
  - copy_on_write retrains by swapping in a new model object.
  - predict / predict_detailed / stats delegate to the registry.

build_service():
  - Model hyperparameters and retraining policy come from AppConfig.
"""

from __future__ import annotations

import pytest

from bite_forecaster.config import AppConfig, ModelConfig, TrainingConfig
from bite_forecaster.ml.model import BiteModel
from bite_forecaster.ml.registry import ModelRegistry
from bite_forecaster.service import ForecastService, build_service


@pytest.fixture
def service(registry: ModelRegistry) -> ForecastService:
    return ForecastService(registry, retrain_every=3)


class TestRetrainPolicy:
    def test_retrains_on_boundary(self, service, good_snapshot, make_sample):
        sample = make_sample(good_snapshot, bite_intensity=0.0)
        assert service.record_sample(sample) is None
        assert service.record_sample(sample) is None
        summary = service.record_sample(sample)
        assert summary is not None
        assert summary.n_samples == 3

    def test_batch_crossing_retrains_once(self, service, good_snapshot, make_sample, monkeypatch):
        calls = []
        real_train = ModelRegistry.train

        def counting_train(self):
            calls.append(1)
            return real_train(self)

        monkeypatch.setattr(ModelRegistry, "train", counting_train)
        summary = service.record_samples([make_sample(good_snapshot)] * 7)

        assert summary is not None
        assert len(calls) == 1
        assert service.record_samples([make_sample(good_snapshot)]) is None
        assert len(calls) == 1

    def test_empty_batch(self, service):
        assert service.record_samples([]) is None
        assert service.stats().n_samples == 0

    def test_zero_disables(self, registry, good_snapshot, make_sample):
        service = ForecastService(registry, retrain_every=0)
        before = service.predict(good_snapshot)
        assert service.record_samples([make_sample(good_snapshot, bite_intensity=0.0)] * 50) is None
        assert service.predict(good_snapshot) == before
        assert service.stats().n_samples == 50

    def test_copy_on_write_swaps_model(self, registry, good_snapshot, make_sample):
        service = ForecastService(registry, retrain_every=2, copy_on_write=True)
        with registry.read() as model:
            original = model
        service.record_samples([make_sample(good_snapshot, bite_intensity=0.0)] * 2)
        with registry.read() as model:
            assert model is not original
            assert model.n_samples == 2

    def test_manual_retrain(self, service, good_snapshot, make_sample):
        before = service.predict(good_snapshot)
        service.record_sample(make_sample(good_snapshot, bite_intensity=0.0))
        assert service.retrain() is not None
        assert service.predict(good_snapshot) < before


class TestReadDelegation:
    def test_predict_detailed(self, service, good_snapshot):
        result = service.predict_detailed(good_snapshot)
        assert result.probability == service.predict(good_snapshot)
        assert result.probability == BiteModel().predict(good_snapshot)


class TestBuildService:
    def test_from_config(self, good_snapshot):
        config = AppConfig(
            model=ModelConfig(n_iterations=5, learning_rate=0.3, max_samples=20),
            training=TrainingConfig(retrain_every=7, copy_on_write=True),
        )
        service = build_service(config)

        assert service.retrain_every == 7
        assert service.copy_on_write is True
        stats = service.stats()
        assert stats.n_iterations == 5
        assert stats.learning_rate == 0.3
        with service.registry.read() as model:
            assert model.max_samples == 20
