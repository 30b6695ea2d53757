"""
Forecast service: the shared handle request handlers are given.

``build_service(config)`` constructs a ``ModelRegistry`` around a fresh
``BiteModel`` and wraps it with the application's retraining policy: after
every ``retrain_every``-th recorded sample the model is retrained (in place
or copy-on-write, per ``TrainingConfig.copy_on_write``).

Construct it once at startup and pass it to whatever needs it; nothing in
this package keeps a global instance.

Usage::

    service = build_service(load_config())
    probability = service.predict(snapshot)
    service.record_sample(sample)   # may trigger a retrain
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from bite_forecaster.config import AppConfig
from bite_forecaster.ml.model import BiteModel
from bite_forecaster.ml.registry import ModelRegistry
from bite_forecaster.ml.trainer import TrainingSummary
from bite_forecaster.models.prediction import ModelStats, PredictionResult
from bite_forecaster.models.snapshot import FeatureSnapshot, TrainingSample

logger = logging.getLogger(__name__)


class ForecastService:
    """Prediction and sample intake on top of a ``ModelRegistry``.

    Args:
        registry:      Registry holding the shared model.
        retrain_every: Retrain after every N recorded samples; 0 disables.
        copy_on_write: Train a private copy and swap it in instead of
                       training under the write lock.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        retrain_every: int = 100,
        copy_on_write: bool = False,
    ) -> None:
        self.registry = registry
        self.retrain_every = retrain_every
        self.copy_on_write = copy_on_write

    def predict(self, snapshot: FeatureSnapshot) -> float:
        return self.registry.predict(snapshot)

    def predict_detailed(self, snapshot: FeatureSnapshot) -> PredictionResult:
        return self.registry.predict_detailed(snapshot)

    def stats(self) -> ModelStats:
        return self.registry.get_stats()

    def record_sample(self, sample: TrainingSample) -> Optional[TrainingSummary]:
        """Store one sample; retrain if it completes a batch of ``retrain_every``."""
        return self.record_samples([sample])

    def record_samples(self, samples: Iterable[TrainingSample]) -> Optional[TrainingSummary]:
        """Store samples; retrain once if the batch crossed a retrain boundary."""
        batch = list(samples)
        if not batch:
            return None

        total = self.registry.add_samples(batch)
        if not self._crossed_boundary(total - len(batch), total):
            return None

        logger.info("Sample count reached %d; retraining.", total)
        return self.retrain()

    def retrain(self) -> Optional[TrainingSummary]:
        if self.copy_on_write:
            return self.registry.train_copy_on_write()
        return self.registry.train()

    def _crossed_boundary(self, before: int, after: int) -> bool:
        if self.retrain_every <= 0:
            return False
        return after // self.retrain_every > before // self.retrain_every


def build_service(config: AppConfig) -> ForecastService:
    """Create the registry and service described by ``config``."""
    registry = ModelRegistry(BiteModel.from_config(config.model))
    return ForecastService(
        registry,
        retrain_every=config.training.retrain_every,
        copy_on_write=config.training.copy_on_write,
    )
