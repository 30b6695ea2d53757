"""
``BiteModel``: one weight set plus the samples it learns from.

The model is created once at process start (``BiteModel.from_config``) and
lives as long as the process; nothing is persisted.  It is NOT thread-safe
on its own; share it through ``bite_forecaster.ml.registry.ModelRegistry``.

Sample retention
----------------
By default the sample history is append-only and unbounded: every sample
ever added stays, so ``n_samples`` equals the cumulative count.  Setting
``max_samples`` turns the history into a ring buffer that keeps only the
newest ``max_samples`` entries; ``n_samples`` then reports what is retained
and ``total_added`` keeps counting.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterable, Optional

from bite_forecaster.ml import explain, scoring, trainer
from bite_forecaster.ml.weights import ModelWeights
from bite_forecaster.models.prediction import ModelStats, PredictionResult
from bite_forecaster.models.snapshot import FeatureSnapshot, TrainingSample

if TYPE_CHECKING:
    from bite_forecaster.config import ModelConfig


class BiteModel:
    """Scoring weights, hyperparameters and accumulated training samples."""

    def __init__(
        self,
        weights: Optional[ModelWeights] = None,
        n_iterations: int = 100,
        learning_rate: float = 0.1,
        max_samples: Optional[int] = None,
    ) -> None:
        self.weights = weights if weights is not None else ModelWeights()
        self.n_iterations = n_iterations
        self.learning_rate = learning_rate
        self.max_samples = max_samples
        self._samples: deque[TrainingSample] = deque(maxlen=max_samples)
        self._total_added = 0

    @classmethod
    def from_config(cls, config: "ModelConfig") -> "BiteModel":
        return cls(
            weights=ModelWeights.from_config(config.weights),
            n_iterations=config.n_iterations,
            learning_rate=config.learning_rate,
            max_samples=config.max_samples,
        )

    # ── Samples ──────────────────────────────────────────────────────────────

    @property
    def samples(self) -> tuple[TrainingSample, ...]:
        return tuple(self._samples)

    @property
    def n_samples(self) -> int:
        return len(self._samples)

    @property
    def total_added(self) -> int:
        """Samples ever added, including any dropped by ``max_samples``."""
        return self._total_added

    def add_sample(self, sample: TrainingSample) -> None:
        self._samples.append(sample)
        self._total_added += 1

    def add_samples(self, samples: Iterable[TrainingSample]) -> None:
        for sample in samples:
            self.add_sample(sample)

    # ── Inference / training ─────────────────────────────────────────────────

    def predict(self, snapshot: FeatureSnapshot) -> float:
        return scoring.predict(snapshot, self.weights)

    def predict_detailed(self, snapshot: FeatureSnapshot) -> PredictionResult:
        return explain.predict_detailed(snapshot, self.weights, self.n_samples)

    def train(self) -> Optional[trainer.TrainingSummary]:
        """Run the batch update over every retained sample.

        Returns ``None`` (and changes nothing) when there are no samples.
        """
        return trainer.train(
            self.weights,
            self._samples,
            n_iterations=self.n_iterations,
            learning_rate=self.learning_rate,
        )

    def get_stats(self) -> ModelStats:
        n = self.n_samples
        if n:
            avg = sum(self.predict(s.features) for s in self._samples) / n
        else:
            avg = 0.0
        return ModelStats(
            n_samples=n,
            n_iterations=self.n_iterations,
            learning_rate=self.learning_rate,
            avg_prediction=avg,
        )

    def copy(self) -> "BiteModel":
        """Independent copy: own weights, own sample buffer (samples are shared, frozen)."""
        clone = BiteModel(
            weights=self.weights.model_copy(),
            n_iterations=self.n_iterations,
            learning_rate=self.learning_rate,
            max_samples=self.max_samples,
        )
        clone._samples.extend(self._samples)
        clone._total_added = self._total_added
        return clone
