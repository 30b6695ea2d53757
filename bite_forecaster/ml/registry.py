"""
Thread-safe holder for the single shared ``BiteModel``.

Predictions take a shared read lock, so any number of them run side by side.
Training, sample appends and ``replace()`` take the exclusive write lock and
wait until every reader has left.  The lock prefers writers: once a writer is
waiting, new readers queue behind it, so a steady stream of predictions
cannot starve training.

A long in-place ``train()`` blocks every prediction for its whole duration
(iterations × samples).  ``train_copy_on_write()`` avoids that by training a
private copy without holding any lock and only taking the write lock for the
final swap.

The registry is an ordinary object.  Build one at startup and hand it to
whatever serves requests (see ``bite_forecaster.service``); there is no
module-level instance.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from bite_forecaster.ml.model import BiteModel
from bite_forecaster.ml.trainer import TrainingSummary
from bite_forecaster.models.prediction import FeatureImportance, ModelStats, PredictionResult
from bite_forecaster.models.snapshot import FeatureSnapshot, TrainingSample

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Writer-preferring reader/writer lock.  Not reentrant."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        with self._cond:
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ModelRegistry:
    """Shared access point for one ``BiteModel``."""

    def __init__(self, model: Optional[BiteModel] = None) -> None:
        self._model = model if model is not None else BiteModel()
        self._lock = ReadWriteLock()

    # ── Raw access ───────────────────────────────────────────────────────────

    @contextmanager
    def read(self) -> Iterator[BiteModel]:
        """Yield the model under the shared lock.  Do not mutate it."""
        with self._lock.read_locked():
            yield self._model

    @contextmanager
    def write(self) -> Iterator[BiteModel]:
        """Yield the model under the exclusive lock."""
        with self._lock.write_locked():
            yield self._model

    def replace(self, model: BiteModel) -> None:
        """Swap in a whole new model."""
        with self._lock.write_locked():
            self._model = model
        logger.info("Model replaced (%d samples).", model.n_samples)

    # ── Read path ────────────────────────────────────────────────────────────

    def predict(self, snapshot: FeatureSnapshot) -> float:
        with self.read() as model:
            return model.predict(snapshot)

    def predict_detailed(self, snapshot: FeatureSnapshot) -> PredictionResult:
        with self.read() as model:
            return model.predict_detailed(snapshot)

    def get_stats(self) -> ModelStats:
        with self.read() as model:
            return model.get_stats()

    def feature_importance(self) -> FeatureImportance:
        with self.read() as model:
            return FeatureImportance.from_model(model)

    # ── Write path ───────────────────────────────────────────────────────────

    def add_sample(self, sample: TrainingSample) -> int:
        """Append one sample; returns the model's ``total_added`` afterwards."""
        with self.write() as model:
            model.add_sample(sample)
            return model.total_added

    def add_samples(self, samples: Iterable[TrainingSample]) -> int:
        """Append samples; returns the model's ``total_added`` afterwards."""
        batch = list(samples)
        with self.write() as model:
            model.add_samples(batch)
            return model.total_added

    def train(self) -> Optional[TrainingSummary]:
        """Train the shared model in place, holding the write lock throughout."""
        with self.write() as model:
            return model.train()

    def train_copy_on_write(self) -> Optional[TrainingSummary]:
        """Train a private copy, then swap it in.

        Samples appended while the copy was training are carried over to the
        new model before the swap, so none are lost.  Weight changes made to
        the live model in the meantime are overwritten.

        If the live model was swapped out while the copy trained (by
        ``replace()`` or another copy-on-write run), the trained copy is
        dropped, a warning is logged and ``None`` is returned.
        """
        with self.read() as model:
            source = model
            candidate = model.copy()
        seen = candidate.total_added

        summary = candidate.train()
        if summary is None:
            return None

        with self.write() as live:
            if live is not source:
                logger.warning(
                    "Model was replaced during copy-on-write training; "
                    "discarding the retrained copy."
                )
                return None
            missed = max(0, live.total_added - seen)
            if missed:
                candidate.add_samples(live.samples[-missed:])
            self._model = candidate

        logger.info("Swapped in retrained model (%d samples carried over).", missed)
        return summary
