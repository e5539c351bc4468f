"""Single-flight classification for one classifier.

Blocks run on a cooperative scheduler: a "predict" block may be started
again while its previous request is still awaiting the backend. Such a
request yields to the scheduler and comes back ``DEFERRED`` so the
caller can retry on a later tick; it never reaches the backend.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, Union
import asyncio
import inspect
import logging
import math
import numbers
import time

from knnblocks.exceptions import (
    ClassificationError,
    EmptyInputError,
    InvalidKError,
    NoExamplesError,
)
from knnblocks.models.knn import NearestNeighborBackend, NumpyKNN, PredictionResult
from knnblocks.models.store import LabeledExampleStore
from knnblocks.ops.metrics import MetricsRecorder, get_metrics_recorder

logger = logging.getLogger(__name__)

YieldFn = Callable[[], Union[None, Awaitable[Any]]]


class PredictionState(Enum):
    IDLE = "idle"
    PREDICTING = "predicting"


class OutcomeStatus(Enum):
    COMPLETED = "completed"
    DEFERRED = "deferred"
    FAILED = "failed"


@dataclass(frozen=True)
class ClassifyOutcome:
    status: OutcomeStatus
    result: Optional[PredictionResult] = None
    error: Optional[ClassificationError] = None

    @classmethod
    def completed(cls, result: PredictionResult) -> "ClassifyOutcome":
        return cls(OutcomeStatus.COMPLETED, result=result)

    @classmethod
    def deferred(cls) -> "ClassifyOutcome":
        return cls(OutcomeStatus.DEFERRED)

    @classmethod
    def failed(cls, error: ClassificationError) -> "ClassifyOutcome":
        return cls(OutcomeStatus.FAILED, error=error)

    @property
    def is_completed(self) -> bool:
        return self.status is OutcomeStatus.COMPLETED

    @property
    def is_deferred(self) -> bool:
        return self.status is OutcomeStatus.DEFERRED


async def _yield_to_scheduler(yield_fn: Optional[YieldFn]) -> None:
    if yield_fn is None:
        await asyncio.sleep(0)
        return
    pending = yield_fn()
    if inspect.isawaitable(pending):
        await pending


class PredictionCoordinator:
    def __init__(
        self,
        store: LabeledExampleStore,
        backend: Optional[NearestNeighborBackend] = None,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self._store = store
        self._backend = backend or NumpyKNN()
        self._metrics = metrics or get_metrics_recorder()
        self._state = PredictionState.IDLE
        self._last_prediction: Optional[PredictionResult] = None

    @property
    def state(self) -> PredictionState:
        return self._state

    @property
    def is_predicting(self) -> bool:
        return self._state is PredictionState.PREDICTING

    @property
    def last_prediction(self) -> Optional[PredictionResult]:
        return self._last_prediction

    def confidence_for(self, label: str) -> float:
        if self._last_prediction is None:
            return 0.0
        return self._last_prediction.confidence_for(label)

    def check_request(self, vector: Sequence[float], k: float) -> None:
        """Raise the precondition error for a request that cannot run."""
        if len(vector) == 0:
            raise EmptyInputError()
        if self._store.label_count() == 0:
            raise NoExamplesError()
        if not isinstance(k, numbers.Real) or isinstance(k, bool):
            raise InvalidKError(k)
        if not k >= 1 or math.isinf(k):
            raise InvalidKError(k)

    async def classify(
        self,
        vector: Sequence[float],
        k: float,
        yield_fn: Optional[YieldFn] = None,
    ) -> ClassifyOutcome:
        self.check_request(vector, k)

        if self._state is PredictionState.PREDICTING:
            logger.debug("Prediction already in flight; deferring request")
            self._metrics.increment("predictions_deferred")
            await _yield_to_scheduler(yield_fn)
            return ClassifyOutcome.deferred()

        self._state = PredictionState.PREDICTING
        started = time.monotonic()
        try:
            result = await self._backend.predict(self._store.to_arrays(), list(vector), int(k))
        except ClassificationError as exc:
            logger.warning("Prediction error: %s", exc)
            self._metrics.increment("predictions_failed")
            return ClassifyOutcome.failed(exc)
        except Exception as exc:
            error = ClassificationError("backend raised an error", original_error=exc)
            logger.warning("Prediction error: %s", error)
            self._metrics.increment("predictions_failed")
            return ClassifyOutcome.failed(error)
        finally:
            self._state = PredictionState.IDLE
            self._metrics.timing("prediction", (time.monotonic() - started) * 1000.0)

        self._last_prediction = result
        self._metrics.increment("predictions_completed")
        return ClassifyOutcome.completed(result)
