"""One classifier per target, created on first use."""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging
import threading

from knnblocks.models.coordinator import PredictionCoordinator
from knnblocks.models.knn import NearestNeighborBackend, NumpyKNN
from knnblocks.models.store import LabeledExampleStore
from knnblocks.ops.metrics import MetricsRecorder

logger = logging.getLogger(__name__)


@dataclass
class ClassifierEntry:
    entity_id: str
    store: LabeledExampleStore
    coordinator: PredictionCoordinator


class ClassifierRegistry:
    """
    Arena of classifiers keyed by target id.

    ``store_for`` always returns the same entry for an id, so a target's
    examples and last prediction are never shared with another target.
    Entries live until the host tears the registry down.
    """

    def __init__(
        self,
        backend_factory: Optional[Callable[[], NearestNeighborBackend]] = None,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self._backend_factory = backend_factory or NumpyKNN
        self._metrics = metrics
        self._entries: Dict[str, ClassifierEntry] = {}
        self._lock = threading.Lock()

    def store_for(self, entity_id: str) -> ClassifierEntry:
        entity_id = str(entity_id)
        with self._lock:
            entry = self._entries.get(entity_id)
            if entry is None:
                store = LabeledExampleStore()
                coordinator = PredictionCoordinator(
                    store,
                    backend=self._backend_factory(),
                    metrics=self._metrics,
                )
                entry = ClassifierEntry(entity_id=entity_id, store=store, coordinator=coordinator)
                self._entries[entity_id] = entry
                logger.debug("Created classifier for target %s", entity_id)
            return entry

    def get(self, entity_id: str) -> Optional[ClassifierEntry]:
        with self._lock:
            return self._entries.get(str(entity_id))

    def entity_ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, entity_id: object) -> bool:
        with self._lock:
            return str(entity_id) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
