"""Block operations for the KNN extension.

Every public method here backs one block. Commands return a short status
message for the user instead of raising; reporters return plain values.
Successful mutations are written back to the target's dataset list
before the method returns.
"""

from typing import Any, Iterable, List, Optional, Union
import json
import logging
import math

from knnblocks.config import Config
from knnblocks.constants import NO_PREDICTION_LABEL
from knnblocks.exceptions import (
    DatasetWriteError,
    EmptyInputError,
    InvalidKError,
    KNNBlocksError,
    NoExamplesError,
)
from knnblocks.models.coordinator import OutcomeStatus, YieldFn
from knnblocks.models.knn import NumpyKNN
from knnblocks.ops.metrics import MetricsRecorder, get_metrics_recorder
from knnblocks.parsing.numeric import as_feature_vector, matrix_from_list, read_as_numeric_array
from knnblocks.runtime.registry import ClassifierEntry, ClassifierRegistry
from knnblocks.storage.codec import SerializedEntry, decode_lines, encode_lines
from knnblocks.storage.lists import Target

logger = logging.getLogger(__name__)


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value
    try:
        number = float(str(value).strip() or 0)
    except (TypeError, ValueError):
        return 0
    return 0 if math.isnan(number) else number


class KNNBlocks:
    def __init__(
        self,
        config: Optional[Config] = None,
        registry: Optional[ClassifierRegistry] = None,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self.config = (config or Config.from_env()).validate()
        self.metrics = metrics or get_metrics_recorder()
        self.registry = registry or ClassifierRegistry(
            backend_factory=lambda: NumpyKNN(self.config.distance_metric),
            metrics=self.metrics,
        )

    def _entry(self, target: Target) -> ClassifierEntry:
        return self.registry.store_for(target.id)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _store_dataset(self, target: Target) -> None:
        if not self.config.persist_on_change:
            return
        name = self.config.dataset_list_name
        if target.lists.lookup(name) is None:
            target.lists.lookup_or_create(self.config.dataset_list_id, name)
            logger.info("Created dataset list %r for target %s", name, target.id)
        lines = encode_lines(self._entry(target).store.to_serialized())
        try:
            target.lists.write(name, lines)
        except OSError as exc:
            self.metrics.increment("dataset_write_failures")
            raise DatasetWriteError(target.id, exc) from exc

    def _read_entries(self, target: Target, list_name: str) -> Optional[List[SerializedEntry]]:
        lines = target.lists.read(list_name)
        if lines is None:
            return None
        return decode_lines(lines)

    def initialize_dataset_from_target(self, target: Target) -> bool:
        """Load the target's persisted dataset list into its classifier."""
        entries = self._read_entries(target, self.config.dataset_list_name)
        if not entries:
            return False
        try:
            self._entry(target).store.load_from_serialized(entries)
        except KNNBlocksError as exc:
            logger.warning("Failed to load dataset for target %s: %s", target.id, exc)
            return False
        logger.info("Loaded %d labels for target %s", self._entry(target).store.label_count(), target.id)
        return True

    def on_project_loaded(self, targets: Iterable[Target]) -> int:
        """Project-load hook: initialize every target. Returns how many loaded."""
        return sum(1 for target in targets if self.initialize_dataset_from_target(target))

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def add_example(self, data: Any, label: Any, target: Target) -> str:
        store = self._entry(target).store
        label = _to_string(label)
        try:
            store.add_example(label, as_feature_vector(read_as_numeric_array(data)))
            self._store_dataset(target)
        except (KNNBlocksError, ValueError) as exc:
            logger.warning("Failed to add example: %s", exc)
            return f"Failed to add example: {exc}"
        self.metrics.increment("examples_added")
        return f'Added example with label: "{label}"'

    def clear_examples(self, label: Any, target: Target) -> str:
        store = self._entry(target).store
        label = _to_string(label)
        try:
            store.clear_label(label)
            self._store_dataset(target)
        except KNNBlocksError as exc:
            logger.warning("Failed to clear examples: %s", exc)
            return f"Failed to clear examples: {exc}"
        logger.info('Cleared examples for label: "%s"', label)
        return f'Cleared examples for label: "{label}"'

    def clear_all_examples(self, target: Target) -> str:
        self._entry(target).store.clear_all()
        try:
            self._store_dataset(target)
        except DatasetWriteError as exc:
            logger.warning("Failed to clear examples: %s", exc)
            return f"Failed to clear examples: {exc}"
        logger.info("Cleared all examples for target %s", target.id)
        return "Cleared all examples"

    def load_dataset_from_list(self, list_name: Any, target: Target) -> str:
        store = self._entry(target).store
        entries = self._read_entries(target, _to_string(list_name)) or []
        try:
            if not entries:
                store.clear_all()
                self._store_dataset(target)
                return "No data found"
            store.load_from_serialized(entries)
            self._store_dataset(target)
        except KNNBlocksError as exc:
            logger.warning("Failed to load dataset: %s", exc)
            return f"Failed to load dataset: {exc}"
        return f"Loaded dataset with {store.label_count()} classes"

    async def predict_class(
        self,
        data: Any,
        k: Any,
        target: Target,
        yield_fn: Optional[YieldFn] = None,
    ) -> Optional[str]:
        """Classify ``data``; returns None when a prediction is already running."""
        coordinator = self._entry(target).coordinator
        try:
            vector = as_feature_vector(read_as_numeric_array(data))
        except ValueError:
            return "Invalid data"
        try:
            outcome = await coordinator.classify(vector, _to_number(k), yield_fn=yield_fn)
        except EmptyInputError:
            return "Invalid data"
        except NoExamplesError:
            return "No examples added"
        except InvalidKError:
            return "Invalid value for k"

        if outcome.status is OutcomeStatus.DEFERRED:
            return None
        if outcome.status is OutcomeStatus.FAILED:
            return f"Prediction error: {outcome.error}"
        result = outcome.result
        return f'Predicted label: "{result.label}" confidence : {result.confidence_for(result.label)}'

    # -------------------------------------------------------------------------
    # Reporters
    # -------------------------------------------------------------------------

    def label(self, target: Target) -> str:
        prediction = self._entry(target).coordinator.last_prediction
        return prediction.label if prediction else NO_PREDICTION_LABEL

    def confidence(self, label: Any, target: Target) -> float:
        return self._entry(target).coordinator.confidence_for(_to_string(label))

    def label_at(self, index: Any, target: Target) -> str:
        labels = self._entry(target).store.labels()
        position = int(_to_number(index)) - 1
        if 0 <= position < len(labels):
            return labels[position]
        return ""

    def size_of_labels(self, target: Target) -> int:
        return self._entry(target).store.label_count()

    def size_of_examples(self, label: Any, target: Target) -> int:
        counts = self._entry(target).store.example_count_per_label()
        return counts.get(_to_string(label), 0)

    def size_of_an_example(self, target: Target) -> int:
        return self._entry(target).store.example_width()

    def get_dataset(self, target: Target) -> List[SerializedEntry]:
        return self._entry(target).store.to_serialized()

    def data_from_list(self, list_name_or_text: Any, target: Target) -> str:
        """JSON text of the matrix held in a list, or parsed from the text itself."""
        data: Union[Any, List[Any]]
        if isinstance(list_name_or_text, str) and target.lists.lookup(list_name_or_text) is not None:
            data = matrix_from_list(list_name_or_text, target.lists.read)
        else:
            data = read_as_numeric_array(list_name_or_text)
        if data is None:
            data = []
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            data = [data]
        return json.dumps(data)
