"""Labeled example store backing one classifier."""

from typing import Any, Dict, Iterable, List, Sequence, Tuple
import logging

import numpy as np

from knnblocks.exceptions import UnknownLabelError, WidthMismatchError
from knnblocks.storage.codec import SerializedEntry, arrays_to_entries, entries_to_arrays

logger = logging.getLogger(__name__)

FeatureVector = Tuple[float, ...]


class LabeledExampleStore:
    """
    Mapping of label -> feature vectors, in label insertion order.

    Every stored vector has the same length (the example width), fixed by
    the first vector added. A label with no examples is never kept.
    """

    def __init__(self) -> None:
        self._examples: Dict[str, List[FeatureVector]] = {}
        self._width = 0

    def add_example(self, label: str, vector: Sequence[float]) -> None:
        if len(vector) == 0:
            return
        label = str(label)
        example = tuple(float(value) for value in vector)
        if self._width and len(example) != self._width:
            raise WidthMismatchError(self._width, len(example), label)
        self._examples.setdefault(label, []).append(example)
        self._width = len(example)

    def clear_label(self, label: str) -> None:
        label = str(label)
        if label not in self._examples:
            raise UnknownLabelError(label)
        del self._examples[label]
        if not self._examples:
            self._width = 0

    def clear_all(self) -> None:
        self._examples.clear()
        self._width = 0

    def label_count(self) -> int:
        return len(self._examples)

    def labels(self) -> List[str]:
        return list(self._examples)

    def has_label(self, label: str) -> bool:
        return str(label) in self._examples

    def example_count_per_label(self) -> Dict[str, int]:
        return {label: len(vectors) for label, vectors in self._examples.items()}

    def example_width(self) -> int:
        return self._width

    def total_examples(self) -> int:
        return sum(len(vectors) for vectors in self._examples.values())

    def examples_for(self, label: str) -> List[FeatureVector]:
        return list(self._examples.get(str(label), []))

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Label -> ``(count, width)`` float block, for the k-NN backend."""
        return {
            label: np.asarray(vectors, dtype=float).reshape(len(vectors), self._width)
            for label, vectors in self._examples.items()
        }

    def load_arrays(self, arrays: Dict[str, Any]) -> None:
        """Replace every label with the given blocks; empty blocks are dropped."""
        examples: Dict[str, List[FeatureVector]] = {}
        width = 0
        for label, block in arrays.items():
            block = np.atleast_2d(np.asarray(block, dtype=float))
            rows, cols = block.shape
            if rows == 0 or cols == 0:
                continue
            if width and cols != width:
                raise WidthMismatchError(width, cols, str(label))
            width = cols
            examples[str(label)] = [tuple(row) for row in block.tolist()]
        self._examples = examples
        self._width = width
        logger.debug("Loaded %d labels (width %d)", len(examples), width)

    def load_from_serialized(self, entries: Iterable[Sequence[Any]]) -> None:
        self.load_arrays(entries_to_arrays(entries))

    def to_serialized(self) -> List[SerializedEntry]:
        return arrays_to_entries(self.to_arrays())
