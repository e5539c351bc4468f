"""Nearest-neighbor classification backends."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence
import logging

import numpy as np

from knnblocks.constants import DEFAULT_DISTANCE_METRIC, DISTANCE_METRICS
from knnblocks.exceptions import ClassificationError, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionResult:
    label: str
    confidences: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidences", MappingProxyType(dict(self.confidences)))

    def confidence_for(self, label: str) -> float:
        return float(self.confidences.get(label, 0.0))

    def to_dict(self) -> dict:
        return {"label": self.label, "confidences": dict(self.confidences)}


class NearestNeighborBackend:
    """Predicts a label for a query from label -> ``(n, width)`` blocks."""

    async def predict(
        self,
        dataset: Mapping[str, np.ndarray],
        query: Sequence[float],
        k: int,
    ) -> PredictionResult:
        raise NotImplementedError


class NumpyKNN(NearestNeighborBackend):
    """
    Exact k-NN majority vote.

    Confidence of a label is its share of the k votes, where k is capped
    at the number of stored examples. Ties go to the label stored first.
    """

    def __init__(self, metric: str = DEFAULT_DISTANCE_METRIC) -> None:
        if metric not in DISTANCE_METRICS:
            raise ConfigurationError("metric", f"unsupported metric '{metric}'")
        self.metric = metric

    def _distances(self, train: np.ndarray, query: np.ndarray) -> np.ndarray:
        if self.metric == "cosine":
            norms = np.linalg.norm(train, axis=1) * np.linalg.norm(query)
            with np.errstate(divide="ignore", invalid="ignore"):
                similarity = np.where(norms > 0, train @ query / norms, 0.0)
            return 1.0 - similarity
        return np.linalg.norm(train - query, axis=1)

    def predict_sync(
        self,
        dataset: Mapping[str, np.ndarray],
        query: Sequence[float],
        k: int,
    ) -> PredictionResult:
        labels = list(dataset)
        if not labels:
            raise ClassificationError("no training examples")
        blocks = [np.atleast_2d(np.asarray(dataset[label], dtype=float)) for label in labels]
        train = np.vstack(blocks)
        owners = np.repeat(np.arange(len(labels)), [block.shape[0] for block in blocks])

        point = np.asarray(query, dtype=float).ravel()
        if point.shape[0] != train.shape[1]:
            raise ClassificationError(
                f"query width {point.shape[0]} does not match example width {train.shape[1]}"
            )

        k_eff = max(1, min(int(k), train.shape[0]))
        nearest = np.argsort(self._distances(train, point), kind="stable")[:k_eff]
        votes = np.bincount(owners[nearest], minlength=len(labels))
        top = int(np.argmax(votes))
        confidences = {label: float(votes[i]) / k_eff for i, label in enumerate(labels)}
        return PredictionResult(label=labels[top], confidences=confidences)

    async def predict(
        self,
        dataset: Mapping[str, np.ndarray],
        query: Sequence[float],
        k: int,
    ) -> PredictionResult:
        return self.predict_sync(dataset, query, k)
