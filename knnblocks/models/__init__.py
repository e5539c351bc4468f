"""Classifier state: example store, k-NN backend and prediction guard."""

from knnblocks.models.coordinator import (
    ClassifyOutcome,
    OutcomeStatus,
    PredictionCoordinator,
    PredictionState,
)
from knnblocks.models.knn import NearestNeighborBackend, NumpyKNN, PredictionResult
from knnblocks.models.store import LabeledExampleStore

__all__ = [
    "ClassifyOutcome",
    "OutcomeStatus",
    "PredictionCoordinator",
    "PredictionState",
    "NearestNeighborBackend",
    "NumpyKNN",
    "PredictionResult",
    "LabeledExampleStore",
]
