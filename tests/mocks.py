"""Mock backends and scheduler hooks for testing the prediction guard."""

import asyncio

from knnblocks.exceptions import ClassificationError
from knnblocks.models.knn import NearestNeighborBackend, PredictionResult
from knnblocks.storage.lists import MemoryListStore


class GatedBackend(NearestNeighborBackend):
    """Backend that holds every request until ``release()`` is called."""

    def __init__(self, result=None):
        self.result = result or PredictionResult(label="gated", confidences={"gated": 1.0})
        self.calls = []
        self.started = asyncio.Event()
        self._gate = asyncio.Event()

    def release(self):
        self._gate.set()

    async def predict(self, dataset, query, k):
        self.calls.append((dict(dataset), list(query), k))
        self.started.set()
        await self._gate.wait()
        return self.result


class FailingBackend(NearestNeighborBackend):
    """Backend that always fails."""

    def __init__(self, error=None):
        self.error = error or RuntimeError("backend exploded")
        self.calls = 0

    async def predict(self, dataset, query, k):
        self.calls += 1
        raise self.error


class RecordingBackend(NearestNeighborBackend):
    """Backend that records calls and returns a fixed result."""

    def __init__(self, result=None):
        self.result = result or PredictionResult(label="fixed", confidences={"fixed": 1.0})
        self.calls = []

    async def predict(self, dataset, query, k):
        self.calls.append((dict(dataset), list(query), k))
        return self.result


class RecordingYield:
    """Scheduler yield primitive that counts how often it was invoked."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def classification_error(message="width mismatch"):
    return ClassificationError(message)


class UnwritableListStore(MemoryListStore):
    """List store whose writes fail the way a full or read-only disk does."""

    def write(self, name, lines):
        raise OSError("disk full")
