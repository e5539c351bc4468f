"""
Pytest configuration and shared fixtures for KNN blocks tests.
"""

import pytest

from knnblocks.config import Config
from knnblocks.models.store import LabeledExampleStore
from knnblocks.ops.metrics import InMemoryMetricsRecorder
from knnblocks.runtime.blocks import KNNBlocks
from knnblocks.storage.lists import MemoryListStore, Target


@pytest.fixture
def metrics():
    """Fresh metrics recorder per test."""
    return InMemoryMetricsRecorder()


@pytest.fixture
def store():
    """Empty example store."""
    return LabeledExampleStore()


@pytest.fixture
def animal_store():
    """Store with two 3-wide cat examples and one dog example."""
    store = LabeledExampleStore()
    store.add_example("cat", [1, 2, 3])
    store.add_example("cat", [4, 5, 6])
    store.add_example("dog", [7, 8, 9])
    return store


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def blocks(config, metrics):
    return KNNBlocks(config=config, metrics=metrics)


@pytest.fixture
def target():
    return Target(id="sprite1", lists=MemoryListStore())
