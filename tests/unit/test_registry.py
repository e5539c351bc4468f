"""Unit tests for the per-target classifier registry."""

from knnblocks.models.knn import NumpyKNN
from knnblocks.runtime.registry import ClassifierRegistry
from tests.mocks import RecordingBackend


def test_store_for_creates_on_first_access():
    registry = ClassifierRegistry()

    entry = registry.store_for("sprite1")

    assert entry.entity_id == "sprite1"
    assert entry.store.label_count() == 0
    assert entry.coordinator.last_prediction is None
    assert "sprite1" in registry
    assert len(registry) == 1


def test_store_for_is_stable():
    registry = ClassifierRegistry()

    first = registry.store_for("sprite1")
    second = registry.store_for("sprite1")

    assert first is second
    assert first.store is second.store


def test_entities_are_isolated():
    registry = ClassifierRegistry()

    registry.store_for("sprite1").store.add_example("a", [1, 2])
    other = registry.store_for("sprite2")

    assert other.store.label_count() == 0
    assert registry.entity_ids() == ["sprite1", "sprite2"]


def test_get_does_not_create():
    registry = ClassifierRegistry()

    assert registry.get("missing") is None
    assert len(registry) == 0


def test_backend_factory_called_per_entity():
    backends = []

    def factory():
        backend = RecordingBackend()
        backends.append(backend)
        return backend

    registry = ClassifierRegistry(backend_factory=factory)
    registry.store_for("a")
    registry.store_for("b")
    registry.store_for("a")

    assert len(backends) == 2


def test_default_backend_is_numpy():
    registry = ClassifierRegistry()

    assert isinstance(registry.store_for("a").coordinator._backend, NumpyKNN)
