"""Unit tests for the labeled example store."""

import numpy as np
import pytest

from knnblocks.exceptions import DatasetFormatError, UnknownLabelError, WidthMismatchError
from knnblocks.models.store import LabeledExampleStore


class TestAddExample:
    def test_first_example_creates_label(self, store):
        store.add_example("label1", [1, 1, 1])

        assert store.label_count() == 1
        assert store.example_count_per_label() == {"label1": 1}
        assert store.example_width() == 3

    def test_examples_accumulate_under_label(self, store):
        for _ in range(3):
            store.add_example("label1", [1, 2, 3])

        assert store.example_count_per_label()["label1"] == 3

    def test_empty_vector_is_ignored(self, store):
        store.add_example("label1", [])

        assert store.label_count() == 0
        assert store.example_width() == 0

    def test_width_mismatch_rejected(self, store):
        store.add_example("label1", [1, 2, 3])

        with pytest.raises(WidthMismatchError) as excinfo:
            store.add_example("label2", [1, 2])

        assert excinfo.value.expected == 3
        assert excinfo.value.actual == 2
        assert store.label_count() == 1

    def test_labels_are_case_sensitive(self, store):
        store.add_example("Cat", [1])
        store.add_example("cat", [2])

        assert store.labels() == ["Cat", "cat"]

    def test_label_insertion_order_kept(self, store):
        for label in ["label3", "label1", "label2"]:
            store.add_example(label, [0, 0])

        assert list(store.example_count_per_label()) == ["label3", "label1", "label2"]


class TestClear:
    def test_clear_label_removes_key(self, animal_store):
        animal_store.clear_label("cat")

        assert animal_store.label_count() == 1
        assert "cat" not in animal_store.example_count_per_label()
        assert animal_store.example_count_per_label()["dog"] == 1

    def test_clear_unknown_label_raises(self, animal_store):
        with pytest.raises(UnknownLabelError):
            animal_store.clear_label("bird")

        assert animal_store.label_count() == 2

    def test_clear_label_twice_raises(self, animal_store):
        animal_store.clear_label("dog")

        with pytest.raises(UnknownLabelError):
            animal_store.clear_label("dog")

    def test_clearing_last_label_resets_width(self, store):
        store.add_example("only", [1, 2])
        store.clear_label("only")
        store.add_example("other", [1, 2, 3, 4])

        assert store.example_width() == 4

    def test_clear_all(self, animal_store):
        animal_store.clear_all()

        assert animal_store.label_count() == 0
        assert animal_store.example_count_per_label() == {}
        assert animal_store.example_width() == 0


class TestSerialization:
    def test_empty_store_serializes_to_nothing(self, store):
        assert store.to_serialized() == []

    def test_single_label_entry(self, store):
        store.add_example("cat", [1, 2, 3])
        store.add_example("cat", [4, 5, 6])

        assert store.to_serialized() == [("cat", [1.0, 2.0, 3.0, 4.0, 5.0, 6.0], [2, 3])]

    def test_round_trip(self, animal_store):
        restored = LabeledExampleStore()
        restored.load_from_serialized(animal_store.to_serialized())

        assert restored.labels() == animal_store.labels()
        assert restored.example_count_per_label() == animal_store.example_count_per_label()
        for label in animal_store.labels():
            np.testing.assert_allclose(restored.examples_for(label), animal_store.examples_for(label))

    def test_load_replaces_existing_contents(self, store):
        store.add_example("old", [1, 2])
        store.load_from_serialized([("new", [1, 2, 3, 4], [2, 2])])

        assert store.example_count_per_label() == {"new": 2}

    def test_load_empty_sequence_clears(self, animal_store):
        animal_store.load_from_serialized([])

        assert animal_store.label_count() == 0
        assert animal_store.example_width() == 0

    def test_load_rejects_bad_shape_and_keeps_contents(self, animal_store):
        with pytest.raises(DatasetFormatError):
            animal_store.load_from_serialized([("cat", [1, 2, 3], [2, 2])])

        assert animal_store.example_count_per_label() == {"cat": 2, "dog": 1}

    def test_load_rejects_mixed_widths(self, store):
        entries = [("a", [1, 2], [1, 2]), ("b", [1, 2, 3], [1, 3])]

        with pytest.raises(WidthMismatchError):
            store.load_from_serialized(entries)

    def test_load_skips_empty_blocks(self, store):
        store.load_from_serialized([("empty", [], [0, 3]), ("full", [1, 2, 3], [1, 3])])

        assert store.labels() == ["full"]
        assert store.example_width() == 3

    def test_to_arrays_shapes(self, animal_store):
        arrays = animal_store.to_arrays()

        assert arrays["cat"].shape == (2, 3)
        assert arrays["dog"].shape == (1, 3)


def test_width_invariant_over_mixed_adds(store):
    attempts = [[1, 2, 3], [4, 5], [6, 7, 8], [9], [1, 1, 1]]
    for index, vector in enumerate(attempts):
        try:
            store.add_example(f"l{index % 2}", vector)
        except WidthMismatchError:
            pass

    widths = {len(v) for label in store.labels() for v in store.examples_for(label)}
    assert widths == {3}
