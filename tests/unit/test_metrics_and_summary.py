"""Unit tests for metrics and dataset summaries."""

import pandas as pd
import pytest

from knnblocks.ops.metrics import InMemoryMetricsRecorder, get_metrics_recorder
from knnblocks.reporting.summary import SUMMARY_COLUMNS, dataset_summary, write_summary_csv


def test_metrics_snapshot():
    recorder = InMemoryMetricsRecorder()
    recorder.increment("predictions_completed")
    recorder.increment("predictions_completed", 2)
    recorder.timing("prediction", 10.0)
    recorder.timing("prediction", 30.0)

    snapshot = recorder.snapshot()

    assert snapshot["counters"] == {"predictions_completed": 3}
    assert snapshot["timings"]["prediction"] == {"count": 2, "avg_ms": 20.0, "max_ms": 30.0}


def test_metrics_reset():
    recorder = InMemoryMetricsRecorder()
    recorder.increment("examples_added")
    recorder.reset()

    assert recorder.count("examples_added") == 0


def test_default_recorder_is_shared():
    assert get_metrics_recorder() is get_metrics_recorder()


def test_dataset_summary(animal_store):
    frame = dataset_summary(animal_store)

    assert list(frame.columns) == SUMMARY_COLUMNS
    assert frame["label"].tolist() == ["cat", "dog"]
    assert frame["examples"].tolist() == [2, 1]
    assert frame["width"].tolist() == [3, 3]
    assert frame.loc[frame["label"] == "dog", "mean_norm"].iloc[0] == pytest.approx((49 + 64 + 81) ** 0.5)


def test_dataset_summary_empty(store):
    frame = dataset_summary(store)

    assert frame.empty
    assert list(frame.columns) == SUMMARY_COLUMNS


def test_write_summary_csv(animal_store, tmp_path):
    path = write_summary_csv(animal_store, str(tmp_path / "out" / "summary.csv"))

    frame = pd.read_csv(path)
    assert frame["label"].tolist() == ["cat", "dog"]
