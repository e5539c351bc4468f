"""Operational helpers."""

from knnblocks.ops.metrics import MetricsRecorder, get_metrics_recorder

__all__ = ["MetricsRecorder", "get_metrics_recorder"]
