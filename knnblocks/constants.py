"""Shared constants for the KNN blocks runtime."""

from typing import List

# =============================================================================
# PERSISTED DATASET
# =============================================================================

DATASET_LIST_ID = "tfknn_dataset"
DATASET_LIST_NAME = "KNN Dataset"

# =============================================================================
# CLASSIFIER DEFAULTS
# =============================================================================

DEFAULT_K = 3
DEFAULT_DISTANCE_METRIC = "euclidean"
DISTANCE_METRICS: List[str] = ["euclidean", "cosine"]

# Shape of one serialized block: [rows, cols]
SHAPE_RANK = 2

# Reporter value when no prediction has completed yet
NO_PREDICTION_LABEL = " "
