"""Per-label summaries of a classifier's examples."""

from pathlib import Path

import numpy as np
import pandas as pd

from knnblocks.models.store import LabeledExampleStore

SUMMARY_COLUMNS = ["label", "examples", "width", "mean_norm"]


def dataset_summary(store: LabeledExampleStore) -> pd.DataFrame:
    """One row per label: example count, width and mean vector norm."""
    rows = []
    for label, block in store.to_arrays().items():
        rows.append({
            "label": label,
            "examples": int(block.shape[0]),
            "width": int(block.shape[1]),
            "mean_norm": float(np.linalg.norm(block, axis=1).mean()),
        })
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary_csv(store: LabeledExampleStore, output_path: str) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    dataset_summary(store).to_csv(path, index=False)
    return path
