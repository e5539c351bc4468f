"""Dataset reports."""

from knnblocks.reporting.summary import dataset_summary, write_summary_csv

__all__ = ["dataset_summary", "write_summary_csv"]
