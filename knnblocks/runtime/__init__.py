"""Per-target classifiers and the block operations on them."""

from knnblocks.runtime.blocks import KNNBlocks
from knnblocks.runtime.registry import ClassifierEntry, ClassifierRegistry

__all__ = ["KNNBlocks", "ClassifierEntry", "ClassifierRegistry"]
