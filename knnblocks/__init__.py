"""KNN Blocks: runtime k-nearest-neighbor classifiers for block projects."""

__all__ = [
    "cli",
    "config",
    "constants",
    "exceptions",
    "parsing",
    "models",
    "storage",
    "runtime",
    "ops",
    "reporting",
]

__version__ = "0.1.0"
