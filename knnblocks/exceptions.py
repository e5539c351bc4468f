"""
Custom exceptions for the KNN blocks runtime.

Provides a hierarchy of exceptions so that store and classifier
contract violations can be told apart by callers.

Usage:
    from knnblocks.exceptions import WidthMismatchError, UnknownLabelError

    try:
        store.add_example("cat", [1, 2])
    except WidthMismatchError as e:
        print(f"Rejected example: {e}")
"""

from typing import Optional


class KNNBlocksError(Exception):
    """
    Base exception for all KNN blocks errors.

    All custom exceptions inherit from this, allowing:
        except KNNBlocksError:
            # Catch any runtime error
    """
    pass


# =============================================================================
# STORE ERRORS
# =============================================================================

class WidthMismatchError(KNNBlocksError):
    """
    Feature vector length disagrees with the store's example width.

    Raised when:
    - An example is added whose length differs from earlier examples
    - A serialized block declares a width unlike the other blocks
    """

    def __init__(self, expected: int, actual: int, label: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.label = label
        msg = f"Example width mismatch: expected {expected}, got {actual}"
        if label is not None:
            msg += f" (label: {label!r})"
        super().__init__(msg)


class UnknownLabelError(KNNBlocksError):
    """
    Label has no examples in the store.

    Raised when:
    - Clearing a label that was never added
    - Clearing a label twice
    """

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unknown label: {label!r}")


class DatasetFormatError(KNNBlocksError):
    """
    Serialized dataset entry is structurally invalid.

    Raised when:
    - Flat values cannot be reshaped to the declared [rows, cols] shape
    - Shape is not a two-element sequence of non-negative integers
    """

    def __init__(self, reason: str, label: Optional[str] = None):
        self.reason = reason
        self.label = label
        msg = f"Invalid dataset entry: {reason}"
        if label is not None:
            msg += f" (label: {label!r})"
        super().__init__(msg)


class DatasetWriteError(KNNBlocksError):
    """
    Dataset list could not be written back to the target.

    The in-memory store keeps the change; only the saved copy is stale.
    """

    def __init__(self, target_id: str, original_error: Exception):
        self.target_id = target_id
        self.original_error = original_error
        super().__init__(f"Could not save dataset for target {target_id!r}: {original_error}")


# =============================================================================
# CLASSIFICATION ERRORS
# =============================================================================

class ClassifyPreconditionError(KNNBlocksError):
    """Base class for classify requests rejected before any work is done."""
    pass


class EmptyInputError(ClassifyPreconditionError):
    """Query vector is empty."""

    def __init__(self):
        super().__init__("Query vector is empty")


class NoExamplesError(ClassifyPreconditionError):
    """Classifier has no labeled examples to vote with."""

    def __init__(self):
        super().__init__("No examples added")


class InvalidKError(ClassifyPreconditionError):
    """Neighbor count is below one."""

    def __init__(self, k):
        self.k = k
        super().__init__(f"Invalid value for k: {k}")


class ClassificationError(KNNBlocksError):
    """
    The nearest-neighbor capability failed while predicting.

    Raised when:
    - Query width does not match the training examples
    - The backend raised an unexpected error
    """

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        msg = f"Classification failed: {message}"
        if original_error:
            msg += f" (caused by: {type(original_error).__name__}: {original_error})"
        super().__init__(msg)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(KNNBlocksError):
    """
    Configuration or setup error.

    Raised when:
    - Distance metric is not supported
    - Default k is below one
    """

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(f"Configuration error ({setting}): {message}")
