"""Conversions between the example store, numpy blocks and persisted lines.

A serialized entry is ``(label, flat_values, [rows, cols])``. In the
persisted list each entry is one line of JSON whose commas are written
as spaces, e.g. ``["cat" [1.0 2.0 3.0 4.0] [2 2]]``.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import json
import logging
import math
import numbers

import numpy as np

from knnblocks.constants import SHAPE_RANK
from knnblocks.exceptions import DatasetFormatError

logger = logging.getLogger(__name__)

SerializedEntry = Tuple[str, List[float], List[int]]


def _shape_of(shape: Any, label: Optional[str] = None) -> Tuple[int, int]:
    if not isinstance(shape, (list, tuple)) or len(shape) != SHAPE_RANK:
        raise DatasetFormatError(f"shape must have {SHAPE_RANK} elements, got {shape!r}", label)
    dims = []
    for dim in shape:
        if (
            isinstance(dim, bool)
            or not isinstance(dim, numbers.Real)
            or not math.isfinite(dim)
            or dim < 0
            or dim != int(dim)
        ):
            raise DatasetFormatError(f"shape must hold non-negative integers, got {shape!r}", label)
        dims.append(int(dim))
    return dims[0], dims[1]


def entry_to_block(entry: Sequence[Any]) -> Tuple[str, np.ndarray]:
    """Reshape one serialized entry into a ``(rows, cols)`` float block."""
    label, values, shape = entry
    rows, cols = _shape_of(shape, label)
    try:
        flat = np.asarray(values, dtype=float).ravel()
    except (TypeError, ValueError) as exc:
        raise DatasetFormatError(f"values are not numeric ({exc})", label) from exc
    if flat.size != rows * cols:
        raise DatasetFormatError(
            f"{flat.size} values cannot be reshaped to [{rows}, {cols}]", label
        )
    return str(label), flat.reshape(rows, cols)


def entries_to_arrays(entries: Iterable[Sequence[Any]]) -> Dict[str, np.ndarray]:
    """Map serialized entries to label -> 2-D block. Later duplicates win."""
    arrays: Dict[str, np.ndarray] = {}
    for entry in entries:
        label, block = entry_to_block(entry)
        arrays[label] = block
    return arrays


def arrays_to_entries(arrays: Mapping[str, np.ndarray]) -> List[SerializedEntry]:
    entries: List[SerializedEntry] = []
    for label, block in arrays.items():
        block = np.atleast_2d(np.asarray(block, dtype=float))
        rows, cols = block.shape
        entries.append((label, block.ravel().tolist(), [int(rows), int(cols)]))
    return entries


def _restore_delimiters(line: str) -> str:
    # Whitespace outside string literals stands for a comma.
    out: List[str] = []
    in_string = False
    escaped = False
    pending = False
    for ch in line:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch.isspace():
            pending = True
            continue
        if pending and out and out[-1] not in "[," and ch not in "],":
            out.append(",")
        pending = False
        out.append(ch)
        if ch == '"':
            in_string = True
    return "".join(out)


def encode_entry(entry: Sequence[Any]) -> str:
    label, values, shape = entry
    payload = [str(label), [float(v) for v in values], [int(d) for d in shape]]
    return json.dumps(payload, separators=(" ", ":"))


def _is_valid_entry(data: Any) -> bool:
    if not isinstance(data, list) or len(data) != 3:
        return False
    label, values, shape = data
    if not isinstance(label, str) or not isinstance(values, list) or not isinstance(shape, list):
        return False
    if any(isinstance(v, bool) or not isinstance(v, numbers.Real) for v in values):
        return False
    try:
        rows, cols = _shape_of(shape, label)
    except DatasetFormatError:
        return False
    return len(values) == rows * cols


def decode_entry(line: Any) -> Optional[SerializedEntry]:
    """Decode one persisted line, or None when it is not a dataset entry."""
    if not isinstance(line, str):
        return None
    try:
        data = json.loads(_restore_delimiters(line))
    except ValueError:
        return None
    if not _is_valid_entry(data):
        return None
    label, values, shape = data
    return label, [float(v) for v in values], [int(d) for d in shape]


def encode_lines(entries: Iterable[Sequence[Any]]) -> List[str]:
    return [encode_entry(entry) for entry in entries]


def decode_lines(lines: Iterable[Any]) -> List[SerializedEntry]:
    """Decode every valid line, skipping the rest."""
    entries: List[SerializedEntry] = []
    for line in lines:
        entry = decode_entry(line)
        if entry is None:
            logger.warning("Skipping invalid dataset entry: %r", line)
            continue
        entries.append(entry)
    return entries
