"""Permissive parsing of user-typed numeric text.

Block inputs arrive as whatever the user typed: ``"0.0 -0.1 0"``,
``"[1 2] [3 4]"``, ``"[1,2,3]"`` or plain numbers from a reporter. The
helpers here turn those into numbers or nested lists of numbers and
never raise on malformed text; unreadable tokens are dropped.
"""

from typing import Any, Callable, List, Optional, Sequence, Set, Union
import json
import math
import numbers
import re

import numpy as np

Number = Union[int, float]
NestedNumbers = List[Any]

_BRACKET_GROUP = re.compile(r"\[([^\]]+)\]")
_STRAY_BRACKETS = re.compile(r"[\[\]]")
_SEPARATORS = re.compile(r"[\s,]+")
_DECIMAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def _reject_constant(name: str) -> None:
    raise ValueError(f"Not a JSON number: {name}")


def _to_number(token: str) -> Optional[Number]:
    if _DECIMAL.match(token):
        if "." in token or "e" in token or "E" in token:
            return float(token)
        return int(token)
    if token.lstrip("+-") == "Infinity":
        return float("-inf") if token.startswith("-") else float("inf")
    return None


def _coerce_scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Number):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if math.isnan(number):
        return value
    return number


def parse_numbers(text: str) -> List[Number]:
    """Split text on whitespace/commas and keep the tokens that are numbers."""
    cleaned = _STRAY_BRACKETS.sub(" ", text)
    numbers_found: List[Number] = []
    for token in _SEPARATORS.split(cleaned):
        if not token:
            continue
        number = _to_number(token.replace(",", ""))
        if number is not None:
            numbers_found.append(number)
    return numbers_found


def read_as_numeric_array(value: Any) -> Union[Number, NestedNumbers, Any]:
    """Read a number or (nested) numeric list from a block argument.

    Non-text values are converted to a number when possible and passed
    through unchanged otherwise. Text is read as, in order of preference:
    a JSON array, a run of ``[...]`` row groups, a single bracketed row,
    or a bare row of numbers.
    """
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        return _coerce_scalar(value)

    text = value.strip()
    if text == "":
        return []

    try:
        decoded = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        decoded = None
    if isinstance(decoded, list):
        return decoded

    groups = _BRACKET_GROUP.findall(text)
    if len(groups) > 1:
        return [parse_numbers(group) for group in groups]
    if len(groups) == 1 and text.startswith("[") and text.endswith("]"):
        return parse_numbers(groups[0])
    return parse_numbers(text)


def as_feature_vector(parsed: Any) -> List[float]:
    """Flatten a parsed value into one feature vector.

    Raises ValueError when the value is ragged or holds non-numeric items.
    """
    if isinstance(parsed, numbers.Number) and not isinstance(parsed, bool):
        return [float(parsed)]
    if not isinstance(parsed, (list, tuple, np.ndarray)):
        raise ValueError(f"Not numeric data: {parsed!r}")
    try:
        array = np.asarray(parsed, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Not a regular numeric array: {parsed!r}") from exc
    return array.ravel().tolist()


def matrix_from_list(
    list_name: str,
    read_list: Callable[[str], Optional[Sequence[Any]]],
    _seen: Optional[Set[str]] = None,
) -> NestedNumbers:
    """Build a (possibly nested) numeric array from a named list.

    Items that name another list are expanded recursively; a list that
    refers back to one already being expanded is read as plain text.
    """
    seen = set(_seen or ())
    seen.add(list_name)
    items = read_list(list_name)
    if items is None:
        return []

    rows: NestedNumbers = []
    for item in items:
        key = str(item)
        if key not in seen and read_list(key) is not None:
            rows.append(matrix_from_list(key, read_list, seen))
            continue
        if isinstance(item, str):
            stripped = item.strip()
            # A blank list item counts as zero.
            number = 0 if stripped == "" else _to_number(stripped)
            rows.append(number if number is not None else read_as_numeric_array(item))
        else:
            rows.append(read_as_numeric_array(item))
    return rows
