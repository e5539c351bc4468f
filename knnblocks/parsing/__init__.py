"""Parsing of loosely formatted numeric text."""

from knnblocks.parsing.numeric import (
    as_feature_vector,
    matrix_from_list,
    parse_numbers,
    read_as_numeric_array,
)

__all__ = [
    "as_feature_vector",
    "matrix_from_list",
    "parse_numbers",
    "read_as_numeric_array",
]
