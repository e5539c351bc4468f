"""Dataset encoding and list storage."""

from knnblocks.storage.codec import (
    SerializedEntry,
    arrays_to_entries,
    decode_entry,
    decode_lines,
    encode_entry,
    encode_lines,
    entries_to_arrays,
)
from knnblocks.storage.lists import JsonListStore, ListStore, ListVariable, MemoryListStore, Target

__all__ = [
    "SerializedEntry",
    "arrays_to_entries",
    "decode_entry",
    "decode_lines",
    "encode_entry",
    "encode_lines",
    "entries_to_arrays",
    "JsonListStore",
    "ListStore",
    "ListVariable",
    "MemoryListStore",
    "Target",
]
