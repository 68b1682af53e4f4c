"""Output handlers for Parlaid."""

from parlaid.output.console import BufferOutput, Console, Output
from parlaid.output.json_writer import JsonArraySink, serialize_item

__all__ = [
    "BufferOutput",
    "Console",
    "JsonArraySink",
    "Output",
    "serialize_item",
]
