"""Streaming JSON array writer."""

import json
from typing import Any

from parlaid.output.console import Output


def serialize_item(item: Any) -> str:
    """Serialize one item as compact single-line JSON."""
    return json.dumps(item, ensure_ascii=False, separators=(",", ":"), default=str)


class JsonArraySink:
    """Writes pages of items as one JSON array, as they arrive.

    The only state kept is whether any item has been written yet, so the
    comma goes before every item except the first one of the whole stream,
    even when earlier pages were empty.
    """

    def __init__(self, output: Output):
        self.output = output
        self._wrote_item = False
        self.count = 0

    def start(self) -> bool:
        self._wrote_item = False
        self.count = 0
        self.output.write_out("[\n")
        return True

    def emit(self, items: list[Any], is_first_page: bool, is_final_page: bool) -> bool:
        for item in items:
            if self._wrote_item:
                self.output.write_out(",")
            self.output.write_out(serialize_item(item))
            self._wrote_item = True
            self.count += 1
        return True

    def end(self) -> bool:
        self.output.write_out("\n]")
        return True
