"""
Stream Framing Helpers

Helpers shared by the adapters' frame parsing: SSE `data:` lines, and
JSON objects streamed inside an array or one after another.
"""

import json
from typing import Any

SSE_DATA_PREFIX = "data:"

# Array punctuation and whitespace allowed between streamed objects
_OBJECT_SEPARATORS = " \t\r\n[],"


def sse_data(line: str) -> str | None:
    """
    Return the payload of an SSE `data:` line.

    Blank lines, comments and other SSE fields (event:, id:, retry:)
    return None.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    payload = line[len(SSE_DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


def load_json_object(payload: str) -> dict[str, Any] | None:
    """Parse a JSON object, returning None for invalid JSON or non-objects."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _starts_top_level_object(line: str) -> bool:
    if line[:1].isspace():
        return False
    return line.lstrip("[,").startswith("{")


class JsonObjectSplitter:
    """
    Incremental splitter for a body of concatenated JSON values.

    Accepts a JSON array (compact or pretty-printed across many lines) as
    well as newline-delimited objects. Lines are fed as they arrive and
    every value completed so far is returned; objects come back as dicts
    and anything unusable as None.

    A line that opens a new top-level object while undecodable text is
    still buffered discards that text as one malformed unit.
    """

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()
        self._buffer = ""

    def feed(self, line: str) -> list[dict[str, Any] | None]:
        units: list[dict[str, Any] | None] = []
        if self._buffer and _starts_top_level_object(line):
            units.append(None)
            self._buffer = ""

        self._buffer += line + "\n"
        while True:
            self._buffer = self._buffer.lstrip(_OBJECT_SEPARATORS)
            if not self._buffer:
                break
            try:
                value, end = self._decoder.raw_decode(self._buffer)
            except json.JSONDecodeError:
                # Incomplete so far; wait for more lines
                break
            self._buffer = self._buffer[end:]
            units.append(value if isinstance(value, dict) else None)
        return units

    def finish(self) -> list[None]:
        """Flush at end of body: leftover text is one malformed unit."""
        leftover = self._buffer.strip(_OBJECT_SEPARATORS)
        self._buffer = ""
        return [None] if leftover else []
