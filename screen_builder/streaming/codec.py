"""
Server-Sent Events codec.

Each event is written as::

    event: <name>
    data: <json>
    <blank line>

The decoder is incremental: transport chunks may split an event anywhere
(even inside a multi-byte character), so incomplete trailing data is kept
until its delimiter arrives.
"""

import codecs
import json
from typing import List, Optional, Union

from .events import StreamEvent, parse_event

SSE_CONTENT_TYPE = "text/event-stream"
EVENT_DELIMITER = "\n\n"


def encode_event(event: StreamEvent) -> str:
    data = json.dumps(event.model_dump(mode="json"), ensure_ascii=False, separators=(",", ":"))
    return f"event: {event.name}\ndata: {data}{EVENT_DELIMITER}"


class SSEDecoder:
    def __init__(self):
        self._buffer = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")()

    def feed(self, chunk: Union[str, bytes]) -> List[StreamEvent]:
        """Adds a transport chunk and returns every event it completed."""
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self._buffer += chunk

        *blocks, self._buffer = self._buffer.split(EVENT_DELIMITER)
        events = []
        for block in blocks:
            event = _parse_block(block)
            if event is not None:
                events.append(event)
        return events

    def flush(self) -> str:
        """Ends the stream and returns (then drops) any incomplete trailing fragment."""
        pending, self._buffer = self._buffer, ""
        self._utf8.reset()
        return pending

    @property
    def pending(self) -> str:
        return self._buffer


def _parse_block(block: str) -> Optional[StreamEvent]:
    name = None
    data_lines = []
    for line in block.strip().split("\n"):
        if line.startswith("event:"):
            name = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data_lines.append(line[len("data:"):].lstrip())

    # Comments, keep-alives and incomplete blocks carry no event.
    if not name or not data_lines:
        return None
    return parse_event(name, json.loads("\n".join(data_lines)))
