"""
Streaming Layer - Progress and Result Events

Event models, the per-run ProgressReporter queue and the SSE codec used to
put events on the wire and reassemble them on the other side.
"""

from screen_builder.streaming.codec import SSE_CONTENT_TYPE, SSEDecoder, encode_event
from screen_builder.streaming.events import (
    DoneEvent,
    ErrorEvent,
    StatusEvent,
    StreamEvent,
    parse_event,
)
from screen_builder.streaming.reporter import ProgressReporter, StreamClosedError

__all__ = [
    "SSE_CONTENT_TYPE",
    "SSEDecoder",
    "encode_event",
    "DoneEvent",
    "ErrorEvent",
    "StatusEvent",
    "StreamEvent",
    "parse_event",
    "ProgressReporter",
    "StreamClosedError",
]
