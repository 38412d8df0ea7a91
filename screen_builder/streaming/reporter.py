"""
Progress Reporter

Collects the events of a single pipeline run into an unbounded asyncio
queue. The pipeline pushes without ever waiting on the consumer; the
transport layer drains the queue with `events()` until the terminal event.
"""

import asyncio
from typing import AsyncIterator

from ..state.models import SessionState
from .events import DoneEvent, ErrorEvent, StatusEvent, StreamEvent

class StreamClosedError(RuntimeError):
    """Raised when an event is emitted after the terminal event."""


class ProgressReporter:
    def __init__(self):
        self._queue: "asyncio.Queue[StreamEvent]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def status(self, message: str) -> None:
        self._put(StatusEvent(message=message))

    def done(self, state: SessionState) -> None:
        self._put(DoneEvent(screen=state.screen, messages=state.messages))

    def fail(self, error: str) -> None:
        self._put(ErrorEvent(error=error))

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Yields events in emission order, ending after the terminal one."""
        while True:
            event = await self._queue.get()
            yield event
            if event.terminal:
                return

    def _put(self, event: StreamEvent) -> None:
        if self._closed:
            raise StreamClosedError(f"Cannot emit '{event.name}' after the stream has closed.")
        if event.terminal:
            self._closed = True
        self._queue.put_nowait(event)
