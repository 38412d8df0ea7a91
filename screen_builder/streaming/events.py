"""
Streaming Events

The three event kinds a pipeline run can emit. A run produces zero or more
StatusEvents followed by exactly one terminal event (DoneEvent or
ErrorEvent).
"""

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel

from ..state.models import Message, Screen


class StatusEvent(BaseModel):
    """Advisory progress text. Consumers may display or drop it."""
    name: ClassVar[str] = "status"
    terminal: ClassVar[bool] = False

    message: str


class DoneEvent(BaseModel):
    name: ClassVar[str] = "done"
    terminal: ClassVar[bool] = True

    screen: Optional[Screen] = None
    messages: List[Message]


class ErrorEvent(BaseModel):
    name: ClassVar[str] = "error"
    terminal: ClassVar[bool] = True

    error: str


StreamEvent = Union[StatusEvent, DoneEvent, ErrorEvent]

EVENT_TYPES: Dict[str, type] = {
    StatusEvent.name: StatusEvent,
    DoneEvent.name: DoneEvent,
    ErrorEvent.name: ErrorEvent,
}


def parse_event(name: str, data: Dict[str, Any]) -> StreamEvent:
    """Rebuilds a typed event from its wire name and JSON payload."""
    event_type = EVENT_TYPES.get(name)
    if event_type is None:
        raise ValueError(f"Unknown stream event '{name}'")
    return event_type.model_validate(data)
