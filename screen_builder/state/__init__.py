"""
State Layer - Runtime Data Models

Defines the per-session state: chat transcript, screen and components.
"""

from screen_builder.state.models import (
    Component,
    Message,
    Screen,
    SessionState,
)

__all__ = [
    "Component",
    "Message",
    "Screen",
    "SessionState",
]
