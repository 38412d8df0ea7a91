"""
Screen Builder

Turns natural-language prompts into multi-component HTML screens. A router
LLM classifies each prompt into create / update / regenerate, an executor
generates component HTML concurrently, and the assembled screen is kept as
per-session state while progress is streamed to the caller.
"""

from screen_builder.state import (
    Component,
    Message,
    Screen,
    SessionState,
)
from screen_builder.schemas.actions import (
    CreateScreen,
    RegenerateScreen,
    ScreenAction,
    UpdateComponents,
)
from screen_builder.execution import (
    ComponentGenerator,
    ScreenEngine,
    ScreenExecutor,
    assemble_screen,
)

__all__ = [
    # State Layer
    "Component",
    "Message",
    "Screen",
    "SessionState",
    # Schemas
    "CreateScreen",
    "RegenerateScreen",
    "ScreenAction",
    "UpdateComponents",
    # Execution Layer
    "ComponentGenerator",
    "ScreenEngine",
    "ScreenExecutor",
    "assemble_screen",
]
