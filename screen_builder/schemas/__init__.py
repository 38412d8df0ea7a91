"""
Schemas - Structured Output Models for LLM Responses

Defines the routing actions the LLM selects between, decoded from its
tool call into Pydantic models.
"""

from screen_builder.schemas.actions import (
    ACTION_MODELS,
    ComponentSpec,
    ComponentUpdate,
    CreateScreen,
    RegeneratedComponentSpec,
    RegenerateScreen,
    ScreenAction,
    UpdateComponents,
)

__all__ = [
    "ACTION_MODELS",
    "ComponentSpec",
    "ComponentUpdate",
    "CreateScreen",
    "RegeneratedComponentSpec",
    "RegenerateScreen",
    "ScreenAction",
    "UpdateComponents",
]
