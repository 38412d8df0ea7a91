"""
Schemas - Routing Actions

This module defines the closed set of actions the router can select. Each
action doubles as the argument schema of a tool offered to the LLM, so the
LLM's tool call is decoded straight into one of these Pydantic models.
Anything that does not decode into exactly one of them is a routing failure.
"""
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field


class ComponentSpec(BaseModel):
    """A component the router wants on the screen (no HTML yet)."""
    name: str = Field(..., description="Short human-readable component name.")
    type: str = Field(
        ...,
        description="Semantic category, e.g. 'navbar', 'hero', 'feature_grid', 'footer'."
    )
    description: str = Field(..., description="What this component shows and does.")


class CreateScreen(BaseModel):
    """Generate a completely new screen from scratch."""
    action: Literal["generate_screen"] = "generate_screen"
    screen_description: str = Field(..., description="What the whole screen is for.")
    style_guide: str = Field(
        ...,
        description=(
            "Shared design rules all components must follow "
            "(e.g. 'Dark theme, bg-gray-900, accent indigo-500, rounded-xl cards, Inter font')."
        )
    )
    components: List[ComponentSpec] = Field(..., description="Components in display order.")


class ComponentUpdate(BaseModel):
    component_id: str = Field(..., description="ID of the existing component to change.")
    instruction: str = Field(..., description="The content or style change to apply.")


class UpdateComponents(BaseModel):
    """Apply style or text updates to existing components."""
    action: Literal["update_components"] = "update_components"
    updates: List[ComponentUpdate]


class RegeneratedComponentSpec(ComponentSpec):
    keep_from_id: Optional[str] = Field(
        None,
        description="ID of the existing component to keep unchanged. Leave empty to generate a new one."
    )


class RegenerateScreen(BaseModel):
    """Restructure an existing screen with new or retained components."""
    action: Literal["regenerate_screen"] = "regenerate_screen"
    instruction: str = Field(..., description="The overall structural change requested.")
    components: List[RegeneratedComponentSpec] = Field(
        ..., description="The full new component list in display order."
    )


ScreenAction = Union[CreateScreen, UpdateComponents, RegenerateScreen]

# Tool name -> argument schema. The tool name is the action tag.
ACTION_MODELS = {
    "generate_screen": CreateScreen,
    "update_components": UpdateComponents,
    "regenerate_screen": RegenerateScreen,
}
