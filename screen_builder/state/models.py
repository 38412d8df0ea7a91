"""
State Layer - Runtime Data Models

This module defines the per-session state: the chat transcript and the
screen being built. A SessionState is treated as an immutable snapshot;
every pipeline run produces a brand new one that replaces the old one in
the SessionRepository.
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


class Component(BaseModel):
    """
    A single, independently regenerable section of a screen.

    Attributes:
        id: Opaque identifier, unique within a screen. Never changes once
            created; a restructure may carry it over to a new position.
        name: Human-readable name ("Top Navigation").
        type: Semantic category ("navbar", "hero", "card_grid", ...).
        description: What the component does. Fed back to the router so it
            can refer to components by id.
        html: Bare HTML fragment (no <html>/<body> wrapper).
        order: Position in the assembled screen. Duplicates are allowed and
            resolved by a stable sort.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str
    description: str
    html: str
    order: int


class Screen(BaseModel):
    """
    An ordered collection of components plus the composed document.

    `assembled_html` is always recomputed from `components` by the assembler;
    it is never patched in place.
    """
    components: List[Component] = Field(default_factory=list)
    assembled_html: str = ""
    # Shared design rules captured at creation, reused on every later edit.
    style_guide: Optional[str] = None


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class SessionState(BaseModel):
    """
    The global state for a single user session.
    """
    messages: List[Message] = Field(default_factory=list)
    screen: Optional[Screen] = None

    @classmethod
    def empty(cls) -> "SessionState":
        return cls()
