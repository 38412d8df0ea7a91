"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import List, Optional

from pydantic import BaseModel

from ..state.models import Message, Screen


class SessionRead(BaseModel):
    screen: Optional[Screen] = None
    messages: List[Message]


class ResetResponse(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    error: str
