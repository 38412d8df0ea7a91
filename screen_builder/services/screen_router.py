"""
Router Service.

The router is the component responsible for analyzing the conversation and
the current screen and selecting exactly one of the three screen actions
(create, update, regenerate). It does not touch session state.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ..llm.interface import LLMProvider, ToolCall, ToolSpec
from ..schemas.actions import ACTION_MODELS, CreateScreen, ScreenAction
from ..state.models import Message, Screen
from ..prompts import Template, render
from .exceptions import RoutingFailure

logger = logging.getLogger(__name__)


class ScreenRouter(ABC):
    @abstractmethod
    async def route(
        self, history: List[Message], screen: Optional[Screen]
    ) -> ScreenAction:
        """
        Picks the action for the latest user message (the last item of `history`).

        Raises:
            RoutingFailure: if no single valid action can be decoded.
        """
        pass


class LLMScreenRouter(ScreenRouter):
    """
    Offers the three actions to the LLM as tools and forces it to call one.
    """

    def __init__(self, llm_provider: LLMProvider, temperature: float = 0.0):
        self.llm = llm_provider
        self.temperature = temperature
        self.tools = [_build_tool_spec(name, model) for name, model in ACTION_MODELS.items()]

    async def route(
        self, history: List[Message], screen: Optional[Screen]
    ) -> ScreenAction:
        components = screen.components if screen else []
        system_prompt = render(Template.ROUTER_SYSTEM, components=components)

        messages = [{"role": "system", "content": system_prompt}]
        for msg in history:
            messages.append({"role": msg.role, "content": msg.content})

        calls = await self.llm.select_tools(
            messages=messages, tools=self.tools, temperature=self.temperature
        )
        action = decode_action(calls)

        # An empty screen can only be created; there is nothing to edit or restructure.
        if not components and not isinstance(action, CreateScreen):
            raise RoutingFailure(
                f"Router chose '{action.action}', but the screen is empty."
            )

        logger.info(f"Router selected '{action.action}'")
        return action


def decode_action(calls: List[ToolCall]) -> ScreenAction:
    """Decodes the single tool call into its action model."""
    if not calls:
        raise RoutingFailure("Router failed to select a tool.")
    if len(calls) > 1:
        names = ", ".join(call.name for call in calls)
        raise RoutingFailure(f"Router selected more than one tool: {names}.")

    call = calls[0]
    model = ACTION_MODELS.get(call.name)
    if model is None:
        raise RoutingFailure(f"Router selected an unknown tool '{call.name}'.")
    if not isinstance(call.arguments, dict):
        raise RoutingFailure(f"Router returned unreadable arguments for '{call.name}'.")

    # The tool name is authoritative for the tag.
    arguments = {**call.arguments, "action": call.name}
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise RoutingFailure(f"Router returned invalid arguments for '{call.name}': {e}") from e


def _build_tool_spec(name: str, model: Type[BaseModel]) -> ToolSpec:
    schema: Dict[str, Any] = model.model_json_schema()
    # The tag is implied by the tool name; the LLM never fills it in.
    schema.get("properties", {}).pop("action", None)
    schema.pop("title", None)
    description = schema.pop("description", "") or name
    return ToolSpec(name=name, description=description, parameters=schema)
