import json
import logging
from typing import List, Optional

from openai import (
    APIConnectionError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from ..interface import LLMProvider, LLMProviderError, ToolCall, ToolSpec

logger = logging.getLogger(__name__)

# Transient failures worth another attempt. APITimeoutError is an
# APIConnectionError. Other 4xx errors (bad request, auth, not found)
# propagate as-is.
RETRYABLE_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class OpenAIAdapter(LLMProvider):
    def __init__(self, api_key: str, model_name: str, base_url: Optional[str] = None):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model_name = model_name

    async def generate_text(
        self,
        messages: List[dict],
        temperature: float = 0.0
    ) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
            )
        except RETRYABLE_ERRORS as e:
            raise LLMProviderError(f"OpenAI request failed: {e}") from e

        return completion.choices[0].message.content or ""

    async def select_tools(
        self,
        messages: List[dict],
        tools: List[ToolSpec],
        temperature: float = 0.0
    ) -> List[ToolCall]:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                tools=[
                    {
                        "type": "function",
                        "function": {
                            "name": tool.name,
                            "description": tool.description,
                            "parameters": tool.parameters,
                        },
                    }
                    for tool in tools
                ],
                # Equivalent of "function calling mode ANY": a plain text answer is not allowed.
                tool_choice="required",
                parallel_tool_calls=False,
            )
        except RETRYABLE_ERRORS as e:
            raise LLMProviderError(f"OpenAI request failed: {e}") from e

        # We unwrap the specific OpenAI response structure here
        calls = []
        for tool_call in completion.choices[0].message.tool_calls or []:
            try:
                arguments = json.loads(tool_call.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning(f"Tool call '{tool_call.function.name}' returned invalid JSON arguments")
                arguments = None
            calls.append(ToolCall(name=tool_call.function.name, arguments=arguments))
        return calls
