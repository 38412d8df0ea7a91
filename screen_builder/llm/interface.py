from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class LLMProviderError(Exception):
    """
    Transport or service failure reported by a provider (network error,
    timeout, rate limit, 5xx). This is the only error the generation client
    retries.
    """


@dataclass
class ToolSpec:
    """A function the LLM may call: name, description and a JSON schema."""
    name: str
    description: str
    parameters: Dict[str, Any]


@dataclass
class ToolCall:
    """A function call chosen by the LLM, with its raw (undecoded) arguments."""
    name: str
    arguments: Optional[Dict[str, Any]] = field(default_factory=dict)


class LLMProvider(ABC):
    """
    Abstract Base Class interface that defines the contract for any LLM provider 
    (OpenAI, Anthropic, Local LLaMA, etc.)
    """

    @abstractmethod
    async def generate_text(
        self,
        messages: List[dict],
        temperature: float = 0.0
    ) -> str:
        """
        Returns the plain-text completion for the given chat messages.
        Raises LLMProviderError on transport/service failures.
        """
        pass

    @abstractmethod
    async def select_tools(
        self,
        messages: List[dict],
        tools: List[ToolSpec],
        temperature: float = 0.0
    ) -> List[ToolCall]:
        """
        Forces the LLM to answer with tool calls and returns them in order.
        Raises LLMProviderError on transport/service failures.
        """
        pass
