"""
Generator - Component HTML Generation Client

Wraps a single LLM completion that produces the HTML for one component.
Adds bounded retry with linear backoff on provider errors and normalizes the
output into a bare fragment that the assembler can compose.
"""

import asyncio
import logging
import re
from datetime import date
from typing import Awaitable, Callable, Optional

from ..llm.interface import LLMProvider, LLMProviderError
from ..services.exceptions import GenerationFailure
from ..prompts import Template, render

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```(?:html)?\s*\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?```\s*$")
_BODY = re.compile(r"<body[^>]*>(.*)</body>", re.IGNORECASE | re.DOTALL)


def clean_html(raw: str) -> str:
    """
    Strips markdown fences and full-document wrappers that the LLM sometimes adds.
    If a <body> is present only its inner content is kept.
    """
    html = _OPENING_FENCE.sub("", raw.strip(), count=1)
    html = _CLOSING_FENCE.sub("", html, count=1).strip()

    body_match = _BODY.search(html)
    if body_match:
        html = body_match.group(1).strip()

    return html


class ComponentGenerator:
    def __init__(
        self,
        llm_provider: LLMProvider,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        temperature: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.llm = llm_provider
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.temperature = temperature
        self._sleep = sleep

    async def generate(self, prompt: str, style_guide: Optional[str] = None) -> str:
        """
        Generates the HTML fragment for one component.

        Only LLMProviderError is retried, up to `max_attempts` attempts in total,
        waiting `attempt * backoff_seconds` between them. Any other error
        propagates immediately.

        Raises:
            GenerationFailure: when the last attempt fails.
        """
        messages = [
            {"role": "system", "content": self._build_system_prompt(style_guide)},
            {"role": "user", "content": prompt},
        ]

        for attempt in range(1, self.max_attempts + 1):
            try:
                raw = await self.llm.generate_text(messages, temperature=self.temperature)
                return clean_html(raw)
            except LLMProviderError as e:
                if attempt == self.max_attempts:
                    logger.error(f"Component generation failed after {attempt} attempts: {e}")
                    raise GenerationFailure(
                        f"Component generation failed after {attempt} attempts: {e}",
                        attempts=attempt,
                    ) from e

                delay = attempt * self.backoff_seconds
                logger.warning(
                    f"Generation attempt {attempt}/{self.max_attempts} failed, retrying in {delay}s: {e}"
                )
                await self._sleep(delay)

    def _build_system_prompt(self, style_guide: Optional[str]) -> str:
        return render(
            Template.GENERATOR_SYSTEM,
            year=date.today().year,
            style_guide=style_guide,
        )
