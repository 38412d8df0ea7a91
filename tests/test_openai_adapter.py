import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from screen_builder.execution.generator import ComponentGenerator
from screen_builder.llm.adapters.openai_adapter import OpenAIAdapter
from screen_builder.llm.interface import LLMProviderError, ToolCall, ToolSpec

from fakes import no_sleep

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def status_error(cls, code: int):
    return cls(f"Error code: {code}", response=httpx.Response(code, request=REQUEST), body=None)


def make_adapter(create) -> OpenAIAdapter:
    adapter = OpenAIAdapter(api_key="sk-test", model_name="gpt-4o-mini")
    adapter.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return adapter


def failing(error):
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        raise error

    return create, calls


def completion(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.mark.parametrize("error", [
    openai.APIConnectionError(request=REQUEST),
    openai.APITimeoutError(request=REQUEST),
    status_error(openai.RateLimitError, 429),
    status_error(openai.InternalServerError, 503),
])
def test_transient_errors_become_provider_errors(error):
    create, _ = failing(error)

    with pytest.raises(LLMProviderError) as exc_info:
        asyncio.run(make_adapter(create).generate_text([{"role": "user", "content": "hi"}]))
    assert exc_info.value.__cause__ is error


@pytest.mark.parametrize("error", [
    status_error(openai.AuthenticationError, 401),
    status_error(openai.BadRequestError, 400),
    status_error(openai.NotFoundError, 404),
])
def test_client_errors_propagate_unwrapped(error):
    create, _ = failing(error)

    with pytest.raises(type(error)):
        asyncio.run(make_adapter(create).select_tools([{"role": "user", "content": "hi"}], tools=[]))


def test_bad_api_key_is_not_retried_by_generator():
    create, calls = failing(status_error(openai.AuthenticationError, 401))
    generator = ComponentGenerator(make_adapter(create), sleep=no_sleep)

    with pytest.raises(openai.AuthenticationError):
        asyncio.run(generator.generate("a hero section"))
    assert len(calls) == 1


def test_select_tools_decodes_arguments():
    async def create(**kwargs):
        assert kwargs["tool_choice"] == "required"
        assert kwargs["tools"][0]["function"]["name"] == "generate_screen"
        return completion(tool_calls=[
            SimpleNamespace(function=SimpleNamespace(name="generate_screen", arguments='{"a": 1}')),
            SimpleNamespace(function=SimpleNamespace(name="update_components", arguments="{not json")),
        ])

    tools = [ToolSpec(name="generate_screen", description="Create", parameters={"type": "object"})]
    calls = asyncio.run(make_adapter(create).select_tools([], tools))

    assert calls == [ToolCall("generate_screen", {"a": 1}), ToolCall("update_components", None)]
