import asyncio

import pytest

from screen_builder.execution.generator import ComponentGenerator, clean_html
from screen_builder.services.exceptions import GenerationFailure

from fakes import FlakyResponder, ScriptedLLM


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


def make_generator(llm, sleep=None, **kwargs):
    return ComponentGenerator(llm, sleep=sleep or RecordingSleep(), **kwargs)


# --- clean_html ---

def test_clean_html_strips_fences():
    raw = "```html\n<div class=\"p-4\">Hi</div>\n```"
    assert clean_html(raw) == '<div class="p-4">Hi</div>'


def test_clean_html_strips_bare_fences():
    assert clean_html("```\n<p>x</p>\n```  ") == "<p>x</p>"


def test_clean_html_extracts_body_of_full_document():
    raw = (
        "<!DOCTYPE html><html><head><title>x</title></head>"
        "<body class=\"bg-white\">\n  <header>Top</header>\n</body></html>"
    )
    assert clean_html(raw) == "<header>Top</header>"


def test_clean_html_keeps_fragments_verbatim():
    fragment = "<section><h1>Title</h1></section>"
    assert clean_html(fragment) == fragment


# --- retry policy ---

def test_two_failures_then_success_returns_cleaned_third_attempt():
    responder = FlakyResponder(
        failures=2, result=lambda attempt: f"```html\n<p>attempt {attempt}</p>\n```"
    )
    sleep = RecordingSleep()
    generator = make_generator(ScriptedLLM(respond=responder), sleep=sleep, backoff_seconds=1.0)

    html = asyncio.run(generator.generate("Create a hero"))

    assert html == "<p>attempt 3</p>"
    assert responder.attempts == 3
    # Linear backoff: attempt * unit.
    assert sleep.delays == [1.0, 2.0]


def test_three_failures_raise_generation_failure():
    responder = FlakyResponder(failures=3, result="<p>never</p>")
    generator = make_generator(ScriptedLLM(respond=responder))

    with pytest.raises(GenerationFailure) as exc_info:
        asyncio.run(generator.generate("Create a hero"))

    assert responder.attempts == 3
    assert exc_info.value.attempts == 3
    assert "attempt 3" in str(exc_info.value)


@pytest.mark.parametrize("max_attempts", [0, -1])
def test_rejects_fewer_than_one_attempt(max_attempts):
    with pytest.raises(ValueError, match="max_attempts"):
        ComponentGenerator(ScriptedLLM(), max_attempts=max_attempts)


def test_non_provider_errors_are_not_retried():
    calls = []

    def respond(prompt):
        calls.append(prompt)
        raise KeyError("bug")

    generator = make_generator(ScriptedLLM(respond=respond))

    with pytest.raises(KeyError):
        asyncio.run(generator.generate("Create a hero"))
    assert len(calls) == 1


def test_style_guide_is_added_to_system_prompt():
    llm = ScriptedLLM()
    generator = make_generator(llm)

    asyncio.run(generator.generate("Create a footer", style_guide="Dark theme, accent indigo-500"))
    asyncio.run(generator.generate("Create a footer"))

    with_guide, without_guide = llm.text_calls
    assert with_guide[0]["role"] == "system"
    assert "Style guide to follow: Dark theme, accent indigo-500" in with_guide[0]["content"]
    assert "Style guide" not in without_guide[0]["content"]
    assert with_guide[1] == {"role": "user", "content": "Create a footer"}
