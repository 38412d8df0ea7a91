import asyncio
import itertools

import pytest

from screen_builder.execution.engine import ScreenEngine
from screen_builder.execution.executor import ScreenExecutor
from screen_builder.execution.generator import ComponentGenerator
from screen_builder.repositories.session import InMemorySessionRepository
from screen_builder.schemas.actions import (
    ComponentSpec,
    ComponentUpdate,
    CreateScreen,
    UpdateComponents,
)
from screen_builder.services.exceptions import InvalidInputError, RoutingFailure
from screen_builder.services.screen_service import GENERIC_GENERATION_ERROR, ScreenService
from screen_builder.state.models import Message, SessionState
from screen_builder.streaming.events import DoneEvent, ErrorEvent, StatusEvent

from fakes import FlakyResponder, ScriptedLLM, StaticRouter, no_sleep


def create_action(*names) -> CreateScreen:
    return CreateScreen(
        screen_description="Landing page",
        style_guide="Minimal",
        components=[ComponentSpec(name=n, type=n.lower(), description=f"The {n}") for n in names],
    )


def make_service(router, generator_llm, repo=None) -> ScreenService:
    counter = itertools.count(1)
    executor = ScreenExecutor(
        ComponentGenerator(generator_llm, sleep=no_sleep),
        stagger_seconds=0,
        id_factory=lambda: f"c{next(counter)}",
    )
    return ScreenService(
        session_repository=repo if repo is not None else InMemorySessionRepository(ttl_seconds=3600),
        engine=ScreenEngine(router=router, executor=executor),
    )


async def collect(service, session_id, prompt):
    return [event async for event in service.submit_prompt(session_id, prompt)]


def submit(service, session_id, prompt):
    return asyncio.run(collect(service, session_id, prompt))


def test_successful_run_streams_status_then_done_and_stores_state():
    service = make_service(StaticRouter(create_action("Navbar", "Hero", "Footer")), ScriptedLLM())

    events = submit(service, "s1", "  build a landing page  ")

    *progress, terminal = events
    assert progress and all(isinstance(e, StatusEvent) for e in progress)
    assert isinstance(terminal, DoneEvent)
    assert [c.name for c in terminal.screen.components] == ["Navbar", "Hero", "Footer"]
    assert terminal.messages[0].content == "build a landing page"

    stored = service.read_session("s1")
    assert len(stored.screen.components) == 3
    assert stored.messages == terminal.messages


def test_third_attempt_output_is_stored():
    responder = FlakyResponder(failures=2, result="```html\n<section>third</section>\n```")
    service = make_service(StaticRouter(create_action("Hero")), ScriptedLLM(respond=responder))

    events = submit(service, "s1", "build a hero")

    assert isinstance(events[-1], DoneEvent)
    assert responder.attempts == 3
    assert service.read_session("s1").screen.components[0].html == "<section>third</section>"


def test_exhausted_retries_report_error_and_keep_prior_state():
    repo = InMemorySessionRepository(ttl_seconds=3600)
    prior = SessionState(messages=[Message(role="user", content="earlier")])
    repo.update("s1", prior)
    responder = FlakyResponder(failures=3, result="<p>x</p>")
    service = make_service(StaticRouter(create_action("Hero")), ScriptedLLM(respond=responder), repo)

    events = submit(service, "s1", "build a hero")

    assert isinstance(events[-1], ErrorEvent)
    assert "after 3 attempts" in events[-1].error
    assert responder.attempts == 3
    assert repo.get("s1") is prior


def test_routing_failure_is_reported_verbatim():
    service = make_service(StaticRouter(RoutingFailure("Router failed to select a tool.")), ScriptedLLM())

    events = submit(service, "s1", "???")

    assert events[-1] == ErrorEvent(error="Router failed to select a tool.")
    assert service.read_session("s1").messages == []


def test_unexpected_errors_are_reported_generically():
    service = make_service(StaticRouter(RuntimeError("secret internals")), ScriptedLLM())

    events = submit(service, "s1", "build")

    assert events == [
        StatusEvent(message="Analyzing your request..."),
        ErrorEvent(error=GENERIC_GENERATION_ERROR),
    ]


@pytest.mark.parametrize("prompt", [None, "", "   ", 42])
def test_invalid_prompt_is_rejected_before_touching_the_session(prompt):
    repo = InMemorySessionRepository(ttl_seconds=3600)
    router = StaticRouter()
    service = make_service(router, ScriptedLLM(), repo)

    async def attempt():
        service.submit_prompt("s1", prompt)

    with pytest.raises(InvalidInputError):
        asyncio.run(attempt())
    assert "s1" not in repo
    assert router.calls == []


def test_sessions_are_isolated():
    router = StaticRouter(create_action("Hero"), create_action("Navbar", "Footer"))
    service = make_service(router, ScriptedLLM())

    submit(service, "a", "one section")
    submit(service, "b", "two sections")
    service.reset_session("b")

    assert [c.name for c in service.read_session("a").screen.components] == ["Hero"]
    assert service.read_session("b").screen is None


def test_runs_for_the_same_session_are_serialized():
    router = StaticRouter(
        create_action("Navbar", "Hero"),
        UpdateComponents(updates=[ComponentUpdate(component_id="c1", instruction="darker")]),
    )
    llm = ScriptedLLM(delays={"Navbar": 0.02})
    service = make_service(router, llm)

    async def both():
        return await asyncio.gather(
            collect(service, "s1", "build"),
            collect(service, "s1", "darker nav"),
        )

    first, second = asyncio.run(both())

    assert isinstance(first[-1], DoneEvent)
    assert isinstance(second[-1], DoneEvent)
    # The second run routed against the screen produced by the first one.
    history, screen = router.calls[1]
    assert [m.content for m in history][:2] == ["build", "Generated a new screen with 2 components: Navbar, Hero."]
    assert [c.id for c in screen.components] == ["c1", "c2"]
    assert len(service.read_session("s1").messages) == 4


def test_run_completes_when_consumer_stops_reading():
    service = make_service(StaticRouter(create_action("Hero")), ScriptedLLM(delays={"Hero": 0.01}))

    async def abandon():
        stream = service.submit_prompt("s1", "build")
        await stream.__anext__()
        await stream.aclose()
        await asyncio.gather(*service._runs)

    asyncio.run(abandon())

    assert [c.name for c in service.read_session("s1").screen.components] == ["Hero"]


def test_sweep_drops_expired_sessions():
    clock_now = [0.0]
    repo = InMemorySessionRepository(ttl_seconds=10, clock=lambda: clock_now[0])
    service = make_service(StaticRouter(create_action("Hero")), ScriptedLLM(), repo)
    submit(service, "old", "build")

    clock_now[0] = 11.0
    service.read_session("new")

    assert "old" not in repo
    assert "new" in repo
