"""
Executor - Screen Mutation Layer

This module defines the ScreenExecutor, which performs the action chosen by
the router. It calls the ComponentGenerator for every component that needs
new HTML, concurrently, and always returns the components in the planned
index order regardless of which call finishes first.

The executor never touches the session store; it only computes the new
component list and a short summary for the transcript.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Set

from ..schemas.actions import (
    ComponentSpec,
    CreateScreen,
    RegeneratedComponentSpec,
    RegenerateScreen,
    ScreenAction,
    UpdateComponents,
)
from ..state.models import Component, Screen
from ..prompts import Template, render
from .generator import ComponentGenerator

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


def ignore_status(message: str) -> None:
    pass


@dataclass
class ExecutionResult:
    components: List[Component]
    style_guide: Optional[str]
    summary: str


class ScreenExecutor:
    def __init__(
        self,
        generator: ComponentGenerator,
        stagger_seconds: float = 0.3,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.generator = generator
        self.stagger_seconds = stagger_seconds
        self.id_factory = id_factory

    async def execute(
        self,
        action: ScreenAction,
        screen: Optional[Screen],
        emit: StatusCallback = ignore_status,
    ) -> ExecutionResult:
        match action:
            case CreateScreen():
                return await self._create_screen(action, emit)
            case UpdateComponents():
                return await self._update_components(action, screen, emit)
            case RegenerateScreen():
                return await self._regenerate_screen(action, screen, emit)
        raise TypeError(f"Unsupported action: {type(action).__name__}")

    # ==========================================================================
    # Actions
    # ==========================================================================

    async def _create_screen(
        self, action: CreateScreen, emit: StatusCallback
    ) -> ExecutionResult:
        emit(f"Breaking down into {len(action.components)} components...")

        async def build(index: int, spec: ComponentSpec) -> Component:
            component_id = self.id_factory()
            await self._stagger(index)
            emit(f"Generating {spec.name}...")
            html = await self.generator.generate(
                render(
                    Template.CREATE_COMPONENT,
                    spec=spec,
                    screen_description=action.screen_description,
                ),
                action.style_guide,
            )
            return self._new_component(component_id, spec, index, html)

        components = await self._gather(
            build(i, spec) for i, spec in enumerate(action.components)
        )

        names = ", ".join(c.name for c in components)
        return ExecutionResult(
            components=components,
            # Saved so future updates keep the same look.
            style_guide=action.style_guide,
            summary=f"Generated a new screen with {len(components)} components: {names}.",
        )

    async def _update_components(
        self, action: UpdateComponents, screen: Optional[Screen], emit: StatusCallback
    ) -> ExecutionResult:
        current = screen.components if screen else []
        style_guide = screen.style_guide if screen else None
        by_id = {c.id: c for c in current}

        instructions: Dict[str, str] = {}
        for update in action.updates:
            if update.component_id not in by_id:
                logger.warning(f"Ignoring update for unknown component '{update.component_id}'")
                continue
            instructions[update.component_id] = update.instruction

        target_names = ", ".join(by_id[cid].name for cid in instructions) or "components"
        emit(f"Updating {target_names}...")

        async def rewrite(component: Component) -> Component:
            instruction = instructions.get(component.id)
            if instruction is None:
                return component  # untouched, keep as-is
            emit(f"Rewriting {component.name}...")
            html = await self.generator.generate(
                render(
                    Template.UPDATE_COMPONENT,
                    instruction=instruction,
                    html=component.html,
                ),
                style_guide,
            )
            return component.model_copy(update={"html": html})

        components = await self._gather(rewrite(c) for c in current)

        described = ", ".join(
            f"{by_id[u.component_id].name} ({u.instruction})"
            if u.component_id in by_id else u.component_id
            for u in action.updates
        )
        count = len(action.updates)
        return ExecutionResult(
            components=components,
            style_guide=style_guide,
            summary=f"Updated {count} component{'' if count == 1 else 's'}: {described}.",
        )

    async def _regenerate_screen(
        self, action: RegenerateScreen, screen: Optional[Screen], emit: StatusCallback
    ) -> ExecutionResult:
        current = {c.id: c for c in screen.components} if screen else {}
        style_guide = screen.style_guide if screen else None

        emit(f"Restructuring layout with {len(action.components)} components...")

        kept_names: List[str] = []
        created_names: List[str] = []
        for spec in action.components:
            if spec.keep_from_id and spec.keep_from_id in current:
                kept_names.append(spec.name)
            else:
                created_names.append(spec.name)

        # A component kept twice only keeps its id once; ids stay unique.
        claimed: Set[str] = set()

        async def build(index: int, spec: RegeneratedComponentSpec) -> Component:
            existing = current.get(spec.keep_from_id) if spec.keep_from_id else None
            if existing is not None:
                # Reuse the HTML as-is, no generation call.
                component_id = existing.id if existing.id not in claimed else self.id_factory()
                claimed.add(existing.id)
                return existing.model_copy(update={
                    "id": component_id,
                    "order": index,
                    "name": spec.name,
                    "type": spec.type,
                    "description": spec.description,
                })

            component_id = self.id_factory()
            await self._stagger(index)
            emit(f"Generating {spec.name}...")
            html = await self.generator.generate(
                render(
                    Template.REGENERATE_COMPONENT,
                    spec=spec,
                    instruction=action.instruction,
                ),
                style_guide,
            )
            return self._new_component(component_id, spec, index, html)

        components = await self._gather(
            build(i, spec) for i, spec in enumerate(action.components)
        )

        parts = []
        if kept_names:
            parts.append(f"kept {', '.join(kept_names)}")
        if created_names:
            parts.append(f"created {', '.join(created_names)}")
        return ExecutionResult(
            components=components,
            style_guide=style_guide,
            summary=(
                f"Restructured the screen ({'; '.join(parts)}). "
                f"{len(components)} components total."
            ),
        )

    # ==========================================================================
    # Helpers
    # ==========================================================================

    async def _gather(self, coroutines: Iterable[Awaitable[Component]]) -> List[Component]:
        """
        Runs the generations concurrently and returns them in submission order.

        When one fails, the ones still in flight are cancelled before the
        error propagates, so no further generation calls are made.
        """
        tasks = [asyncio.ensure_future(coro) for coro in coroutines]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _stagger(self, index: int) -> None:
        # Small delay between parallel calls to avoid overwhelming the API.
        if index and self.stagger_seconds:
            await asyncio.sleep(index * self.stagger_seconds)

    def _new_component(
        self, component_id: str, spec: ComponentSpec, index: int, html: str
    ) -> Component:
        return Component(
            id=component_id,
            order=index,
            name=spec.name,
            type=spec.type,
            description=spec.description,
            html=html,
        )
