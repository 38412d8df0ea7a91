"""
Engine - Screen Orchestration Layer

The ScreenEngine runs one prompt through the two-phase flow:

1. ROUTER: classifies the transcript + current screen into exactly one
   action (create, update, regenerate).
2. EXECUTOR: performs that action, generating component HTML as needed.

Both paths converge on the same tail: assemble the document, append the
assistant summary to the transcript and return a brand new SessionState.
The input state is never mutated, so a failure anywhere leaves the caller
holding the previous state.
"""

import logging

from ..services.screen_router import ScreenRouter
from ..state.models import Message, Screen, SessionState
from .assembler import assemble_screen
from .executor import ScreenExecutor, StatusCallback, ignore_status

logger = logging.getLogger(__name__)


class ScreenEngine:
    def __init__(self, router: ScreenRouter, executor: ScreenExecutor):
        self.router = router
        self.executor = executor

    async def process_prompt(
        self,
        user_prompt: str,
        session: SessionState,
        emit: StatusCallback = ignore_status,
    ) -> SessionState:
        """
        The Orchestrator.

        Returns the replacement SessionState. Raises RoutingFailure or
        GenerationFailure without side effects on `session`.
        """
        history = [*session.messages, Message(role="user", content=user_prompt)]

        # PHASE 1: ROUTER
        emit("Analyzing your request...")
        action = await self.router.route(history, session.screen)

        # PHASE 2: EXECUTOR
        result = await self.executor.execute(action, session.screen, emit)

        # Assemble the final HTML document from all components.
        emit("Assembling final screen...")
        screen = Screen(
            components=result.components,
            assembled_html=assemble_screen(result.components),
            style_guide=result.style_guide,
        )
        logger.info(
            f"Action '{action.action}' produced {len(result.components)} components"
        )

        return SessionState(
            messages=[
                *history,
                Message(role="assistant", content=result.summary or "Done!"),
            ],
            screen=screen,
        )
