"""
Screen Service - Application Orchestration Layer

This service is the entry point for all session operations. It orchestrates
the interaction between the Data Layer (SessionRepository), the Logic Layer
(ScreenEngine) and the transport. It ensures that sessions are loaded,
processed and saved correctly:

- The store is written only after a pipeline run fully succeeds.
- Runs for the same session id are serialised; different ids run concurrently.
- Expired sessions are swept opportunistically at every entry point.
"""

import asyncio
import logging
from typing import AsyncIterator, Dict, Set

from ..execution.engine import ScreenEngine
from ..repositories.session import SessionRepository
from ..state.models import SessionState
from ..streaming.events import StreamEvent
from ..streaming.reporter import ProgressReporter
from .exceptions import InvalidInputError, ScreenBuilderError

logger = logging.getLogger(__name__)

GENERIC_GENERATION_ERROR = "An unexpected error occurred during generation."


class ScreenService:
    def __init__(self, session_repository: SessionRepository, engine: ScreenEngine):
        self.session_repo = session_repository
        self.engine = engine
        self._locks: Dict[str, asyncio.Lock] = {}
        # Strong references so detached runs are not garbage collected mid-flight.
        self._runs: Set[asyncio.Task] = set()

    def read_session(self, session_id: str) -> SessionState:
        """Returns the session, creating an empty one if needed."""
        self.sweep()
        return self.session_repo.get(session_id)

    def reset_session(self, session_id: str):
        """Clears the caller's own session only."""
        self.sweep()
        self.session_repo.reset(session_id)

    def submit_prompt(self, session_id: str, prompt: str) -> AsyncIterator[StreamEvent]:
        """
        Validates the prompt and starts the pipeline run in the background.

        Returns the event stream of the run: status events, then exactly one
        `done` or `error` event. The run is not cancelled if the consumer stops
        reading; the session is still updated on success.

        Raises:
            InvalidInputError: before any session access if the prompt is unusable.
        """
        reporter = self.start_run(session_id, prompt)
        return reporter.events()

    def start_run(self, session_id: str, prompt: str) -> ProgressReporter:
        text = validate_prompt(prompt)
        self.sweep()

        reporter = ProgressReporter()
        task = asyncio.create_task(self._run(session_id, text, reporter))
        self._runs.add(task)
        task.add_done_callback(self._runs.discard)
        return reporter

    def sweep(self):
        removed = self.session_repo.sweep()
        for session_id in removed:
            lock = self._locks.get(session_id)
            if lock is not None and not lock.locked():
                del self._locks[session_id]

    async def _run(self, session_id: str, prompt: str, reporter: ProgressReporter):
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            try:
                session = self.session_repo.get(session_id)
                updated = await self.engine.process_prompt(prompt, session, reporter.status)
                self.session_repo.update(session_id, updated)
            except ScreenBuilderError as e:
                logger.warning(f"Pipeline run failed for session {session_id}: {e}")
                reporter.fail(str(e))
                return
            except Exception:
                logger.exception(f"Unexpected error in pipeline run for session {session_id}")
                reporter.fail(GENERIC_GENERATION_ERROR)
                return

            reporter.done(updated)


def validate_prompt(prompt: object) -> str:
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidInputError("Invalid or missing 'prompt' field in request body.")
    return prompt.strip()
