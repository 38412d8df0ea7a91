import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..state.models import SessionState

logger = logging.getLogger(__name__)


class SessionRepository(ABC):
    """
    Defines how the application accesses sessions.
    This allows us change how data is stored (Memory -> Redis -> SQL) later
    without changing the ScreenService code.

    State is always replaced wholesale; callers never patch a stored state.
    """

    @abstractmethod
    def get(self, session_id: str) -> SessionState:
        """
        Returns the live state for the id, creating an empty one if the id is
        unknown or expired. Refreshes the activity timestamp.
        """
        pass

    @abstractmethod
    def update(self, session_id: str, state: SessionState):
        """Replaces the stored state and refreshes the activity timestamp."""
        pass

    @abstractmethod
    def reset(self, session_id: str):
        """Replaces the stored state with an empty one."""
        pass

    @abstractmethod
    def sweep(self, now: Optional[float] = None) -> List[str]:
        """Deletes every expired record. Returns the ids that were removed."""
        pass


@dataclass
class SessionRecord:
    state: SessionState
    last_activity: float


class InMemorySessionRepository(SessionRepository):
    """
    Process-local dictionary with a sliding inactivity window.

    Expired records read back as empty immediately, but are only physically
    removed by sweep(), which callers run opportunistically.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: Dict[str, SessionRecord] = {}

    def get(self, session_id: str) -> SessionState:
        now = self._clock()
        existing = self._store.get(session_id)

        if existing is None or self._is_expired(existing, now):
            fresh = SessionState.empty()
            self._touch(session_id, fresh, now)
            return fresh

        # Refresh activity timestamp on read to keep active sessions alive.
        self._touch(session_id, existing.state, now)
        return existing.state

    def update(self, session_id: str, state: SessionState):
        self._touch(session_id, state, self._clock())

    def reset(self, session_id: str):
        self._touch(session_id, SessionState.empty(), self._clock())

    def sweep(self, now: Optional[float] = None) -> List[str]:
        now = self._clock() if now is None else now
        expired = [
            session_id
            for session_id, record in self._store.items()
            if self._is_expired(record, now)
        ]
        for session_id in expired:
            del self._store[session_id]

        if expired:
            logger.info(f"Swept {len(expired)} expired sessions")
        return expired

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._store

    def __len__(self) -> int:
        return len(self._store)

    def _touch(self, session_id: str, state: SessionState, now: float):
        self._store[session_id] = SessionRecord(state=state, last_activity=now)

    def _is_expired(self, record: SessionRecord, now: float) -> bool:
        return now - record.last_activity > self.ttl_seconds
