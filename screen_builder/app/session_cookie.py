"""
Session identifier delivery.

The session id travels in an HttpOnly cookie. When a request arrives
without one, a new id is minted and the response sets the cookie. The
cookie lifetime is independent of (and longer than) the store's inactivity
window.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Request, Response


def create_session_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SessionCookie:
    name: str
    max_age_seconds: int
    secure: bool = False

    def read(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.name) or None

    def resolve(self, request: Request) -> Tuple[str, bool]:
        """Returns (session_id, is_new). New ids must be set on the response."""
        existing = self.read(request)
        if existing:
            return existing, False
        return create_session_id(), True

    def attach(self, response: Response, session_id: str):
        response.set_cookie(
            key=self.name,
            value=session_id,
            max_age=self.max_age_seconds,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
