import logging
from typing import AsyncIterator

from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from ..config import settings
from ..services.exceptions import InvalidInputError
from ..services.screen_service import ScreenService
from ..streaming.codec import SSE_CONTENT_TYPE, encode_event
from ..streaming.events import StreamEvent
from .dependencies import get_screen_service, get_session_cookie
from .schemas import ErrorResponse, ResetResponse, SessionRead
from .session_cookie import SessionCookie

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Screen Builder")


def error_message(error: Exception, fallback: str) -> str:
    return str(error).strip() or fallback


async def _encode_stream(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    async for event in events:
        yield encode_event(event)

# --- Endpoints ---

@app.post(
    "/api/generate",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def generate(
    request: Request,
    service: ScreenService = Depends(get_screen_service),
    cookie: SessionCookie = Depends(get_session_cookie)
):
    """
    Runs the prompt through the pipeline and streams progress as SSE:
    `status` events, then a single `done` (screen + messages) or `error`.
    """
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid JSON body."},
        )

    prompt = body.get("prompt") if isinstance(body, dict) else None
    session_id, is_new = cookie.resolve(request)

    try:
        events = service.submit_prompt(session_id, prompt)
    except InvalidInputError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )

    response = StreamingResponse(
        _encode_stream(events),
        media_type=SSE_CONTENT_TYPE,
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
            "Connection": "keep-alive",
        },
    )
    if is_new:
        cookie.attach(response, session_id)
    return response


@app.get(
    "/api/session",
    response_model=SessionRead,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def read_session(
    request: Request,
    service: ScreenService = Depends(get_screen_service),
    cookie: SessionCookie = Depends(get_session_cookie)
):
    """Returns the caller's screen and transcript, minting a session if needed."""
    session_id, is_new = cookie.resolve(request)
    try:
        session = service.read_session(session_id)
    except Exception as e:
        logger.exception("Failed to read session")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": error_message(e, "Failed to read session.")},
        )

    payload = SessionRead(screen=session.screen, messages=session.messages)
    response = JSONResponse(content=payload.model_dump(mode="json"))
    if is_new:
        cookie.attach(response, session_id)
    return response


@app.post(
    "/api/reset",
    response_model=ResetResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def reset_session(
    request: Request,
    service: ScreenService = Depends(get_screen_service),
    cookie: SessionCookie = Depends(get_session_cookie)
):
    """Resets only the caller's session. Without a cookie there is nothing to reset."""
    try:
        session_id = cookie.read(request)
        if session_id:
            service.reset_session(session_id)
        else:
            service.sweep()
    except Exception as e:
        logger.exception("Failed to reset session")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": error_message(e, "Failed to reset session state.")},
        )

    return ResetResponse(success=True)
