"""
Dependency Injection Wiring (Composition Root).

Builds the process-wide singletons (LLM adapters, router, executor, session
repository, engine, service) and hands them to the routes through FastAPI
`Depends`. Each factory is wrapped in `@lru_cache` so the in-memory session
repository, and therefore every session, survives across requests.

This is the only place that reads `settings`; everything below it receives
plain constructor arguments. Tests swap whole services in through
`app.dependency_overrides`.
"""


from functools import lru_cache
from fastapi import Depends

from ..config import settings
from ..llm.interface import LLMProvider
from ..llm.adapters.openai_adapter import OpenAIAdapter
from ..repositories.session import SessionRepository, InMemorySessionRepository
from ..execution.engine import ScreenEngine
from ..execution.executor import ScreenExecutor
from ..execution.generator import ComponentGenerator
from ..services.screen_router import ScreenRouter, LLMScreenRouter
from ..services.screen_service import ScreenService
from .session_cookie import SessionCookie

# Router LLM (Singleton) - fast model, only picks the action
@lru_cache()
def get_router_llm() -> LLMProvider:
    return OpenAIAdapter(
        api_key=settings.OPENAI_API_KEY,
        model_name=settings.ROUTER_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )

# Generator LLM (Singleton) - writes component HTML
@lru_cache()
def get_generator_llm() -> LLMProvider:
    return OpenAIAdapter(
        api_key=settings.OPENAI_API_KEY,
        model_name=settings.GENERATOR_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )

@lru_cache()
def get_screen_router(
    llm: LLMProvider = Depends(get_router_llm)
) -> ScreenRouter:
    return LLMScreenRouter(llm, temperature=settings.LLM_TEMPERATURE)

@lru_cache()
def get_screen_executor(
    llm: LLMProvider = Depends(get_generator_llm)
) -> ScreenExecutor:
    generator = ComponentGenerator(
        llm,
        max_attempts=settings.GENERATION_MAX_ATTEMPTS,
        backoff_seconds=settings.GENERATION_BACKOFF_SECONDS,
        temperature=settings.LLM_TEMPERATURE,
    )
    return ScreenExecutor(generator, stagger_seconds=settings.GENERATION_STAGGER_SECONDS)

# Session Repository (Singleton)
# Note: In-memory storage must be a singleton so data persists across requests!
@lru_cache()
def get_session_repository() -> SessionRepository:
    return InMemorySessionRepository(ttl_seconds=settings.SESSION_TTL_SECONDS)

# The Engine (Singleton Service)
@lru_cache()
def get_screen_engine(
    router: ScreenRouter = Depends(get_screen_router),
    executor: ScreenExecutor = Depends(get_screen_executor)
) -> ScreenEngine:
    return ScreenEngine(router=router, executor=executor)

# The Screen Service (Singleton Service)
@lru_cache()
def get_screen_service(
    session_repo: SessionRepository = Depends(get_session_repository),
    engine: ScreenEngine = Depends(get_screen_engine)
) -> ScreenService:
    """
    Injects all necessary components into the ScreenService.
    """
    return ScreenService(session_repository=session_repo, engine=engine)

@lru_cache()
def get_session_cookie() -> SessionCookie:
    return SessionCookie(
        name=settings.SESSION_COOKIE_NAME,
        max_age_seconds=settings.SESSION_COOKIE_MAX_AGE_SECONDS,
        secure=settings.SESSION_COOKIE_SECURE,
    )
