from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Security: Read from .env, never hardcode defaults here
    OPENAI_API_KEY: str
    OPENAI_BASE_URL: str | None = None

    # Model Configuration
    # The router only picks an action, so a fast model is enough there.
    ROUTER_MODEL: str = "gpt-4o-mini"
    GENERATOR_MODEL: str = "gpt-4o"

    # Generation Parameters
    LLM_TEMPERATURE: float = 0.0
    GENERATION_MAX_ATTEMPTS: int = 3
    GENERATION_BACKOFF_SECONDS: float = 1.0   # multiplied by the attempt number
    GENERATION_STAGGER_SECONDS: float = 0.3   # multiplied by the component index

    # Session Configuration
    SESSION_TTL_SECONDS: int = 24 * 60 * 60   # state-layer inactivity window
    SESSION_COOKIE_NAME: str = "screen_session_id"
    SESSION_COOKIE_MAX_AGE_SECONDS: int = 7 * 24 * 60 * 60
    SESSION_COOKIE_SECURE: bool = False

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
