# core/config.py
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    GEMINI_MODEL_NAME: str = Field(default="gemini-2.5-flash")
    GEMINI_TEMP: float = Field(default=0.7, gt=0.0, le=2.0)

    # The browser build read API_KEY; GEMINI_API_KEY wins when both are set
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    GEMINI_CACHE_MAXSIZE: int = Field(default=128)
    GEMINI_CACHE_TTL: int = Field(default=3600) # TTL in seconds (e.g., 1 hour)

    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )
    TIMER_TICK_SECONDS: float = Field(default=1.0, gt=0.0)
    COPY_NOTICE_SECONDS: float = Field(default=2.0, gt=0.0)

    class Config:
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
