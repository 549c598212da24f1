from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Annotated, Any
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"

    # Redis connection URL for caching distance lookups. Empty/none/disabled
    # switches to a no-op client.
    REDIS_URL: str = "redis://localhost:6379/0"
    # Short socket timeouts keep a slow Redis off the quote path.
    REDIS_CONNECT_TIMEOUT: float = 0.5
    REDIS_SOCKET_TIMEOUT: float = 0.5

    # CORS origins for the embeddable widget hosts
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]
    CORS_ALLOW_ALL: bool = False

    # Distance Matrix key. The frontend key is accepted as a fallback so a
    # shared `.env` works for both apps.
    GOOGLE_MAPS_API_KEY: str = ""
    NEXT_PUBLIC_GOOGLE_MAPS_API_KEY: str = ""

    # auto | google | mock
    DISTANCE_PROVIDER: str = "auto"
    DISTANCE_TIMEOUT: float = 8.0
    DISTANCE_CACHE_TTL: int = 900

    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_RANGE_MULTIPLIER: float = 1.2

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator(
        "GOOGLE_MAPS_API_KEY",
        "NEXT_PUBLIC_GOOGLE_MAPS_API_KEY",
        "DISTANCE_PROVIDER",
        "DEFAULT_CURRENCY",
        "REDIS_URL",
        mode="before",
    )
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="after")
    def allow_all_if_requested(self) -> "Settings":
        if self.CORS_ALLOW_ALL:
            self.CORS_ORIGINS = ["*"]
        return self

    @property
    def maps_api_key(self) -> str:
        return self.GOOGLE_MAPS_API_KEY or self.NEXT_PUBLIC_GOOGLE_MAPS_API_KEY


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
