from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from zenrows_fetch.config.constants import DEFAULT_TIER_TIMEOUT, DEFAULT_WAIT_MS, ZENROWS_API_URL


class Settings(BaseSettings):
    log_level: str = "info"

    zenrows_api_key: str = Field(..., description="ZenRows secret key (required)")
    zenrows_api_url: str = ZENROWS_API_URL
    zenrows_tier_timeout: float = Field(DEFAULT_TIER_TIMEOUT, gt=0)
    zenrows_wait_ms: int = Field(DEFAULT_WAIT_MS, ge=0)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("zenrows_api_key")
    @classmethod
    def strip_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ZENROWS_API_KEY must not be blank")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
