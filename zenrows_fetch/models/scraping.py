from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from zenrows_fetch.config.constants import RESPONSE_TYPE


class ScrapingTier(StrEnum):
    BASIC = "basic"
    PREMIUM = "premium"
    STEALTH = "stealth"
    WAIT = "wait"


class FetchOptions(BaseModel):
    """ZenRows request options for a single attempt."""

    model_config = ConfigDict(frozen=True)

    response_type: str = RESPONSE_TYPE
    premium_proxy: bool | None = None
    js_render: bool | None = None
    wait: int | None = None
    wait_for: str | None = None

    def to_params(self) -> dict[str, str]:
        """Query parameters for the ZenRows API, unset options omitted."""
        params: dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = str(value)
        return params

    def enabled_flags(self) -> set[str]:
        return {key for key, value in self.model_dump(exclude_none=True).items() if value is not False}


class FetchRequest(BaseModel):
    url: str
    selector: str | None = None

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be empty")
        return value

    @field_validator("selector")
    @classmethod
    def blank_selector_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class BackendResponse(BaseModel):
    """Transport reply normalised to status + text."""

    status_code: int
    body: str


class TierAttempt(BaseModel):
    tier: ScrapingTier
    status_code: int | None = None
    error: str | None = None
    duration_ms: int = 0


class FetchResult(BaseModel):
    url: str
    body: str
    tier_used: ScrapingTier
    cost_eur: float
    duration_ms: int
    attempts: list[TierAttempt] = []
