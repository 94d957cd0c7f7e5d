import pytest

from zenrows_fetch.config.settings import get_settings
from zenrows_fetch.models.scraping import BackendResponse, FetchOptions


class ScriptedFetcher:
    """Fake transport returning one scripted outcome per call, in order."""

    def __init__(self, outcomes: list):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, FetchOptions]] = []

    async def fetch(self, url: str, options: FetchOptions) -> BackendResponse:
        self.calls.append((url, options))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome(url, options)
        return outcome


@pytest.fixture
def scripted_fetcher():
    return ScriptedFetcher


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def api_key_env(monkeypatch):
    monkeypatch.setenv("ZENROWS_API_KEY", "test-key")
    return "test-key"
