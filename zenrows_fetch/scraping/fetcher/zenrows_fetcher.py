import httpx
import structlog

from zenrows_fetch.config.constants import DEFAULT_TIER_TIMEOUT, ZENROWS_API_URL
from zenrows_fetch.models.scraping import BackendResponse, FetchOptions
from zenrows_fetch.utils.errors import FetchError

log = structlog.get_logger()

_TEXTUAL_TYPES = ("json", "xml", "markdown", "javascript")


def _is_textual(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return True
    return media_type.startswith("text/") or any(t in media_type for t in _TEXTUAL_TYPES)


class ZenRowsFetcher:
    """Async client for the ZenRows universal scraper API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = ZENROWS_API_URL,
        timeout: float = DEFAULT_TIER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str, options: FetchOptions) -> BackendResponse:
        """Fetch *url* through ZenRows. Raises FetchError on transport failure."""
        params = {"apikey": self.api_key, "url": url, **options.to_params()}

        try:
            r = await self._client.get(self.api_url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"ZenRows request failed: {type(e).__name__}: {e}", url=url) from e

        content_type = r.headers.get("content-type", "")
        if not _is_textual(content_type):
            raise FetchError(f"Non-text response from ZenRows ({content_type})", url=url)

        log.debug(
            "zenrows_response",
            url=url,
            status=r.status_code,
            content_type=content_type,
            length=len(r.text),
        )
        return BackendResponse(status_code=r.status_code, body=r.text)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ZenRowsFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
