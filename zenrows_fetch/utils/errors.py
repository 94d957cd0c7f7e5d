class ScrapeError(Exception):
    """Base exception for scraping errors."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class FetchError(ScrapeError):
    """Raised when a single tier attempt fails (network, timeout, non-text body)."""

    def __init__(self, message: str, tier: str = "", **kwargs: str):
        self.tier = tier
        super().__init__(message, **kwargs)


class BlockedError(FetchError):
    """Raised when a response is unusable: error status or a block page."""

    def __init__(self, message: str, status_code: int = 0, **kwargs: str):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class AllTiersExhaustedError(ScrapeError):
    """Raised when every tier of the ladder failed for a URL."""

    def __init__(
        self,
        message: str,
        last_tier: str = "",
        errors: list[FetchError] | None = None,
        **kwargs: str,
    ):
        self.last_tier = last_tier
        self.errors = errors or []
        super().__init__(message, **kwargs)

    @property
    def last_error(self) -> FetchError | None:
        return self.errors[-1] if self.errors else None


class ToolCallError(Exception):
    """Raised from the MCP call_tool handler to produce an isError result."""
