import asyncio
import time
from typing import Protocol

import structlog

from zenrows_fetch.config.constants import DEFAULT_TIER_TIMEOUT, TIER_COSTS
from zenrows_fetch.models.scraping import (
    BackendResponse,
    FetchOptions,
    FetchResult,
    ScrapingTier,
    TierAttempt,
)
from zenrows_fetch.scraping.ladder import LADDER, effective_options
from zenrows_fetch.scraping.validator.block_detector import body_looks_blocked
from zenrows_fetch.utils.errors import AllTiersExhaustedError, BlockedError, FetchError
from zenrows_fetch.utils.url import extract_domain

log = structlog.get_logger()


class PageFetcher(Protocol):
    async def fetch(self, url: str, options: FetchOptions) -> BackendResponse: ...


class EscalationService:
    """Walks the tier ladder cheapest-first until a usable response comes back."""

    def __init__(
        self,
        fetcher: PageFetcher,
        ladder: tuple[tuple[ScrapingTier, FetchOptions], ...] = LADDER,
        tier_timeout: float = DEFAULT_TIER_TIMEOUT,
    ):
        self.fetcher = fetcher
        self.ladder = ladder
        self.tier_timeout = tier_timeout

    def should_escalate(self, response: BackendResponse) -> bool:
        """Determine if the response is unusable and the next tier should run."""
        return response.status_code >= 400 or body_looks_blocked(response.body)

    async def progressive_fetch(self, url: str, selector: str | None = None) -> FetchResult:
        """Fetch *url*, escalating through the ladder one tier at a time.

        Every per-tier failure is recorded and escalated; only exhausting the
        ladder raises (AllTiersExhaustedError). A cancelled attempt counts as a
        tier failure; cancelling the caller stops the ladder immediately.
        """
        bound = log.bind(domain=extract_domain(url), selector=selector)
        start = time.time()
        attempts: list[TierAttempt] = []
        errors: list[FetchError] = []
        last_tier = ""

        for tier, tier_options in self.ladder:
            last_tier = tier.value
            options = effective_options(tier_options, selector)
            tier_start = time.time()
            status_code: int | None = None
            bound.info("tier_attempt", tier=tier.value, flags=sorted(options.enabled_flags()))

            try:
                response = await asyncio.wait_for(
                    self.fetcher.fetch(url, options), timeout=self.tier_timeout
                )
                status_code = response.status_code
                if self.should_escalate(response):
                    raise BlockedError(
                        f"Received unusable response on tier '{tier.value}' (status={status_code})",
                        status_code=status_code,
                        tier=tier.value,
                        url=url,
                    )
            except FetchError as e:
                e.tier = e.tier or tier.value
                error = e
            except TimeoutError as e:
                error = FetchError(
                    f"Tier '{tier.value}' timed out after {self.tier_timeout}s", tier=tier.value, url=url
                )
                error.__cause__ = e
            except asyncio.CancelledError as e:
                # Only the attempt was cancelled unless our own task is being cancelled.
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                error = FetchError(f"Tier '{tier.value}' attempt was cancelled", tier=tier.value, url=url)
                error.__cause__ = e
            except Exception as e:
                error = FetchError(f"{type(e).__name__}: {e}", tier=tier.value, url=url)
                error.__cause__ = e
            else:
                duration_ms = int((time.time() - start) * 1000)
                attempts.append(
                    TierAttempt(
                        tier=tier,
                        status_code=status_code,
                        duration_ms=int((time.time() - tier_start) * 1000),
                    )
                )
                result = FetchResult(
                    url=url,
                    body=response.body,
                    tier_used=tier,
                    cost_eur=TIER_COSTS.get(tier.value, 0.0),
                    duration_ms=duration_ms,
                    attempts=attempts,
                )
                bound.info(
                    "escalation_result",
                    tier=tier.value,
                    cost_eur=result.cost_eur,
                    attempts=len(attempts),
                    duration_ms=duration_ms,
                )
                return result

            errors.append(error)
            attempts.append(
                TierAttempt(
                    tier=tier,
                    status_code=status_code,
                    error=str(error),
                    duration_ms=int((time.time() - tier_start) * 1000),
                )
            )
            bound.warning("tier_failed", tier=tier.value, status=status_code, error=str(error))

        last_error = errors[-1] if errors else None
        bound.error("ladder_exhausted", last_tier=last_tier, attempts=len(attempts))
        raise AllTiersExhaustedError(
            f"All ZenRows strategies failed (last tier '{last_tier}'): {last_error}",
            last_tier=last_tier,
            errors=errors,
            url=url,
        )
