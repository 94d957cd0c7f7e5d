from zenrows_fetch.config.constants import DEFAULT_WAIT_MS
from zenrows_fetch.models.scraping import FetchOptions, ScrapingTier


def build_ladder(wait_ms: int = DEFAULT_WAIT_MS) -> tuple[tuple[ScrapingTier, FetchOptions], ...]:
    """Cheap-to-expensive attempt ladder. Each rung augments the previous one."""
    basic = FetchOptions()
    premium = basic.model_copy(update={"premium_proxy": True})
    stealth = premium.model_copy(update={"js_render": True})
    wait = stealth.model_copy(update={"wait": wait_ms})
    return (
        (ScrapingTier.BASIC, basic),
        (ScrapingTier.PREMIUM, premium),
        (ScrapingTier.STEALTH, stealth),
        (ScrapingTier.WAIT, wait),
    )


LADDER = build_ladder()


def effective_options(options: FetchOptions, selector: str | None = None) -> FetchOptions:
    """Overlay selector-driven options on a tier's configuration.

    The tier keeps every option it sets; a selector always forces js_render.
    """
    if not selector:
        return options
    merged = {"wait_for": selector, **options.model_dump(exclude_none=True)}
    merged["js_render"] = True
    return FetchOptions(**merged)
