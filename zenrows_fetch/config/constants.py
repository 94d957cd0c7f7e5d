# Per-request prices (EUR) from the ZenRows pricing page.
# premium_proxy is x10; premium_proxy + js_render is x25 (cumulative).
TIER_COSTS: dict[str, float] = {
    "basic": 0.00027996,
    "premium": 0.0027996,
    "stealth": 0.006999,
    "wait": 0.006999,
}

BLOCK_INDICATORS: tuple[str, ...] = (
    "access denied",
    "not allowed",
    "forbidden",
    "cloudflare",
    "captcha",
)

RESPONSE_TYPE = "markdown"
DEFAULT_WAIT_MS = 2500
DEFAULT_TIER_TIMEOUT = 90.0  # seconds

ZENROWS_API_URL = "https://api.zenrows.com/v1/"

SERVER_NAME = "zenrows-fetch-server"
SERVER_VERSION = "0.1.0"
TOOL_NAME = "zenrowsFetch"
