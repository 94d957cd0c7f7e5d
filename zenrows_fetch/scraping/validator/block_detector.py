from zenrows_fetch.config.constants import BLOCK_INDICATORS


def body_looks_blocked(body: str) -> bool:
    """Check if a nominally successful body is an anti-bot or denial page.

    Plain case-insensitive substring match, so an article that merely mentions
    "captcha" or "forbidden" is flagged too.
    """
    body_lower = body.lower()
    return any(indicator in body_lower for indicator in BLOCK_INDICATORS)
