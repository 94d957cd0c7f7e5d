from urllib.parse import urlparse


def extract_domain(url: str) -> str:
    """Host part of *url* for log context, without "www." and port.

    Returns "" for URLs urlparse rejects; validating them is left to ZenRows.
    """
    try:
        parsed = urlparse(url if "//" in url else f"//{url}")
        host = (parsed.hostname or "").lower()
    except ValueError:
        return ""
    return host.removeprefix("www.")
