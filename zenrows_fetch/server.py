"""MCP server over stdio exposing the zenrowsFetch tool.

Usage:
    ZENROWS_API_KEY=... zenrows-fetch                      # serve on stdio
    ZENROWS_API_KEY=... zenrows-fetch fetch URL [SELECTOR]  # one-shot fetch
"""

import asyncio
import sys

import structlog
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import ValidationError

from zenrows_fetch.api.tool import ToolHandler
from zenrows_fetch.config.constants import SERVER_NAME, SERVER_VERSION
from zenrows_fetch.config.settings import Settings, get_settings
from zenrows_fetch.scraping.fetcher.zenrows_fetcher import ZenRowsFetcher
from zenrows_fetch.scraping.ladder import build_ladder
from zenrows_fetch.services.escalation import EscalationService
from zenrows_fetch.utils.errors import AllTiersExhaustedError
from zenrows_fetch.utils.logger import setup_logging

log = structlog.get_logger()

USAGE = "usage: zenrows-fetch [fetch URL [SELECTOR]]"


def create_server(handler: ToolHandler) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)
    server.list_tools()(handler.list_tools)
    server.call_tool()(handler.call_tool)
    return server


def create_fetcher(settings: Settings) -> ZenRowsFetcher:
    return ZenRowsFetcher(
        settings.zenrows_api_key,
        api_url=settings.zenrows_api_url,
        timeout=settings.zenrows_tier_timeout,
    )


def create_service(settings: Settings, fetcher: ZenRowsFetcher) -> EscalationService:
    return EscalationService(
        fetcher,
        ladder=build_ladder(settings.zenrows_wait_ms),
        tier_timeout=settings.zenrows_tier_timeout,
    )


async def serve(settings: Settings) -> None:
    async with create_fetcher(settings) as fetcher:
        server = create_server(ToolHandler(create_service(settings, fetcher)))
        async with stdio_server() as (read_stream, write_stream):
            log.info("ZenRows MCP server running on stdio", name=SERVER_NAME, version=SERVER_VERSION)
            await server.run(read_stream, write_stream, server.create_initialization_options())


async def fetch_once(settings: Settings, url: str, selector: str | None = None) -> int:
    """Run the ladder once for *url*; body to stdout, tier to stderr."""
    async with create_fetcher(settings) as fetcher:
        service = create_service(settings, fetcher)
        try:
            result = await service.progressive_fetch(url, selector)
        except AllTiersExhaustedError as e:
            print(f"ZenRows fetch failed: {e}", file=sys.stderr)
            return 1

    print(result.body)
    print(f"tier={result.tier_used.value} cost_eur={result.cost_eur}", file=sys.stderr)
    return 0


def describe_settings_error(exc: ValidationError) -> str:
    """Startup message naming the environment variables that failed validation."""
    missing = [str(err["loc"][0]).upper() for err in exc.errors() if err["type"] == "missing"]
    invalid = [
        str(err["loc"][0]).upper() if err["loc"] else "configuration"
        for err in exc.errors()
        if err["type"] != "missing"
    ]
    parts = []
    if missing:
        parts.append(f"{', '.join(missing)} environment variable not set")
    if invalid:
        parts.append(f"invalid value for {', '.join(invalid)}")
    return f"{'; '.join(parts)}. Exiting..."


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        log.error(describe_settings_error(e), errors=[err["msg"] for err in e.errors()])
        return 1

    setup_logging(settings.log_level)

    if argv and argv[0] == "fetch":
        if len(argv) < 2 or len(argv) > 3:
            print(USAGE, file=sys.stderr)
            return 2
        selector = argv[2] if len(argv) == 3 else None
        return asyncio.run(fetch_once(settings, argv[1], selector))

    if argv:
        print(USAGE, file=sys.stderr)
        return 2

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        return 0
    except Exception:
        log.exception("server_fatal")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
