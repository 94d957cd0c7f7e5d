"""MCP tool surface: the zenrowsFetch definition and its request handler."""

from typing import Any

import mcp.types as types
import structlog
from pydantic import BaseModel, ValidationError

from zenrows_fetch.config.constants import TOOL_NAME
from zenrows_fetch.models.scraping import FetchRequest
from zenrows_fetch.services.escalation import EscalationService
from zenrows_fetch.utils.errors import AllTiersExhaustedError, ScrapeError, ToolCallError

log = structlog.get_logger()

ZENROWS_FETCH_TOOL = types.Tool(
    name=TOOL_NAME,
    description=(
        "Fetch a web page through ZenRows, returning a clean Markdown rendition. "
        "Automatically escalates cost tier if the cheaper mode fails."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "description": "Fully-qualified URL to fetch",
            },
            "selector": {
                "type": "string",
                "description": (
                    "(Optional) CSS selector ZenRows must wait for before snapshot. "
                    "Automatically triggers JS rendering."
                ),
            },
        },
        "required": ["url"],
    },
)


class ToolResponse(BaseModel):
    text: str
    is_error: bool = False
    meta: dict[str, Any] = {}


def _format_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
        for err in exc.errors()
    )


class ToolHandler:
    """Maps tool calls onto the escalation service."""

    def __init__(self, service: EscalationService):
        self.service = service

    async def list_tools(self) -> list[types.Tool]:
        return [ZENROWS_FETCH_TOOL]

    async def handle(self, name: str, arguments: dict[str, Any] | None) -> ToolResponse:
        """Run one tool call. Per-request failures come back as error responses."""
        if name != TOOL_NAME:
            log.warning("unknown_tool", tool=name)
            return ToolResponse(text=f"Unknown tool: {name}", is_error=True)

        try:
            request = FetchRequest.model_validate(arguments or {})
        except ValidationError as e:
            return ToolResponse(
                text=f"Invalid arguments for {TOOL_NAME}: {_format_validation_error(e)}",
                is_error=True,
            )

        try:
            result = await self.service.progressive_fetch(request.url, request.selector)
        except AllTiersExhaustedError as e:
            log.warning(
                "fetch_failed",
                tool=name,
                last_tier=e.last_tier,
                last_error=str(e.last_error) if e.last_error else None,
            )
            return ToolResponse(text=f"ZenRows fetch failed: {e}", is_error=True)
        except ScrapeError as e:
            return ToolResponse(text=f"ZenRows fetch failed: {e}", is_error=True)

        return ToolResponse(
            text=result.body,
            meta={"costTier": result.tier_used.value, "costEur": result.cost_eur},
        )

    async def call_tool(
        self, name: str, arguments: dict[str, Any]
    ) -> tuple[list[types.TextContent], dict[str, Any]]:
        """MCP call_tool handler; raising ToolCallError yields an isError result.

        Tier metadata travels both as the text item's ``_meta`` and as
        structured content.
        """
        response = await self.handle(name, arguments)
        if response.is_error:
            raise ToolCallError(response.text)
        content = types.TextContent(type="text", text=response.text, _meta=response.meta)
        return [content], response.meta
