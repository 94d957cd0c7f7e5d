import mcp.types as types
import pytest

from zenrows_fetch.api.tool import ZENROWS_FETCH_TOOL, ToolHandler
from zenrows_fetch.models.scraping import BackendResponse
from zenrows_fetch.services.escalation import EscalationService
from zenrows_fetch.utils.errors import FetchError, ToolCallError


def _response(body: str, status: int = 200) -> BackendResponse:
    return BackendResponse(status_code=status, body=body)


def _handler(fetcher) -> ToolHandler:
    return ToolHandler(EscalationService(fetcher))


class TestToolDefinition:
    @pytest.mark.asyncio
    async def test_lists_single_fetch_tool(self, scripted_fetcher):
        tools = await _handler(scripted_fetcher([])).list_tools()

        assert [t.name for t in tools] == ["zenrowsFetch"]
        assert ZENROWS_FETCH_TOOL.inputSchema["required"] == ["url"]
        assert set(ZENROWS_FETCH_TOOL.inputSchema["properties"]) == {"url", "selector"}


class TestHandle:
    @pytest.mark.asyncio
    async def test_success_carries_tier_metadata(self, scripted_fetcher):
        handler = _handler(scripted_fetcher([_response("# Example Domain")]))

        response = await handler.handle("zenrowsFetch", {"url": "https://example.com"})

        assert response.is_error is False
        assert response.text == "# Example Domain"
        assert response.meta["costTier"] == "basic"

    @pytest.mark.asyncio
    async def test_exhaustion_is_error_response(self, scripted_fetcher):
        fetcher = scripted_fetcher([_response("denied", status=403) for _ in range(4)])
        handler = _handler(fetcher)

        response = await handler.handle("zenrowsFetch", {"url": "https://example.com"})

        assert response.is_error is True
        assert response.text.startswith("ZenRows fetch failed:")
        assert "'wait'" in response.text
        assert response.meta == {}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, scripted_fetcher):
        fetcher = scripted_fetcher([])
        response = await _handler(fetcher).handle("crawlEverything", {"url": "https://example.com"})

        assert response.is_error is True
        assert response.text == "Unknown tool: crawlEverything"
        assert fetcher.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [None, {}, {"url": 42}, {"url": "   "}])
    async def test_invalid_arguments(self, scripted_fetcher, arguments):
        fetcher = scripted_fetcher([])
        response = await _handler(fetcher).handle("zenrowsFetch", arguments)

        assert response.is_error is True
        assert response.text.startswith("Invalid arguments for zenrowsFetch")
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_malformed_url_is_error_response(self, scripted_fetcher):
        fetcher = scripted_fetcher([_response("Bad Request", status=400) for _ in range(4)])

        response = await _handler(fetcher).handle("zenrowsFetch", {"url": "http://[::1"})

        assert response.is_error is True
        assert response.text.startswith("ZenRows fetch failed:")

    @pytest.mark.asyncio
    async def test_blank_selector_is_ignored(self, scripted_fetcher):
        fetcher = scripted_fetcher([_response("# Content")])

        await _handler(fetcher).handle("zenrowsFetch", {"url": "https://example.com", "selector": ""})

        assert fetcher.calls[0][1].js_render is None
        assert fetcher.calls[0][1].wait_for is None


class TestCallTool:
    @pytest.mark.asyncio
    async def test_returns_text_and_structured_meta(self, scripted_fetcher):
        handler = _handler(scripted_fetcher([FetchError("boom"), _response("# Content")]))

        content, meta = await handler.call_tool("zenrowsFetch", {"url": "https://example.com"})

        assert len(content) == 1
        assert isinstance(content[0], types.TextContent)
        assert content[0].text == "# Content"
        assert content[0].meta["costTier"] == "premium"
        assert meta["costTier"] == "premium"

    @pytest.mark.asyncio
    async def test_error_response_raises_tool_call_error(self, scripted_fetcher):
        handler = _handler(scripted_fetcher([]))

        with pytest.raises(ToolCallError, match="Unknown tool: other"):
            await handler.call_tool("other", {})
