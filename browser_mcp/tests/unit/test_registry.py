"""
Unit tests for ToolRegistry.

Covers:
- Tool listing and JSON schemas
- Error envelope for unknown tools, invalid arguments and handler failures
- Dispatch against the shared session
- Resources
- LangChain adapter
"""

import asyncio

import pytest
from pydantic import BaseModel, Field

from browser_mcp.resources import CONSOLE_URI, get_resources
from browser_mcp.tools.browser import screenshot_tools, snapshot_tools
from browser_mcp.tools.registry import ToolRegistry
from browser_mcp.tools.types import RegisteredTool, ToolResult


class CountInput(BaseModel):
    amount: int = Field(..., description="How much to count")


def counting_tool(counter: list, name: str = "count") -> RegisteredTool:
    async def handle(session, params: CountInput) -> ToolResult:
        counter.append(params.amount)
        return ToolResult.text(f"counted {params.amount}")

    return RegisteredTool(
        name=name, description="Counts", args_schema=CountInput, handler=handle
    )


def failing_tool(exc: BaseException) -> RegisteredTool:
    async def handle(session, params: CountInput) -> ToolResult:
        raise exc

    return RegisteredTool(
        name="fail", description="Fails", args_schema=CountInput, handler=handle
    )


@pytest.fixture
def registry(session) -> ToolRegistry:
    return ToolRegistry(session, snapshot_tools(), get_resources())


# ======================================================================
# Listing
# ======================================================================


class TestListTools:
    def test_snapshot_tool_names(self, registry):
        names = [tool.name for tool in registry.list_tools()]

        assert names[:5] == [
            "browser_navigate",
            "browser_go_back",
            "browser_go_forward",
            "browser_choose_file",
            "browser_snapshot",
        ]
        assert "browser_take_screenshot" not in names
        assert "browser_get_ancestor_html" in names
        assert "browser_evaluate_playwright" in names
        assert len(names) == len(set(names))

    def test_screenshot_tool_set(self, session):
        registry = ToolRegistry(session, screenshot_tools())
        names = {tool.name for tool in registry.list_tools()}

        assert "browser_take_screenshot" in names
        assert "browser_snapshot" not in names
        assert "browser_click" not in names

    def test_navigate_schema_requires_url(self, registry):
        descriptor = next(
            tool for tool in registry.list_tools() if tool.name == "browser_navigate"
        )

        assert descriptor.input_schema["type"] == "object"
        assert descriptor.input_schema["required"] == ["url"]
        assert descriptor.input_schema["properties"]["url"]["type"] == "string"

    def test_descriptor_serializes_with_camel_case(self, registry):
        dumped = registry.list_tools()[0].model_dump(by_alias=True)

        assert set(dumped) == {"name", "description", "inputSchema"}

    def test_duplicate_tool_names_rejected(self, session):
        with pytest.raises(ValueError, match="count"):
            ToolRegistry(session, [counting_tool([]), counting_tool([])])


# ======================================================================
# Error envelope
# ======================================================================


class TestCallToolErrors:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry):
        result = await registry.call_tool("nonexistent_tool", {})

        assert result.is_error
        assert "nonexistent_tool" in result.as_text()

    @pytest.mark.asyncio
    async def test_missing_required_argument_skips_handler(self, session):
        counter = []
        registry = ToolRegistry(session, [counting_tool(counter)])

        result = await registry.call_tool("count", {})

        assert result.is_error
        assert 'Invalid arguments for tool "count"' in result.as_text()
        assert "amount" in result.as_text()
        assert counter == []

    @pytest.mark.asyncio
    async def test_wrong_argument_type(self, session):
        counter = []
        registry = ToolRegistry(session, [counting_tool(counter)])

        result = await registry.call_tool("count", {"amount": "many"})

        assert result.is_error
        assert counter == []

    @pytest.mark.asyncio
    async def test_navigate_without_url_does_not_connect(self, registry, chromium):
        result = await registry.call_tool("browser_navigate", {})

        assert result.is_error
        chromium.connect_over_cdp.assert_not_called()

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_result(self, session):
        registry = ToolRegistry(session, [failing_tool(RuntimeError("boom"))])

        result = await registry.call_tool("fail", {"amount": 1})

        assert result.is_error
        assert result.as_text() == "boom"

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_type_name(self, session):
        registry = ToolRegistry(session, [failing_tool(KeyError())])

        result = await registry.call_tool("fail", {"amount": 1})

        assert result.as_text() == "KeyError"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, session):
        registry = ToolRegistry(session, [failing_tool(asyncio.CancelledError())])

        with pytest.raises(asyncio.CancelledError):
            await registry.call_tool("fail", {"amount": 1})

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_error_result(self, registry, chromium):
        chromium.connect_over_cdp.side_effect = RuntimeError("ECONNREFUSED")

        result = await registry.call_tool("browser_snapshot", {})

        assert result.is_error
        assert "Failed to connect to browser (cdp)" in result.as_text()

    @pytest.mark.asyncio
    async def test_error_envelope_serialization(self, registry):
        result = await registry.call_tool("nonexistent_tool")

        assert result.to_dict() == {
            "content": [{"type": "text", "text": 'Tool "nonexistent_tool" not found'}],
            "isError": True,
        }


# ======================================================================
# Dispatch
# ======================================================================


class TestDispatch:
    @pytest.mark.asyncio
    async def test_valid_call_reaches_handler(self, session):
        counter = []
        registry = ToolRegistry(session, [counting_tool(counter)])

        result = await registry.call_tool("count", {"amount": 3})

        assert not result.is_error
        assert result.as_text() == "counted 3"
        assert counter == [3]

    @pytest.mark.asyncio
    async def test_snapshot_after_navigate_reflects_new_page(self, registry):
        await registry.call_tool("browser_navigate", {"url": "https://example.com/"})

        result = await registry.call_tool("browser_snapshot", {})

        text = result.as_text()
        assert not result.is_error
        assert "- Page URL: https://example.com/" in text
        assert "- Page Title: Title of https://example.com/" in text
        assert '- document "https://example.com/" [ref=e1]' in text

    @pytest.mark.asyncio
    async def test_tools_share_one_session(self, registry, chromium):
        await registry.call_tool("browser_navigate", {"url": "https://a.test/"})
        await registry.call_tool("browser_press_key", {"key": "Tab"})

        assert chromium.connect_over_cdp.await_count == 1
        chromium.browsers[0].page.keyboard.press.assert_awaited_once_with("Tab")


# ======================================================================
# Resources
# ======================================================================


class TestResources:
    def test_console_resource_listed(self, registry):
        uris = [resource.uri for resource in registry.list_resources()]
        assert uris == [CONSOLE_URI]

    @pytest.mark.asyncio
    async def test_unknown_resource_reads_empty(self, registry, chromium):
        assert await registry.read_resource("console://nope") == []
        chromium.connect_over_cdp.assert_not_called()

    @pytest.mark.asyncio
    async def test_console_resource_reads_buffer(
        self, registry, session, make_console_message
    ):
        page = await session.acquire_page()
        page.emit("console", make_console_message("hello"))
        page.emit("console", make_console_message("oops", type="error"))

        contents = await registry.read_resource(CONSOLE_URI)

        assert len(contents) == 1
        assert contents[0].uri == CONSOLE_URI
        assert contents[0].mime_type == "text/plain"
        assert contents[0].text == "[log] hello\n[error] oops"

    @pytest.mark.asyncio
    async def test_console_resource_connects_lazily(self, registry, chromium):
        contents = await registry.read_resource(CONSOLE_URI)

        assert contents[0].text == ""
        chromium.connect_over_cdp.assert_awaited_once()


# ======================================================================
# LangChain adapter
# ======================================================================


class TestLangChainAdapter:
    @pytest.mark.asyncio
    async def test_structured_tool_runs_through_registry(self, session):
        counter = []
        registry = ToolRegistry(session, [counting_tool(counter)])

        [tool] = registry.as_langchain_tools()
        output = await tool.ainvoke({"amount": 2})

        assert tool.name == "count"
        assert tool.description == "Counts"
        assert output == "counted 2"
        assert counter == [2]

    @pytest.mark.asyncio
    async def test_error_results_are_prefixed(self, session):
        registry = ToolRegistry(session, [failing_tool(RuntimeError("boom"))])

        [tool] = registry.as_langchain_tools()
        output = await tool.ainvoke({"amount": 1})

        assert output == "Error: boom"
