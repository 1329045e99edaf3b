"""
MCP server exposing the browser tools over stdio.

Usage:
    browser-mcp                  # snapshot tools, attach to Chrome on :9222
    browser-mcp --vision         # screenshot tools
    browser-mcp --log-level debug
"""

import argparse
import asyncio
from typing import Any, Iterable, Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from browser_mcp import __version__
from browser_mcp.resources import RegisteredResource, get_resources
from browser_mcp.tools.browser import (
    ConnectionConfig,
    SessionContext,
    screenshot_tools,
    snapshot_tools,
)
from browser_mcp.tools.registry import ToolRegistry
from browser_mcp.tools.types import ImageContent, RegisteredTool, ToolResult
from browser_mcp.utils.logger import get_logger, set_log_level

logger = get_logger(__name__)

SERVER_NAME = "browser-mcp"


class ToolCallFailed(Exception):
    """Carries an error ToolResult to the MCP layer, which reports it as isError."""

    def __init__(self, result: ToolResult):
        self.result = result
        super().__init__(result.as_text())


def to_mcp_content(result: ToolResult) -> list[types.TextContent | types.ImageContent]:
    items: list[types.TextContent | types.ImageContent] = []
    for item in result.content:
        if isinstance(item, ImageContent):
            items.append(
                types.ImageContent(type="image", data=item.data, mimeType=item.mime_type)
            )
        else:
            items.append(types.TextContent(type="text", text=item.text))
    return items


class BrowserServer:
    """MCP server bound to one browser session."""

    def __init__(
        self,
        tools: Iterable[RegisteredTool],
        resources: Iterable[RegisteredResource] = (),
        config: Optional[ConnectionConfig] = None,
        name: str = SERVER_NAME,
        version: str = __version__,
    ):
        self.server = Server(name, version=version)
        self.session = SessionContext(config, log=self._send_log)
        self.registry = ToolRegistry(self.session, tools, resources)
        self._setup_handlers()

    async def _send_log(self, data: Any) -> None:
        """Forward lifecycle events as MCP logging notifications."""
        try:
            request_context = self.server.request_context
        except LookupError:
            # Outside a request there is no client session to notify
            logger.debug(f"Session event: {data}")
            return
        await request_context.session.send_log_message(level="info", data=data)

    def _setup_handlers(self):
        @self.server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return [
                types.Tool(
                    name=descriptor.name,
                    description=descriptor.description,
                    inputSchema=descriptor.input_schema,
                )
                for descriptor in self.registry.list_tools()
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any] | None
        ) -> list[types.TextContent | types.ImageContent]:
            result = await self.registry.call_tool(name, arguments or {})
            if result.is_error:
                raise ToolCallFailed(result)
            return to_mcp_content(result)

        @self.server.list_resources()
        async def handle_list_resources() -> list[types.Resource]:
            return [
                types.Resource(
                    uri=AnyUrl(resource.uri),
                    name=resource.name,
                    mimeType=resource.mime_type,
                )
                for resource in self.registry.list_resources()
            ]

        @self.server.read_resource()
        async def handle_read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
            contents = await self.registry.read_resource(str(uri))
            return [
                ReadResourceContents(content=item.text, mime_type=item.mime_type)
                for item in contents
            ]

    async def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        logger.info(f"Starting {SERVER_NAME} with {len(self.registry.tool_map)} tools")
        try:
            async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()

    async def close(self) -> None:
        await self.session.shutdown()


def create_server(vision: bool = False, config: Optional[ConnectionConfig] = None) -> BrowserServer:
    tools = screenshot_tools() if vision else snapshot_tools()
    return BrowserServer(tools, get_resources(), config=config)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browser automation MCP server")
    parser.add_argument(
        "--vision",
        action="store_true",
        help="Expose screenshot based tools instead of aria snapshot tools",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Override LOG_LEVEL for this run",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    asyncio.run(create_server(vision=args.vision).run())


if __name__ == "__main__":
    main()
