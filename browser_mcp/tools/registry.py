"""
Tool registry and dispatch.

This module provides:
- ToolRegistry: exact-name index of tools and resources, bound to the
  shared SessionContext
- ToolRegistry.call_tool: validate, execute, and normalize every outcome
  into a ToolResult so protocol layers only see transport failures
- ToolRegistry.as_langchain_tools: the same tools as LangChain
  StructuredTools for binding to an agent
"""

import asyncio
from typing import Any, Iterable, Optional

from langchain_core.tools import StructuredTool
from pydantic import ValidationError

from browser_mcp.resources.types import RegisteredResource, ResourceContents
from browser_mcp.tools.browser.session import SessionContext
from browser_mcp.tools.types import RegisteredTool, ToolDescriptor, ToolResult
from browser_mcp.utils.logger import get_logger

logger = get_logger(__name__)


def format_validation_error(error: ValidationError) -> str:
    """One line per failing field: ``url: Field required``."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        lines.append(f"{location}: {item['msg']}")
    return "\n".join(lines)


class ToolRegistry:
    def __init__(
        self,
        session: SessionContext,
        tools: Iterable[RegisteredTool],
        resources: Iterable[RegisteredResource] = (),
    ) -> None:
        self.session: SessionContext = session
        self.tool_map: dict[str, RegisteredTool] = {}
        for tool in tools:
            if tool.name in self.tool_map:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self.tool_map[tool.name] = tool
        self.resource_map: dict[str, RegisteredResource] = {
            resource.uri: resource for resource in resources
        }

    # ==================================================================
    ## Tools
    # ==================================================================

    def list_tools(self) -> list[ToolDescriptor]:
        return [tool.descriptor for tool in self.tool_map.values()]

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> ToolResult:
        """Run a tool against the shared session.

        Args:
            name: Registered tool name
            arguments: Raw arguments, validated against the tool's schema

        Returns:
            ToolResult; ``is_error`` is set for unknown tools, invalid
            arguments and any exception raised by the handler.
        """
        tool = self.tool_map.get(name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResult.error(f'Tool "{name}" not found')

        try:
            params = tool.args_schema.model_validate(arguments or {})
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}: {e.error_count()} error(s)")
            return ToolResult.error(
                f'Invalid arguments for tool "{name}":\n{format_validation_error(e)}'
            )

        logger.info(f"Calling tool {name}")
        try:
            return await tool.handler(self.session, params)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            return ToolResult.error(str(e) or type(e).__name__)

    # ==================================================================
    ## Resources
    # ==================================================================

    def list_resources(self) -> list[RegisteredResource]:
        return list(self.resource_map.values())

    async def read_resource(self, uri: str) -> list[ResourceContents]:
        """Read a resource; unknown URIs yield an empty list."""
        resource = self.resource_map.get(uri)
        if resource is None:
            return []
        return await resource.reader(self.session, uri)

    # ==================================================================
    ## LangChain adapter
    # ==================================================================

    def as_langchain_tools(self) -> list[StructuredTool]:
        """Wrap every tool as a LangChain StructuredTool returning text."""
        return [self._to_langchain(tool) for tool in self.tool_map.values()]

    def _to_langchain(self, tool: RegisteredTool) -> StructuredTool:
        async def run(**kwargs: Any) -> str:
            result = await self.call_tool(tool.name, kwargs)
            if result.is_error:
                return f"Error: {result.as_text()}"
            return result.as_text()

        return StructuredTool.from_function(
            coroutine=run,
            name=tool.name,
            description=tool.description,
            args_schema=tool.args_schema,
        )
