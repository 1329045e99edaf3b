"""
Tools exposed by the browser MCP server.

- types: result envelope and tool descriptors
- registry: name-indexed dispatch over the shared session
- browser: the browser tools, session and connection handling
"""

from browser_mcp.tools.registry import ToolRegistry
from browser_mcp.tools.types import (
    ImageContent,
    RegisteredTool,
    TextContent,
    ToolDescriptor,
    ToolResult,
)

__all__ = [
    "ImageContent",
    "RegisteredTool",
    "TextContent",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolResult",
]
