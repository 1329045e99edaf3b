"""
Resources readable through the MCP resource protocol.

Resources:
- console://logs: console output of the active page
"""

from browser_mcp.resources.console import CONSOLE_URI, console_resource
from browser_mcp.resources.types import RegisteredResource, ResourceContents


def get_resources() -> list[RegisteredResource]:
    """Get all resources."""
    return [console_resource()]


__all__ = [
    "CONSOLE_URI",
    "RegisteredResource",
    "ResourceContents",
    "console_resource",
    "get_resources",
]
