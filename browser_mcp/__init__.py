"""
browser-mcp - Playwright browser automation tools behind the Model Context Protocol.

Core components:
- SessionContext: the single shared browser connection and page
- ToolRegistry: validated, error-normalizing tool dispatch
- BrowserServer: stdio MCP server wiring (browser_mcp.server)

Usage:
    from browser_mcp.tools import ToolRegistry
    from browser_mcp.tools.browser import SessionContext, snapshot_tools

    registry = ToolRegistry(SessionContext(), snapshot_tools())
    result = await registry.call_tool("browser_navigate", {"url": "https://example.com"})
"""

__version__ = "0.1.0"
