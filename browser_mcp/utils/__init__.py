"""
Utility modules for the browser MCP server.

- logger: Structured logging with loguru
- errors: Exception hierarchy shared by the session and the tools
"""

from browser_mcp.utils.errors import (
    BrowserConnectionError,
    BrowserMCPError,
    NoFileChooserError,
    ReplUnavailableError,
    SessionClosedError,
    SessionNotReadyError,
)
from browser_mcp.utils.logger import (
    AsyncLogSink,
    LoggerManager,
    get_logger,
    noop_log_sink,
    set_log_level,
)

__all__ = [
    # Logger
    "AsyncLogSink",
    "LoggerManager",
    "get_logger",
    "noop_log_sink",
    "set_log_level",
    # Errors
    "BrowserMCPError",
    "BrowserConnectionError",
    "SessionNotReadyError",
    "SessionClosedError",
    "NoFileChooserError",
    "ReplUnavailableError",
]
