"""Exceptions raised by the browser session and tools.

Tool handlers let these propagate; the registry turns them into error
results so the MCP transport only ever sees infrastructure failures.
"""

from typing import Optional


class BrowserMCPError(Exception):
    """Base class for all browser MCP errors."""


class BrowserConnectionError(BrowserMCPError):
    """No browser handle could be obtained with the selected strategy."""

    def __init__(self, strategy: str, message: str, cause: Optional[BaseException] = None):
        self.strategy = strategy
        self.cause = cause
        super().__init__(f"Failed to connect to browser ({strategy}): {message}")


class SessionNotReadyError(BrowserMCPError):
    """A tool needed an open page but the session has none yet."""


class SessionClosedError(BrowserMCPError):
    """The session was shut down and can no longer hand out pages."""


class NoFileChooserError(BrowserMCPError):
    """A file upload was requested but the page has no pending file chooser."""


class ReplUnavailableError(BrowserMCPError):
    """The Playwright REPL bridge did not answer its health check."""
