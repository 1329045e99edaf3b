"""
Browser session context.

Owns the single browser connection and the single active page shared by
every tool call, plus state derived from that page (console buffer,
pending file chooser).

Lifecycle:

    UNINITIALIZED --acquire_page()--> INITIALIZING --ok--> READY
          ^                               |                  |
          +---------- failure ------------+                  |
          +------------------- page closed ------------------+

    any state --shutdown()--> CLOSED

Concurrent ``acquire_page()`` calls made while INITIALIZING all await the
same initialization task, so only one connection is ever attempted at a
time.
"""

import asyncio
import contextlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from browser_mcp.tools.browser.connection import (
    ConnectionConfig,
    ConnectionStrategy,
    connect_browser,
)
from browser_mcp.utils.errors import (
    NoFileChooserError,
    SessionClosedError,
    SessionNotReadyError,
)
from browser_mcp.utils.logger import AsyncLogSink, get_logger, noop_log_sink

logger = get_logger(__name__)


def _default_playwright_factory():
    from playwright.async_api import async_playwright

    return async_playwright()


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    CLOSED = "closed"


@dataclass
class ConsoleEntry:
    """One console message observed on the active page."""

    type: str
    text: str
    frame_url: Optional[str] = None

    @classmethod
    def from_message(cls, message: Any) -> "ConsoleEntry":
        location = getattr(message, "location", None) or {}
        return cls(
            type=message.type,
            text=message.text,
            frame_url=location.get("url") or None,
        )

    def __str__(self) -> str:
        return f"[{self.type}] {self.text}"


# ======================================================================
# Session Context
# ======================================================================


class SessionContext:
    """Lazily connected, process-wide browser session.

    Example:
        session = SessionContext(ConnectionConfig(use_cdp=False))
        page = await session.acquire_page()
        await page.goto("https://example.com")
        await session.shutdown()
    """

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        log: AsyncLogSink | None = None,
        playwright_factory: Callable[[], Any] | None = None,
    ):
        """
        Args:
            config: Connection parameters (read from the environment if None)
            log: Async sink for lifecycle events; None disables it
            playwright_factory: Returns an object whose ``start()`` yields a
                Playwright driver (``async_playwright`` by default)
        """
        self.config = config or ConnectionConfig.from_env()
        self._log: AsyncLogSink = log or noop_log_sink
        self._playwright_factory = playwright_factory or _default_playwright_factory

        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None
        self._file_chooser: Any = None
        self._console: list[ConsoleEntry] = []
        self._listeners: list[tuple[str, Callable[..., None]]] = []

        self._state = SessionState.UNINITIALIZED
        self._init_task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self._release_tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def acquire_page(self) -> Any:
        """Return the active page, connecting first if needed.

        Raises:
            BrowserConnectionError: If the connection attempt fails. The
                next call starts a fresh attempt.
            SessionClosedError: If the session was shut down.
        """
        async with self._lock:
            if self._state is SessionState.CLOSED:
                raise SessionClosedError("Browser session has been shut down")
            if self._state is SessionState.READY:
                return self._page
            if self._init_task is None:
                self._state = SessionState.INITIALIZING
                self._init_task = asyncio.create_task(self._initialize())
            init_task = self._init_task

        # shield: one cancelled caller must not abort the shared attempt
        return await asyncio.shield(init_task)

    async def acquire_console_log(self) -> list[ConsoleEntry]:
        """Return the live console buffer (not a copy)."""
        await self.acquire_page()
        return self._console

    def existing_page(self) -> Any:
        """Return the active page without connecting."""
        if self._state is not SessionState.READY:
            raise SessionNotReadyError(
                "No open page. Use browser_navigate to open one first."
            )
        return self._page

    async def log(self, data: Any) -> None:
        await self._log(data)

    async def submit_file_chooser(self, paths: list[str]) -> None:
        """Set ``paths`` on the file chooser the page opened last."""
        chooser = self._file_chooser
        if chooser is None:
            raise NoFileChooserError(
                "No file chooser visible. Click the upload control first."
            )
        self._file_chooser = None
        await chooser.set_files(paths)

    async def close(self) -> None:
        """Close the active page; the close event resets the session."""
        page = await self.acquire_page()
        await page.close()
        # Not every transport reports close for attached pages
        if self._page is page:
            self._reset()

    async def shutdown(self) -> None:
        """Release everything at process exit. The session cannot be reused."""
        async with self._lock:
            init_task = self._init_task
            browser = self._detach()
            self._state = SessionState.CLOSED

        if init_task is not None and not init_task.done():
            init_task.cancel()
            # Let its cleanup finish before the driver stops
            with contextlib.suppress(asyncio.CancelledError):
                await init_task
        if browser is not None:
            await self._close_browser(browser)
        if self._release_tasks:
            await asyncio.gather(*self._release_tasks, return_exceptions=True)
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser session shut down")

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def _initialize(self) -> Any:
        browser = None
        try:
            if self._playwright is None:
                self._playwright = await self._playwright_factory().start()
            browser = await connect_browser(self._playwright, self.config, self._log)
            page = await self._select_page(browser)
        except BaseException:
            self._init_task = None
            if self._state is SessionState.INITIALIZING:
                self._state = SessionState.UNINITIALIZED
            if browser is not None:
                self._release(browser)
            raise

        self._browser = browser
        self._page = page
        self._subscribe(page)
        self._state = SessionState.READY
        logger.info(f"Browser session ready: {page.url}")
        return page

    async def _select_page(self, browser: Any) -> Any:
        if self.config.strategy() is not ConnectionStrategy.CDP:
            return await browser.new_page()

        # Attached browsers are reused as-is: first context, first page
        contexts = browser.contexts
        context = contexts[0] if contexts else await browser.new_context()
        pages = context.pages
        await self._log([page.url for page in pages])
        logger.debug(f"Attached browser has {len(pages)} open page(s)")
        return pages[0] if pages else await context.new_page()

    def _subscribe(self, page: Any) -> None:
        self._listeners = [
            ("console", self._on_console),
            ("framenavigated", self._on_frame_navigated),
            ("filechooser", self._on_file_chooser),
            ("close", self._on_close),
        ]
        for event, handler in self._listeners:
            page.on(event, handler)

    # ------------------------------------------------------------------
    # Page events
    # ------------------------------------------------------------------

    def _on_console(self, message: Any) -> None:
        self._console.append(ConsoleEntry.from_message(message))

    def _on_frame_navigated(self, frame: Any) -> None:
        if frame.parent_frame is None:
            self._console.clear()

    def _on_file_chooser(self, chooser: Any) -> None:
        self._file_chooser = chooser

    def _on_close(self, page: Any) -> None:
        if page is self._page:
            logger.info("Active page closed, resetting browser session")
            self._reset()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def _detach(self) -> Any:
        """Unsubscribe and forget all handles. Returns the old browser."""
        page, browser = self._page, self._browser
        if page is not None:
            for event, handler in self._listeners:
                page.remove_listener(event, handler)
        self._listeners = []
        self._init_task = None
        self._page = None
        self._browser = None
        self._file_chooser = None
        self._console.clear()
        return browser

    def _reset(self) -> None:
        browser = self._detach()
        if self._state is not SessionState.CLOSED:
            self._state = SessionState.UNINITIALIZED
        if browser is not None:
            self._release(browser)

    def _release(self, browser: Any) -> None:
        """Close ``browser`` in the background without blocking the caller."""
        task = asyncio.get_running_loop().create_task(self._close_browser(browser))
        self._release_tasks.add(task)
        task.add_done_callback(self._release_tasks.discard)

    async def _close_browser(self, browser: Any) -> None:
        try:
            await browser.close()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
