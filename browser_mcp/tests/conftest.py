"""
Shared fixtures: in-memory stand-ins for the Playwright objects the session
touches (driver, browser, context, page, frames, locators).
"""

from collections import defaultdict
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from browser_mcp.tools.browser.connection import ConnectionConfig
from browser_mcp.tools.browser.session import SessionContext


class FakeFrame:
    def __init__(self, parent=None):
        self.parent_frame = parent


class FakePage:
    """Page double that emits events the way Playwright does."""

    def __init__(self, url: str = "about:blank"):
        self.url = url
        self._title = ""
        self._handlers = defaultdict(list)
        self.main_frame = FakeFrame()
        self.closed = False
        self.ref_locators: dict[str, MagicMock] = {}
        self.keyboard = MagicMock(press=AsyncMock())
        self.screenshot = AsyncMock(return_value=b"\x89PNG fake")
        self.pdf = AsyncMock()
        self.go_back = AsyncMock()
        self.go_forward = AsyncMock()
        self.wait_for_load_state = AsyncMock()

    # -- events ---------------------------------------------------------

    def on(self, event, handler):
        self._handlers[event].append(handler)

    def remove_listener(self, event, handler):
        self._handlers[event].remove(handler)

    def listener_count(self, event) -> int:
        return len(self._handlers[event])

    def emit(self, event, *args):
        for handler in list(self._handlers[event]):
            handler(*args)

    # -- page API ---------------------------------------------------------

    async def goto(self, url, wait_until=None):
        self.url = url
        self._title = f"Title of {url}"
        self.emit("framenavigated", self.main_frame)

    async def title(self):
        return self._title

    async def close(self):
        self.closed = True
        self.emit("close", self)

    def locator(self, selector):
        if selector == "html":
            return SimpleNamespace(aria_snapshot=self._aria_snapshot)
        if selector not in self.ref_locators:
            self.ref_locators[selector] = MagicMock(
                click=AsyncMock(),
                hover=AsyncMock(),
                fill=AsyncMock(),
                press=AsyncMock(),
                drag_to=AsyncMock(),
                evaluate=AsyncMock(return_value="<p>hello</p>"),
            )
        return self.ref_locators[selector]

    async def _aria_snapshot(self, *, boxes=None, depth=None, mode=None, timeout=None):
        # Same keyword-only signature as Locator.aria_snapshot
        if mode == "ai":
            return f'- document "{self.url}" [ref=e1]'
        return f'- document "{self.url}"'


class FakeBrowser:
    def __init__(self, pages=None):
        self.page = FakePage()
        self.contexts = [SimpleNamespace(pages=pages if pages is not None else [self.page], new_page=AsyncMock(return_value=self.page))]
        self.new_page = AsyncMock(return_value=self.page)
        self.new_context = AsyncMock()
        self.close = AsyncMock()


class FakeChromium:
    """Counts connection attempts; every attempt yields a new browser."""

    def __init__(self):
        self.browsers: list[FakeBrowser] = []
        self.connect_over_cdp = AsyncMock(side_effect=self._connect)
        self.connect = AsyncMock(side_effect=self._connect)
        self.launch = AsyncMock(side_effect=self._connect)

    async def _connect(self, *args, **kwargs):
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser


@pytest.fixture
def chromium() -> FakeChromium:
    return FakeChromium()


@pytest.fixture
def fake_playwright(chromium):
    return SimpleNamespace(chromium=chromium, stop=AsyncMock())


@pytest.fixture
def playwright_factory(fake_playwright):
    return MagicMock(return_value=MagicMock(start=AsyncMock(return_value=fake_playwright)))


@pytest.fixture
def log_sink() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def session(playwright_factory, log_sink) -> SessionContext:
    return SessionContext(
        ConnectionConfig(),
        log=log_sink,
        playwright_factory=playwright_factory,
    )


def console_message(text: str, type: str = "log", url: str = "https://example.com/"):
    return SimpleNamespace(type=type, text=text, location={"url": url})


@pytest.fixture
def make_console_message():
    return console_message
