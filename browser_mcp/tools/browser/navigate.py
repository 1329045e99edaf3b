"""
Navigation and page-level tools: navigate, history, wait, keys, PDF, close, uploads.

Tools built by a factory take ``snapshot``: when True they answer with a
fresh aria snapshot of the resulting page, otherwise with a short
confirmation.
"""

import asyncio
import os
import tempfile
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from browser_mcp.tools.browser.snapshot import (
    NAVIGATION_LOAD_TIMEOUT_MS,
    capture_aria_snapshot,
    run_and_wait,
    wait_for_load,
)
from browser_mcp.tools.types import RegisteredTool, ToolResult

MAX_WAIT_SECONDS = 10


# ======================================================================
# Input Models
# ======================================================================


class NavigateInput(BaseModel):
    """Input for browser_navigate tool."""

    url: str = Field(..., description="The URL to navigate to")


class EmptyInput(BaseModel):
    """Tools without arguments."""


class WaitInput(BaseModel):
    """Input for browser_wait tool."""

    time: float = Field(..., description="The time to wait in seconds")


class PressKeyInput(BaseModel):
    """Input for browser_press_key tool."""

    key: str = Field(
        ...,
        description="Name of the key to press or a character to generate, such as `ArrowLeft` or `a`",
    )


class ChooseFileInput(BaseModel):
    """Input for browser_choose_file tool."""

    paths: list[str] = Field(
        ...,
        description="The absolute paths to the files to upload. Can be a single file or multiple files.",
    )


# ======================================================================
# Tools
# ======================================================================


def navigate(snapshot: bool) -> RegisteredTool:
    async def handle(session, params: NavigateInput) -> ToolResult:
        page = await session.acquire_page()
        await page.goto(params.url, wait_until="domcontentloaded")
        # The page is operational once DOM content is loaded
        await wait_for_load(page, NAVIGATION_LOAD_TIMEOUT_MS)
        if snapshot:
            return await capture_aria_snapshot(page)
        return ToolResult.text(f"Navigated to {params.url}")

    return RegisteredTool(
        name="browser_navigate",
        description="Navigate to a URL",
        args_schema=NavigateInput,
        handler=handle,
    )


def go_back(snapshot: bool) -> RegisteredTool:
    async def handle(session, params: EmptyInput) -> ToolResult:
        return await run_and_wait(
            session, "Navigated back", lambda page: page.go_back(), snapshot
        )

    return RegisteredTool(
        name="browser_go_back",
        description="Go back to the previous page",
        args_schema=EmptyInput,
        handler=handle,
    )


def go_forward(snapshot: bool) -> RegisteredTool:
    async def handle(session, params: EmptyInput) -> ToolResult:
        return await run_and_wait(
            session, "Navigated forward", lambda page: page.go_forward(), snapshot
        )

    return RegisteredTool(
        name="browser_go_forward",
        description="Go forward to the next page",
        args_schema=EmptyInput,
        handler=handle,
    )


def choose_file(snapshot: bool) -> RegisteredTool:
    async def handle(session, params: ChooseFileInput) -> ToolResult:
        return await run_and_wait(
            session,
            f"Chose files {', '.join(params.paths)}",
            lambda page: session.submit_file_chooser(params.paths),
            snapshot,
        )

    return RegisteredTool(
        name="browser_choose_file",
        description="Choose one or multiple files to upload",
        args_schema=ChooseFileInput,
        handler=handle,
    )


async def _wait(session, params: WaitInput) -> ToolResult:
    await asyncio.sleep(min(MAX_WAIT_SECONDS, max(params.time, 0)))
    return ToolResult.text(f"Waited for {params.time:g} seconds")


async def _press_key(session, params: PressKeyInput) -> ToolResult:
    return await run_and_wait(
        session,
        f"Pressed key {params.key}",
        lambda page: page.keyboard.press(params.key),
    )


async def _save_as_pdf(session, params: EmptyInput) -> ToolResult:
    page = session.existing_page()
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    file_name = os.path.join(tempfile.gettempdir(), f"page-{timestamp}.pdf")
    await page.pdf(path=file_name)
    return ToolResult.text(f"Saved as {file_name}")


async def _close(session, params: EmptyInput) -> ToolResult:
    await session.close()
    return ToolResult.text("Page closed")


wait = RegisteredTool(
    name="browser_wait",
    description="Wait for a specified time in seconds",
    args_schema=WaitInput,
    handler=_wait,
)

press_key = RegisteredTool(
    name="browser_press_key",
    description="Press a key on the keyboard",
    args_schema=PressKeyInput,
    handler=_press_key,
)

save_as_pdf = RegisteredTool(
    name="browser_save_as_pdf",
    description="Save page as PDF",
    args_schema=EmptyInput,
    handler=_save_as_pdf,
)

close = RegisteredTool(
    name="browser_close",
    description="Close the page",
    args_schema=EmptyInput,
    handler=_close,
)
