"""
Aria snapshot capture and the run-then-observe helper shared by the tools.
"""

from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_mcp.tools.types import ToolResult
from browser_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Bounded waits for the "load" event; the page is usable before it fires
ACTION_LOAD_TIMEOUT_MS = 500
NAVIGATION_LOAD_TIMEOUT_MS = 5000


async def wait_for_load(page: Any, timeout_ms: int) -> None:
    """Wait for the load event, giving up silently after ``timeout_ms``."""
    try:
        await page.wait_for_load_state("load", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.debug(f"Load state not reached within {timeout_ms}ms, continuing")


async def aria_snapshot(page: Any) -> str:
    """YAML aria snapshot of the whole page.

    ``mode="ai"`` prints the ``[ref=eN]`` tokens the ``aria-ref=`` selector
    engine resolves. Releases without ``mode`` fall back to a plain snapshot.
    """
    locator = page.locator("html")
    try:
        return await locator.aria_snapshot(mode="ai")
    except TypeError:
        logger.warning("aria_snapshot(mode='ai') unsupported, snapshot has no refs")
        return await locator.aria_snapshot()


async def capture_aria_snapshot(page: Any, status: str = "") -> ToolResult:
    """Describe the page: optional status line, URL, title and aria snapshot."""
    snapshot = await aria_snapshot(page)
    title = await page.title()
    lines = []
    if status:
        lines.append(status)
    lines.extend(
        [
            f"- Page URL: {page.url}",
            f"- Page Title: {title}",
            "- Page Snapshot",
            "```yaml",
            snapshot,
            "```",
            "",
        ]
    )
    return ToolResult.text("\n".join(lines))


async def run_and_wait(
    session: Any,
    status: str,
    action: Callable[[Any], Awaitable[Optional[Any]]],
    snapshot: bool = False,
    return_result: bool = False,
) -> ToolResult:
    """Run ``action(page)``, let the page settle, then report.

    Args:
        session: SessionContext providing the page
        status: Confirmation text describing the action
        action: Coroutine function performing the page mutation
        snapshot: Return a fresh aria snapshot instead of ``status``
        return_result: Return the action's own result as text

    Returns:
        ToolResult with the action result, a snapshot, or ``status``
    """
    page = await session.acquire_page()
    result = await action(page)
    await wait_for_load(page, ACTION_LOAD_TIMEOUT_MS)

    if return_result:
        return ToolResult.text("" if result is None else str(result))
    if snapshot:
        return await capture_aria_snapshot(page, status)
    return ToolResult.text(status)
