"""
Browser content tools - snapshots, screenshots and element HTML.
"""

from browser_mcp.tools.browser.interaction import ElementInput
from browser_mcp.tools.browser.navigate import EmptyInput
from browser_mcp.tools.browser.refs import (
    ancestor_html,
    format_html,
    outer_html,
    ref_locator,
)
from browser_mcp.tools.browser.snapshot import capture_aria_snapshot, run_and_wait
from browser_mcp.tools.types import RegisteredTool, ToolResult


async def _snapshot(session, params: EmptyInput) -> ToolResult:
    return await capture_aria_snapshot(await session.acquire_page())


async def _screenshot(session, params: EmptyInput) -> ToolResult:
    page = await session.acquire_page()
    data = await page.screenshot(type="png")
    return ToolResult.image(data, mime_type="image/png")


async def _element_outer_html(session, params: ElementInput) -> ToolResult:
    async def action(page):
        return format_html(await outer_html(ref_locator(page, params.ref)))

    return await run_and_wait(
        session,
        f'"extracted {params.element}" outerHTML',
        action,
        return_result=True,
    )


async def _ancestor_html(session, params: ElementInput) -> ToolResult:
    async def action(page):
        return format_html(await ancestor_html(ref_locator(page, params.ref)))

    return await run_and_wait(
        session,
        f'"extracted {params.element}" ancestor HTML',
        action,
        return_result=True,
    )


snapshot = RegisteredTool(
    name="browser_snapshot",
    description="Capture accessibility snapshot of the current page, this is better than screenshot",
    args_schema=EmptyInput,
    handler=_snapshot,
)

screenshot = RegisteredTool(
    name="browser_take_screenshot",
    description="Take a screenshot of the current page",
    args_schema=EmptyInput,
    handler=_screenshot,
)

element_outer_html = RegisteredTool(
    name="browser_get_element_outer_html",
    description="Get the outer HTML of a specified element",
    args_schema=ElementInput,
    handler=_element_outer_html,
)

element_ancestor_html = RegisteredTool(
    name="browser_get_ancestor_html",
    description=(
        "Traverses up the DOM tree from the specified element, returning the "
        "largest ancestor's HTML that doesn't exceed 8000 characters"
    ),
    args_schema=ElementInput,
    handler=_ancestor_html,
)
