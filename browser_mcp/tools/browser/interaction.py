"""
Element interaction tools: click, hover, drag and type.

Elements are addressed by the ``ref`` tokens of the latest page snapshot.
Every interaction answers with a fresh snapshot, since it usually changes
the page.
"""

from pydantic import BaseModel, Field

from browser_mcp.tools.browser.refs import ref_locator
from browser_mcp.tools.browser.snapshot import run_and_wait
from browser_mcp.tools.types import RegisteredTool, ToolResult


class ElementInput(BaseModel):
    """Target element of an interaction."""

    element: str = Field(
        ...,
        description="Human-readable element description used to obtain permission to interact with the element",
    )
    ref: str = Field(
        ..., description="Exact target element reference from the page snapshot"
    )


class DragInput(BaseModel):
    """Input for browser_drag tool."""

    startElement: str = Field(
        ...,
        description="Human-readable source element description used to obtain the permission to interact with the element",
    )
    startRef: str = Field(
        ..., description="Exact source element reference from the page snapshot"
    )
    endElement: str = Field(
        ...,
        description="Human-readable target element description used to obtain the permission to interact with the element",
    )
    endRef: str = Field(
        ..., description="Exact target element reference from the page snapshot"
    )


class TypeInput(ElementInput):
    """Input for browser_type tool."""

    text: str = Field(..., description="Text to type into the element")
    submit: bool = Field(
        ..., description="Whether to submit entered text (press Enter after)"
    )


async def _click(session, params: ElementInput) -> ToolResult:
    return await run_and_wait(
        session,
        f'"{params.element}" clicked',
        lambda page: ref_locator(page, params.ref).click(),
        snapshot=True,
    )


async def _hover(session, params: ElementInput) -> ToolResult:
    return await run_and_wait(
        session,
        f'Hovered over "{params.element}"',
        lambda page: ref_locator(page, params.ref).hover(),
        snapshot=True,
    )


async def _drag(session, params: DragInput) -> ToolResult:
    async def action(page):
        start = ref_locator(page, params.startRef)
        end = ref_locator(page, params.endRef)
        await start.drag_to(end)

    return await run_and_wait(
        session,
        f'Dragged "{params.startElement}" to "{params.endElement}"',
        action,
        snapshot=True,
    )


async def _type(session, params: TypeInput) -> ToolResult:
    async def action(page):
        locator = ref_locator(page, params.ref)
        await locator.fill(params.text)
        if params.submit:
            await locator.press("Enter")

    return await run_and_wait(
        session,
        f'Typed "{params.text}" into "{params.element}"',
        action,
        snapshot=True,
    )


click = RegisteredTool(
    name="browser_click",
    description="Perform click on a web page",
    args_schema=ElementInput,
    handler=_click,
)

hover = RegisteredTool(
    name="browser_hover",
    description="Hover over element on page",
    args_schema=ElementInput,
    handler=_hover,
)

drag = RegisteredTool(
    name="browser_drag",
    description="Perform drag and drop between two elements",
    args_schema=DragInput,
    handler=_drag,
)

type_text = RegisteredTool(
    name="browser_type",
    description="Type text into editable element",
    args_schema=TypeInput,
    handler=_type,
)
