"""
Element reference resolution.

References are the ``ref`` tokens printed in an aria snapshot. They are
resolved through Playwright's ``aria-ref`` selector engine, so a reference
minted before a navigation may no longer match anything; that surfaces as
an ordinary locator error when the element is used.
"""

from typing import Any

from bs4 import BeautifulSoup

ANCESTOR_HTML_LIMIT = 8000
MAX_ANCESTOR_ASCENT = 256
ROOT_TAGS = ("body", "html")


def ref_locator(page: Any, ref: str) -> Any:
    """Lazy locator for a snapshot reference; nothing is queried yet."""
    return page.locator(f"aria-ref={ref}")


async def outer_html(locator: Any) -> str:
    return await locator.evaluate("el => el.outerHTML")


async def ancestor_html(
    locator: Any,
    limit: int = ANCESTOR_HTML_LIMIT,
    max_ascent: int = MAX_ANCESTOR_ASCENT,
) -> str:
    """Walk up from ``locator`` and return the largest ancestor HTML within ``limit``.

    Ascends one parent at a time. Stops at the element whose parent would
    exceed ``limit`` characters, or at ``<body>``/``<html>`` (returned
    whatever its size). ``max_ascent`` bounds the walk on malformed DOMs.

    Args:
        locator: Starting element
        limit: Maximum outerHTML length of an accepted ancestor
        max_ascent: Maximum number of parent steps

    Returns:
        The outerHTML of the selected element
    """
    current_html = await outer_html(locator)
    current = locator

    for _ in range(max_ascent):
        parent = current.locator("..")
        parent_html = await outer_html(parent)
        if len(parent_html) > limit:
            return current_html

        current = parent
        current_html = parent_html

        tag_name = await current.evaluate("el => el.tagName.toLowerCase()")
        if tag_name in ROOT_TAGS:
            return current_html

    return current_html


def format_html(html: str) -> str:
    """Pretty-print an HTML fragment for display."""
    return BeautifulSoup(html, "html.parser").prettify()
