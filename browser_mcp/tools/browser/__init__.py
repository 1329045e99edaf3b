"""
Browser automation tools.

Two tool sets are offered:
- snapshot_tools: interaction by aria snapshot refs (navigation answers
  with a snapshot)
- screenshot_tools: visual mode (navigation answers with plain text, plus
  the screenshot tool)
"""

from browser_mcp.tools.browser import content, interaction, navigate
from browser_mcp.tools.browser.connection import ConnectionConfig, ConnectionStrategy
from browser_mcp.tools.browser.repl import ReplBridge, evaluate_playwright
from browser_mcp.tools.browser.session import ConsoleEntry, SessionContext, SessionState
from browser_mcp.tools.types import RegisteredTool


def _common_tools() -> list[RegisteredTool]:
    return [
        navigate.press_key,
        navigate.wait,
        navigate.save_as_pdf,
        navigate.close,
    ]


def snapshot_tools(repl: ReplBridge | None = None) -> list[RegisteredTool]:
    """Get the snapshot-mode tool set."""
    return [
        navigate.navigate(snapshot=True),
        navigate.go_back(snapshot=True),
        navigate.go_forward(snapshot=True),
        navigate.choose_file(snapshot=True),
        content.snapshot,
        interaction.click,
        interaction.hover,
        interaction.type_text,
        interaction.drag,
        content.element_outer_html,
        content.element_ancestor_html,
        *_common_tools(),
        evaluate_playwright(repl),
    ]


def screenshot_tools() -> list[RegisteredTool]:
    """Get the screenshot-mode tool set."""
    return [
        navigate.navigate(snapshot=False),
        navigate.go_back(snapshot=False),
        navigate.go_forward(snapshot=False),
        navigate.choose_file(snapshot=False),
        content.screenshot,
        *_common_tools(),
    ]


__all__ = [
    "ConnectionConfig",
    "ConnectionStrategy",
    "ConsoleEntry",
    "ReplBridge",
    "SessionContext",
    "SessionState",
    "screenshot_tools",
    "snapshot_tools",
]
