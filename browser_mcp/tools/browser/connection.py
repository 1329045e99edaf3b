"""
Browser connection strategies.

Exactly one strategy is used per connection attempt, chosen in this order:

1. remote   - ``PLAYWRIGHT_WS_ENDPOINT`` is set: connect to the Playwright
              server, passing the launch options in the URL.
2. cdp      - attach to an already running Chrome over its debugging port.
3. launch   - start a fresh Chrome instance.

A failing strategy never falls back to the next one.
"""

import json
import os
from enum import Enum
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from browser_mcp.utils.errors import BrowserConnectionError
from browser_mcp.utils.logger import AsyncLogSink, get_logger, noop_log_sink

load_dotenv()

logger = get_logger(__name__)

DEFAULT_DEBUGGING_PORT = 9222
DEFAULT_CHANNEL = "chrome"


# ======================================================================
# Configuration Models
# ======================================================================


class ConnectionStrategy(str, Enum):
    REMOTE = "remote"
    CDP = "cdp"
    LAUNCH = "launch"


class ConnectionConfig(BaseModel):
    """Read-only launch/attach parameters for the browser session."""

    model_config = ConfigDict(frozen=True)

    ws_endpoint: Optional[str] = Field(
        default=None,
        description="Playwright server websocket endpoint (remote strategy)",
    )
    debugging_port: int = Field(
        default=DEFAULT_DEBUGGING_PORT,
        description="Local Chrome remote debugging port (cdp strategy)",
    )
    use_cdp: bool = Field(
        default=True,
        description="Attach to a running browser instead of launching one",
    )
    launch_options: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque Playwright launch options (headless, args, storage state...)",
    )

    @classmethod
    def from_env(cls) -> "ConnectionConfig":
        """Build the configuration from environment variables (.env aware)."""
        launch_options: dict[str, Any] = {}
        raw_options = os.getenv("BROWSER_MCP_LAUNCH_OPTIONS")
        if raw_options:
            launch_options.update(json.loads(raw_options))

        headless = os.getenv("BROWSER_MCP_HEADLESS")
        if headless is not None:
            launch_options["headless"] = _parse_bool(headless)

        return cls(
            ws_endpoint=os.getenv("PLAYWRIGHT_WS_ENDPOINT") or None,
            debugging_port=int(
                os.getenv("CHROME_DEBUGGING_PORT", DEFAULT_DEBUGGING_PORT)
            ),
            use_cdp=_parse_bool(os.getenv("BROWSER_MCP_USE_CDP", "true")),
            launch_options=launch_options,
        )

    @property
    def cdp_endpoint(self) -> str:
        return f"http://127.0.0.1:{self.debugging_port}"

    def strategy(self) -> ConnectionStrategy:
        """The strategy this configuration selects."""
        if self.ws_endpoint:
            return ConnectionStrategy.REMOTE
        if self.use_cdp:
            return ConnectionStrategy.CDP
        return ConnectionStrategy.LAUNCH


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def remote_endpoint_url(ws_endpoint: str, launch_options: dict[str, Any]) -> str:
    """Add the ``launch-options`` query parameter to a Playwright server URL."""
    parts = urlsplit(ws_endpoint)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != "launch-options"
    ]
    query.append(("launch-options", json.dumps(launch_options)))
    return urlunsplit(parts._replace(query=urlencode(query)))


# ======================================================================
# Connection
# ======================================================================


async def connect_browser(
    playwright: Any,
    config: ConnectionConfig,
    log: AsyncLogSink = noop_log_sink,
) -> Any:
    """Obtain a live browser handle using the strategy ``config`` selects.

    Args:
        playwright: A started ``playwright.async_api.Playwright`` driver
        config: Connection parameters
        log: Async sink notified of the chosen strategy

    Returns:
        playwright.async_api.Browser

    Raises:
        BrowserConnectionError: If the selected strategy fails
    """
    strategy = config.strategy()
    logger.info(f"Connecting to browser using {strategy.value} strategy")
    await log(f"createBrowser strategy={strategy.value}")

    chromium = playwright.chromium
    try:
        if strategy is ConnectionStrategy.REMOTE:
            return await chromium.connect(
                remote_endpoint_url(config.ws_endpoint, config.launch_options)
            )
        if strategy is ConnectionStrategy.CDP:
            return await chromium.connect_over_cdp(config.cdp_endpoint)
        return await chromium.launch(
            **{"channel": DEFAULT_CHANNEL, **config.launch_options}
        )
    except Exception as e:
        logger.error(f"Browser connection failed ({strategy.value}): {e}")
        raise BrowserConnectionError(strategy.value, str(e), cause=e) from e
