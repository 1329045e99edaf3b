"""
Bridge to an external Playwright REPL.

The REPL is a Node script (``repl.js``) attached to the same browser. One
request runs ``node repl.js "<code>"``; the script evaluates the code and
writes its outcome to ``message.json`` next to itself:

    {"timestamp": 1700000000000, "code": "...", "result": "...", "type": "success"}

Process failures and timeouts are reported as ``type == "error"`` messages
rather than raised.
"""

import asyncio
import json
import os
import re
import time
from pathlib import Path
from typing import Any, Literal, Optional

import aiofiles
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from browser_mcp.tools.types import RegisteredTool, ToolResult
from browser_mcp.utils.errors import BrowserMCPError, ReplUnavailableError
from browser_mcp.utils.logger import get_logger

load_dotenv()

logger = get_logger(__name__)

DEFAULT_REPL_DIR = "~/.browser-mcp/repl"
DEFAULT_TIMEOUT_MS = 60000
HEALTH_CHECK_TIMEOUT_MS = 3000
VARIABLE_STORE_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


# ======================================================================
# Models
# ======================================================================


class ReplMessage(BaseModel):
    timestamp: int = Field(..., description="Unix timestamp in milliseconds")
    code: Optional[str] = Field(None, description="The code that was executed")
    result: Optional[str] = Field(None, description="Output of the execution")
    type: Optional[Literal["success", "error"]] = Field(
        None, description="Outcome of the execution"
    )


class ReplConfig(BaseModel):
    utils_dir: Path = Field(..., description="Directory holding repl.js and message.json")
    node_binary: str = Field("node", description="Node.js executable")
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, description="Default execution timeout")

    @classmethod
    def from_env(cls) -> "ReplConfig":
        return cls(
            utils_dir=Path(
                os.getenv("BROWSER_MCP_REPL_DIR", DEFAULT_REPL_DIR)
            ).expanduser(),
            node_binary=os.getenv("BROWSER_MCP_NODE", "node"),
        )

    @property
    def script_path(self) -> Path:
        return self.utils_dir / "repl.js"

    @property
    def message_path(self) -> Path:
        return self.utils_dir / "message.json"


def _error_message(code: str, result: str) -> ReplMessage:
    return ReplMessage(
        timestamp=int(time.time() * 1000), code=code, result=result, type="error"
    )


# ======================================================================
# Bridge
# ======================================================================


class ReplBridge:
    def __init__(self, config: ReplConfig | None = None):
        self.config = config or ReplConfig.from_env()

    async def execute(self, code: str, timeout_ms: Optional[int] = None) -> ReplMessage:
        """Run ``code`` in the REPL and return the message it wrote."""
        timeout_ms = timeout_ms or self.config.timeout_ms

        try:
            process = await asyncio.create_subprocess_exec(
                self.config.node_binary,
                str(self.config.script_path),
                code + "\n;",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return _error_message(code, str(e))

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout_ms / 1000
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return _error_message(code, f"REPL timed out after {timeout_ms}ms")

        if stdout:
            logger.debug(f"REPL output: {stdout.decode('utf-8', errors='replace')}")
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            return _error_message(
                code, detail or f"REPL exited with code {process.returncode}"
            )

        return await self.read_message()

    async def read_message(self) -> ReplMessage:
        path = self.config.message_path
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                raw = await f.read()
            return ReplMessage.model_validate_json(raw)
        except (OSError, ValidationError) as e:
            return _error_message("", f"Could not read REPL message {path}: {e}")

    async def health_check(self) -> None:
        message = await self.execute(
            'console.log("Repl Health Check");', HEALTH_CHECK_TIMEOUT_MS
        )
        if message.type != "success":
            raise ReplUnavailableError(
                "REPL is not working. Make sure the browser is in repl mode with CLI mode turned on"
            )

    async def variable_store(self) -> dict[str, Any]:
        """Return the REPL's stored variables as ``{name: value}``."""
        message = await self.execute(
            "console.log(Object.fromEntries(Object.values(variablesStore.store)"
            ".map(v => [v.name, v.value])));",
            HEALTH_CHECK_TIMEOUT_MS,
        )
        match = VARIABLE_STORE_PATTERN.search(message.result or "")
        if not match:
            raise BrowserMCPError("Could not parse variable store")
        return json.loads(match.group(0))


# ======================================================================
# Tool
# ======================================================================


class EvaluatePlaywrightInput(BaseModel):
    """Input for browser_evaluate_playwright tool."""

    code: str = Field(
        ...,
        description="The code to evaluate in the context of the Playwright test execution environment",
    )


def evaluate_playwright(bridge: ReplBridge | None = None) -> RegisteredTool:
    repl = bridge or ReplBridge()

    async def handle(session, params: EvaluatePlaywrightInput) -> ToolResult:
        await repl.health_check()
        message = await repl.execute(params.code)
        if message.type == "error":
            return ToolResult.error(message.result or "Code execution failed")
        return ToolResult.text(message.result or "Code executed successfully")

    return RegisteredTool(
        name="browser_evaluate_playwright",
        description="Evaluate Playwright code",
        args_schema=EvaluatePlaywrightInput,
        handler=handle,
    )
