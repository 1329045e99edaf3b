"""
Global Logger Manager using loguru.

stdout is reserved for the MCP stdio transport, so development output is
written to stderr and production output to rotating files.

Configuration via .env file:
- LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- LOG_MODE: Environment mode (development, production)
- LOG_DIR: Log directory for production (default: logs)
- LOG_ROTATION: Rotation size (e.g., "10 MB", "1 GB", "1 day")
- LOG_RETENTION: Retention time (e.g., "7 days", "1 month")
- LOG_COMPRESSION: Compression format (e.g., "zip", "gz", "tar")
"""

import os
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

# Default configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_MODE = "development"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_ROTATION = "10 MB"
DEFAULT_LOG_RETENTION = "7 days"
DEFAULT_LOG_COMPRESSION = "zip"

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

# Async sink the session forwards lifecycle events to (MCP logging, tests, ...)
AsyncLogSink = Callable[[Any], Awaitable[None]]


class LoggerManager:
    """Global singleton logger manager."""

    _instance: Optional["LoggerManager"] = None
    _initialized: bool = False

    def __new__(cls) -> "LoggerManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if LoggerManager._initialized:
            return
        LoggerManager._initialized = True

        self.log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        self.log_mode = os.getenv("LOG_MODE", DEFAULT_LOG_MODE).lower()
        self.log_dir = Path(os.getenv("LOG_DIR", DEFAULT_LOG_DIR))
        self.log_rotation = os.getenv("LOG_ROTATION", DEFAULT_LOG_ROTATION)
        self.log_retention = os.getenv("LOG_RETENTION", DEFAULT_LOG_RETENTION)
        self.log_compression = os.getenv("LOG_COMPRESSION", DEFAULT_LOG_COMPRESSION)

        logger.remove()
        self._configure()

    def _configure(self):
        if self.log_mode == "production":
            self._configure_production()
        else:
            self._configure_development()

    def _configure_development(self):
        """Configure logger for development (stderr output)."""
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=self.log_level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    def _configure_production(self):
        """Configure logger for production (file output with rotation)."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            self.log_dir / "browser_mcp_{time:YYYY-MM-DD}.log",
            format=LOG_FORMAT,
            level=self.log_level,
            rotation=self.log_rotation,
            retention=self.log_retention,
            compression=self.log_compression,
            encoding="utf-8",
            enqueue=True,
        )

        # Errors also go to their own file
        logger.add(
            self.log_dir / "browser_mcp_error_{time:YYYY-MM-DD}.log",
            format=LOG_FORMAT,
            level="ERROR",
            rotation=self.log_rotation,
            retention=self.log_retention,
            compression=self.log_compression,
            encoding="utf-8",
            enqueue=True,
        )

    def get_logger(self, name: Optional[str] = None):
        """
        Get a logger bound to ``name`` (``"root"`` when omitted).

        Example:
            log = LoggerManager().get_logger(__name__)
            log.info("Browser connected")
        """
        return logger.bind(name=name or "root")

    def set_level(self, level: str):
        """Change log level at runtime by re-adding the handlers."""
        self.log_level = level.upper()
        logger.remove()
        self._configure()


# ======================================================================
## Convenience Functions
# ======================================================================


def get_logger(name: Optional[str] = None):
    """
    Get a logger instance. This is the recommended way to use the logger.

    Example:
        from browser_mcp.utils.logger import get_logger

        log = get_logger(__name__)
        log.info("Page acquired")
    """
    return LoggerManager().get_logger(name)


def set_log_level(level: str):
    """Change log level at runtime (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
    LoggerManager().set_level(level)


async def noop_log_sink(data: Any) -> None:
    """Default sink used when no async logger is injected."""
    return None


__all__ = [
    "AsyncLogSink",
    "LoggerManager",
    "get_logger",
    "set_log_level",
    "noop_log_sink",
    "logger",
]
