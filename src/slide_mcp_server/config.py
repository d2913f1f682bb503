"""Runtime settings and logging setup for the Slide MCP server."""

from __future__ import annotations

import logging
import sys
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.slide.tech"
DEFAULT_VNC_VIEWER_URL = "https://slide.recipes/mcpTools/vncViewer.php"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


class ToolsMode(str, Enum):
    """Which slice of the tool catalog is exposed."""

    REPORTING = "reporting"
    RESTORES = "restores"
    FULL_SAFE = "full-safe"
    FULL = "full"


class Settings(BaseSettings):
    """Server settings read from ``SLIDE_*`` environment variables.

    Command-line flags are applied on top through :meth:`with_overrides`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SLIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Slide API key.")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Slide API base URL.")
    tools: ToolsMode = Field(default=ToolsMode.FULL_SAFE, description="Tools mode.")
    disabled_tools: str = Field(
        default="", description="Comma-separated tool names to hide."
    )
    log_file: str | None = Field(default=None, description="Optional log file path.")
    log_level: str = Field(default="INFO", description="Root log level.")
    vnc_viewer_url: str = Field(
        default=DEFAULT_VNC_VIEWER_URL, description="Browser VNC viewer page."
    )

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy where every non-``None`` override replaces a field."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        merged = self.model_dump()
        merged.update(values)
        return Settings.model_validate(merged)

    def disabled_tool_names(self) -> frozenset[str]:
        """Parse the comma-separated disabled tool list."""
        return frozenset(
            name.strip() for name in self.disabled_tools.split(",") if name.strip()
        )


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Send log records to stderr and, optionally, to a file.

    Stdout is reserved for protocol messages, so no handler ever writes there.
    A log file that cannot be opened is reported and skipped.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as exc:
            file_error = exc
    logging.basicConfig(
        level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True
    )
    if file_error is not None:
        logger.warning("Could not open log file %s: %s", log_file, file_error)
