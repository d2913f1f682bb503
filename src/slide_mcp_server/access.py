"""Tool access policy driven by the configured tools mode."""

from __future__ import annotations

from collections.abc import Iterable

from slide_mcp.tools import ToolAccess, ToolDefinition
from slide_mcp_server.config import ToolsMode

MODE_ACCESS: dict[ToolsMode, frozenset[ToolAccess]] = {
    ToolsMode.REPORTING: frozenset({ToolAccess.READ}),
    ToolsMode.RESTORES: frozenset({ToolAccess.READ, ToolAccess.RESTORE}),
    ToolsMode.FULL_SAFE: frozenset(
        {ToolAccess.READ, ToolAccess.RESTORE, ToolAccess.WRITE}
    ),
    ToolsMode.FULL: frozenset(ToolAccess),
}


class AccessPolicy:
    """Hide tools that the tools mode or the disabled list exclude."""

    def __init__(
        self,
        mode: ToolsMode = ToolsMode.FULL_SAFE,
        disabled: Iterable[str] = (),
    ) -> None:
        self.mode = mode
        self.disabled = frozenset(disabled)
        self._allowed = MODE_ACCESS[mode]

    def denial_reason(self, tool: ToolDefinition) -> str | None:
        """Explain why ``tool`` is unavailable, or return None."""
        if tool.name in self.disabled:
            return f"Tool {tool.name} is disabled"
        if tool.access not in self._allowed:
            return f"Tool {tool.name} is not available in {self.mode.value} mode"
        return None
