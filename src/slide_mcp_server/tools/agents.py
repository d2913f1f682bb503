"""Tools for Slide agents (the backup software on protected machines)."""

from __future__ import annotations

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.tools.common import ListParams, api_tool, identifier_guidance

_AGENT_IDS = "Agent IDs are internal identifiers not commonly used by humans."


def _agent_guidance(subject: str) -> dict[str, str]:
    return identifier_guidance(
        "display_name",
        f"When referring to {subject}, use the Display Name as the primary "
        f"identifier. If its blank use hostname. {_AGENT_IDS}",
    )


class ListAgentsParams(ListParams):
    """Parameters for slide_list_agents."""

    device_id: str | None = Field(default=None, description="Filter by device ID")
    client_id: str | None = Field(default=None, description="Filter by client ID")
    sort_by: str | None = Field(
        default=None, description="Sort by field (id, hostname, name)"
    )


class AgentIdParams(ToolParameters):
    """Parameters addressing a single agent."""

    agent_id: str = Field(description="ID of the agent")


class CreateAgentParams(ToolParameters):
    """Parameters for slide_create_agent."""

    display_name: str = Field(description="Display name for the agent")
    device_id: str = Field(description="ID of the device to associate with the agent")


class PairAgentParams(ToolParameters):
    """Parameters for slide_pair_agent."""

    pair_code: str = Field(description="Pair code generated during agent creation")
    device_id: str = Field(description="ID of the device to pair with")


class UpdateAgentParams(AgentIdParams):
    """Parameters for slide_update_agent."""

    display_name: str = Field(description="New display name for the agent")


def agent_tools() -> list[ToolDefinition]:
    """Create the agent tools."""
    return [
        api_tool(
            "slide_list_agents",
            "List all agents with pagination and filtering options. Display Name "
            "is the primary identifier for agents that users recognize. If Display "
            "Name is blank, use hostname instead. " + _AGENT_IDS,
            ListAgentsParams,
            path="/v1/agent",
            default_sort="hostname",
            metadata=identifier_guidance(
                "display_name",
                "When referring to agents, use the Display Name as the primary "
                "identifier. If Display Name is blank, use hostname instead. "
                + _AGENT_IDS,
            ),
        ),
        api_tool(
            "slide_get_agent",
            "Get detailed information about a specific agent by ID",
            AgentIdParams,
            path="/v1/agent/{agent_id}",
            metadata=_agent_guidance("the agent"),
        ),
        api_tool(
            "slide_create_agent",
            "Create an agent for auto-pair installation",
            CreateAgentParams,
            path="/v1/agent",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "pair_code",
                "When referring to the agent pair code, use the pair_code as the "
                "primary identifier. " + _AGENT_IDS,
            ),
        ),
        api_tool(
            "slide_pair_agent",
            "Pair an agent with a device using a pair code",
            PairAgentParams,
            path="/v1/agent/pair",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=_agent_guidance("the agent"),
        ),
        api_tool(
            "slide_update_agent",
            "Update an agent's properties",
            UpdateAgentParams,
            path="/v1/agent/{agent_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
            metadata=_agent_guidance("the updated agent"),
        ),
    ]
