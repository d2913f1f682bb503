"""Tools for users, alerts, accounts and clients."""

from __future__ import annotations

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.tools.common import (
    ListParams,
    api_tool,
    deleted_message,
    identifier_guidance,
)

_USER_IDS = "User IDs are internal identifiers not commonly used by humans."


class ListUsersParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (id)")


class UserIdParams(ToolParameters):
    user_id: str = Field(description="ID of the user to retrieve")


class ListAlertsParams(ListParams):
    """Parameters for slide_list_alerts."""

    device_id: str | None = Field(default=None, description="Filter by device ID")
    agent_id: str | None = Field(default=None, description="Filter by agent ID")
    resolved: bool | None = Field(
        default=None, description="Filter by resolved status"
    )
    sort_by: str | None = Field(default=None, description="Sort by field (created)")


class AlertIdParams(ToolParameters):
    alert_id: str = Field(description="ID of the alert")


class UpdateAlertParams(AlertIdParams):
    resolved: bool = Field(description="Set to true to resolve the alert")


class ListAccountsParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (name)")


class AccountIdParams(ToolParameters):
    account_id: str = Field(description="ID of the account")


class UpdateAccountParams(AccountIdParams):
    alert_emails: list[str] = Field(
        description="List of email addresses to send alert emails to"
    )


class ListClientsParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (id)")


class ClientIdParams(ToolParameters):
    client_id: str = Field(description="ID of the client")


class CreateClientParams(ToolParameters):
    name: str = Field(description="Name of the client")
    comments: str | None = Field(default=None, description="Comments about the client")


class UpdateClientParams(ClientIdParams):
    name: str | None = Field(default=None, description="New name for the client")
    comments: str | None = Field(
        default=None, description="New comments about the client"
    )


def user_tools() -> list[ToolDefinition]:
    """Create the user tools."""
    return [
        api_tool(
            "slide_list_users",
            "List all users with pagination and filtering options",
            ListUsersParams,
            path="/v1/user",
            default_sort="id",
            metadata=identifier_guidance(
                "display_name",
                "When referring to users, use the display name (formatted as "
                "'First Last') as the primary identifier. " + _USER_IDS,
            ),
        ),
        api_tool(
            "slide_get_user",
            "Get detailed information about a specific user",
            UserIdParams,
            path="/v1/user/{user_id}",
            metadata=identifier_guidance(
                "display_name",
                "When referring to the user, use the display name (formatted as "
                "'First Last') as the primary identifier. " + _USER_IDS,
            ),
        ),
    ]


def alert_tools() -> list[ToolDefinition]:
    """Create the alert tools."""
    return [
        api_tool(
            "slide_list_alerts",
            "List all alerts with pagination and filtering options",
            ListAlertsParams,
            path="/v1/alert",
            default_sort="created",
            metadata=identifier_guidance(
                "alert_id",
                "When presenting alerts, highlight unresolved alerts first, and "
                "categorize by alert_type. Alert IDs are internal identifiers.",
            ),
        ),
        api_tool(
            "slide_get_alert",
            "Get detailed information about a specific alert",
            AlertIdParams,
            path="/v1/alert/{alert_id}",
            metadata=identifier_guidance(
                "alert_id",
                "When presenting the alert, highlight its type, whether it's "
                "resolved, and related device or agent if present.",
            ),
        ),
        api_tool(
            "slide_update_alert",
            "Update an alert's properties (primarily used to resolve alerts)",
            UpdateAlertParams,
            path="/v1/alert/{alert_id}",
            method="PATCH",
            access=ToolAccess.WRITE,
            metadata=identifier_guidance(
                "alert_id",
                "When confirming alert update, indicate whether it was "
                "successfully resolved.",
            ),
        ),
    ]


def account_tools() -> list[ToolDefinition]:
    """Create the account tools."""
    return [
        api_tool(
            "slide_list_accounts",
            "List all accounts with pagination and filtering options",
            ListAccountsParams,
            path="/v1/account",
            default_sort="name",
            metadata=identifier_guidance(
                "account_name",
                "When presenting accounts, use the account name as the primary "
                "identifier. Account IDs are internal identifiers not commonly "
                "used by humans.",
            ),
        ),
        api_tool(
            "slide_get_account",
            "Get detailed information about a specific account",
            AccountIdParams,
            path="/v1/account/{account_id}",
            metadata=identifier_guidance(
                "account_name",
                "When presenting account details, highlight account name, "
                "primary contact, and alert email settings.",
            ),
        ),
        api_tool(
            "slide_update_account",
            "Update an account's properties (primarily alert emails)",
            UpdateAccountParams,
            path="/v1/account/{account_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "account_name",
                "When confirming account update, highlight the new alert email "
                "settings that were applied.",
            ),
        ),
    ]


def client_tools() -> list[ToolDefinition]:
    """Create the client tools."""
    return [
        api_tool(
            "slide_list_clients",
            "List all clients with pagination and filtering options",
            ListClientsParams,
            path="/v1/client",
            default_sort="id",
            metadata=identifier_guidance(
                "name",
                "When presenting clients, use the client name as the primary "
                "identifier. Client IDs are internal identifiers not commonly "
                "used by humans.",
            ),
        ),
        api_tool(
            "slide_get_client",
            "Get detailed information about a specific client",
            ClientIdParams,
            path="/v1/client/{client_id}",
            metadata=identifier_guidance(
                "name",
                "When presenting client details, highlight client name and "
                "comments.",
            ),
        ),
        api_tool(
            "slide_create_client",
            "Create a new client",
            CreateClientParams,
            path="/v1/client",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "name",
                "When confirming client creation, highlight the new client name "
                "and ID.",
            ),
        ),
        api_tool(
            "slide_update_client",
            "Update a client's properties",
            UpdateClientParams,
            path="/v1/client/{client_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "name", "When confirming client update, highlight the updated fields."
            ),
        ),
        api_tool(
            "slide_delete_client",
            "Delete a client",
            ClientIdParams,
            path="/v1/client/{client_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("Client", "client_id"),
        ),
    ]
