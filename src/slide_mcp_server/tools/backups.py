"""Tools for backups and the snapshots they produce."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.tools.common import ListParams, api_tool, identifier_guidance

SnapshotLocation = Literal[
    "exists_local",
    "exists_cloud",
    "exists_deleted",
    "exists_deleted_retention",
    "exists_deleted_manual",
    "exists_deleted_other",
]

_BACKUP_IDS = "Backup IDs are internal identifiers not commonly used by humans."
_SNAPSHOT_IDS = "Snapshot IDs are internal identifiers not commonly used by humans."


class ListBackupsParams(ListParams):
    """Parameters for slide_list_backups."""

    agent_id: str | None = Field(default=None, description="Filter by agent ID")
    device_id: str | None = Field(default=None, description="Filter by device ID")
    snapshot_id: str | None = Field(default=None, description="Filter by snapshot ID")
    sort_by: str | None = Field(
        default=None, description="Sort by field (id, start_time)"
    )


class BackupIdParams(ToolParameters):
    backup_id: str = Field(description="ID of the backup to retrieve")


class StartBackupParams(ToolParameters):
    agent_id: str = Field(description="ID of the agent to backup")


class ListSnapshotsParams(ListParams):
    """Parameters for slide_list_snapshots."""

    agent_id: str | None = Field(default=None, description="Filter by agent ID")
    snapshot_location: SnapshotLocation | None = Field(
        default=None, description="Filter by snapshot location"
    )
    sort_by: str | None = Field(
        default=None,
        description="Sort by field (backup_start_time, backup_end_time, created)",
    )


class SnapshotIdParams(ToolParameters):
    snapshot_id: str = Field(description="ID of the snapshot to retrieve")


def backup_tools() -> list[ToolDefinition]:
    """Create the backup and snapshot tools."""
    return [
        api_tool(
            "slide_list_backups",
            "List all backups with pagination and filtering options",
            ListBackupsParams,
            path="/v1/backup",
            default_sort="start_time",
            metadata=identifier_guidance(
                "backup_id",
                "When referring to backups, use the backup_id as the primary "
                "identifier. " + _BACKUP_IDS,
            ),
        ),
        api_tool(
            "slide_get_backup",
            "Get detailed information about a specific backup",
            BackupIdParams,
            path="/v1/backup/{backup_id}",
            metadata=identifier_guidance(
                "backup_id",
                "When referring to the backup, use the backup_id as the primary "
                "identifier. " + _BACKUP_IDS,
            ),
        ),
        api_tool(
            "slide_start_backup",
            "Start a backup for a specific agent",
            StartBackupParams,
            path="/v1/backup",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "backup_id",
                "When referring to the backup, use the backup_id as the primary "
                "identifier. " + _BACKUP_IDS,
            ),
        ),
        api_tool(
            "slide_list_snapshots",
            "List all snapshots with pagination and filtering options",
            ListSnapshotsParams,
            path="/v1/snapshot",
            default_sort="created",
            metadata=identifier_guidance(
                "snapshot_id",
                "When referring to snapshots, use the snapshot_id as the primary "
                "identifier. " + _SNAPSHOT_IDS,
            ),
        ),
        api_tool(
            "slide_get_snapshot",
            "Get detailed information about a specific snapshot",
            SnapshotIdParams,
            path="/v1/snapshot/{snapshot_id}",
            metadata=identifier_guidance(
                "snapshot_id",
                "When referring to the snapshot, use the snapshot_id as the "
                "primary identifier. " + _SNAPSHOT_IDS,
            ),
        ),
    ]
