"""Tools for file restores and image exports."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.tools.common import (
    ListParams,
    PageParams,
    api_tool,
    deleted_message,
    identifier_guidance,
)

ImageType = Literal["vhdx", "vhdx-dynamic", "vhd", "raw"]
BootMod = Literal["passwordless_admin_user"]

_FILE_RESTORE_IDS = (
    "File restore IDs are internal identifiers not commonly used by humans."
)
_IMAGE_EXPORT_IDS = (
    "Image export IDs are internal identifiers not commonly used by humans."
)


class ListFileRestoresParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (id)")


class FileRestoreIdParams(ToolParameters):
    file_restore_id: str = Field(description="ID of the file restore")


class CreateFromSnapshotParams(ToolParameters):
    """Arguments shared by every restore created from a snapshot."""

    snapshot_id: str = Field(description="ID of the snapshot to restore from")
    device_id: str = Field(description="ID of the device to restore to")


class BrowseFileRestoreParams(FileRestoreIdParams, PageParams):
    """Parameters for slide_browse_file_restore."""

    path: str = Field(description="Path to browse (e.g., 'C' for root of C drive)")


class ListImageExportsParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (id)")


class ImageExportIdParams(ToolParameters):
    image_export_id: str = Field(description="ID of the image export")


class CreateImageExportParams(CreateFromSnapshotParams):
    """Parameters for slide_create_image_export."""

    image_type: ImageType = Field(description="Image type to export")
    boot_mods: list[BootMod] | None = Field(
        default=None,
        description="Optional boot modifications to apply "
        "(e.g., 'passwordless_admin_user')",
    )


class BrowseImageExportParams(ImageExportIdParams, PageParams):
    """Parameters for slide_browse_image_export."""


def file_restore_tools() -> list[ToolDefinition]:
    """Create the file restore tools."""
    return [
        api_tool(
            "slide_list_file_restores",
            "List all file restores with pagination and filtering options",
            ListFileRestoresParams,
            path="/v1/restore/file",
            default_sort="id",
            metadata=identifier_guidance(
                "file_restore_id",
                "When referring to file restores, use the file_restore_id as the "
                "primary identifier. " + _FILE_RESTORE_IDS,
                workflow_guidance="File restores must be created before they can "
                "be browsed. To create a file restore, use "
                "slide_create_file_restore with a snapshot_id and device_id.",
            ),
        ),
        api_tool(
            "slide_get_file_restore",
            "Get detailed information about a specific file restore",
            FileRestoreIdParams,
            path="/v1/restore/file/{file_restore_id}",
            metadata=identifier_guidance(
                "file_restore_id",
                "When referring to the file restore, use the file_restore_id as "
                "the primary identifier. " + _FILE_RESTORE_IDS,
            ),
        ),
        api_tool(
            "slide_create_file_restore",
            "Create a file restore from a snapshot",
            CreateFromSnapshotParams,
            path="/v1/restore/file",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "file_restore_id",
                "When referring to the file restore, use the file_restore_id as "
                "the primary identifier. " + _FILE_RESTORE_IDS,
                next_steps="Now that you've created a file restore, you can browse "
                "its contents using slide_browse_file_restore with this "
                "file_restore_id and a path parameter (e.g., 'C' for the root of "
                "C drive).",
            ),
        ),
        api_tool(
            "slide_delete_file_restore",
            "Delete a file restore",
            FileRestoreIdParams,
            path="/v1/restore/file/{file_restore_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("File restore", "file_restore_id"),
        ),
        api_tool(
            "slide_browse_file_restore",
            "Browse the contents of a file restore. IMPORTANT: You must first "
            "create a file restore using slide_create_file_restore before you can "
            "browse it.",
            BrowseFileRestoreParams,
            path="/v1/restore/file/{file_restore_id}/browse",
            metadata={
                "presentation_guidance": "When presenting file browse results, "
                "organize by type (directories first, then files) and highlight "
                "download options for files.",
                "workflow_guidance": "File restores are temporary. If a "
                "file_restore_id is not found, it may have expired or not been "
                "created yet. Create a file restore using "
                "slide_create_file_restore before browsing.",
            },
        ),
    ]


def image_export_tools() -> list[ToolDefinition]:
    """Create the image export tools."""
    return [
        api_tool(
            "slide_list_image_exports",
            "List all image exports with pagination and filtering options",
            ListImageExportsParams,
            path="/v1/restore/image",
            default_sort="id",
            metadata=identifier_guidance(
                "image_export_id",
                "When referring to image exports, use the image_export_id as the "
                "primary identifier. " + _IMAGE_EXPORT_IDS,
                workflow_guidance="Image exports must be created before they can "
                "be browsed. To create an image export, use "
                "slide_create_image_export with a snapshot_id, device_id, and "
                "image_type.",
            ),
        ),
        api_tool(
            "slide_get_image_export",
            "Get detailed information about a specific image export",
            ImageExportIdParams,
            path="/v1/restore/image/{image_export_id}",
            metadata=identifier_guidance(
                "image_export_id",
                "When referring to the image export, use the image_export_id as "
                "the primary identifier. " + _IMAGE_EXPORT_IDS,
            ),
        ),
        api_tool(
            "slide_create_image_export",
            "Create an image export from a snapshot",
            CreateImageExportParams,
            path="/v1/restore/image",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=identifier_guidance(
                "image_export_id",
                "When referring to the image export, use the image_export_id as "
                "the primary identifier. " + _IMAGE_EXPORT_IDS,
                next_steps="Now that you've created an image export, you can "
                "browse its contents using slide_browse_image_export with this "
                "image_export_id.",
            ),
        ),
        api_tool(
            "slide_delete_image_export",
            "Delete an image export",
            ImageExportIdParams,
            path="/v1/restore/image/{image_export_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("Image export", "image_export_id"),
        ),
        api_tool(
            "slide_browse_image_export",
            "Browse the contents of an image export. IMPORTANT: You must first "
            "create an image export using slide_create_image_export before you can "
            "browse it.",
            BrowseImageExportParams,
            path="/v1/restore/image/{image_export_id}/browse",
            metadata={
                "presentation_guidance": "When presenting image export results, "
                "highlight download options for disk images.",
                "workflow_guidance": "Image exports are temporary. If an "
                "image_export_id is not found, it may have expired or not been "
                "created yet. Create an image export using "
                "slide_create_image_export before browsing.",
            },
        ),
    ]
