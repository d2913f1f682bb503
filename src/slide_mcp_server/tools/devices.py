"""Tools for Slide devices (the backup appliances)."""

from __future__ import annotations

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.tools.common import ListParams, api_tool, identifier_guidance

DEVICE_GUIDANCE = identifier_guidance(
    "display_name",
    "When referring to devices, use the Display Name as the primary identifier. "
    "If its blank use hostname. Device IDs are internal identifiers not commonly "
    "used by humans.",
)


class ListDevicesParams(ListParams):
    """Parameters for slide_list_devices."""

    client_id: str | None = Field(default=None, description="Filter by client ID")
    sort_by: str | None = Field(default=None, description="Sort by field (hostname)")


class DeviceIdParams(ToolParameters):
    """Parameters addressing a single device."""

    device_id: str = Field(description="ID of the device")


class UpdateDeviceParams(DeviceIdParams):
    """Parameters for slide_update_device."""

    display_name: str | None = Field(
        default=None, description="New display name for the device"
    )
    hostname: str | None = Field(default=None, description="New hostname")
    client_id: str | None = Field(
        default=None, description="Client ID to assign the device to"
    )


def device_tools() -> list[ToolDefinition]:
    """Create the device tools."""
    return [
        api_tool(
            "slide_list_devices",
            "List all devices with pagination and filtering options. Hostname is "
            "the primary identifier for devices and should be used when referring "
            "to devices in conversations with users. Although each device has a "
            "unique device_id, humans typically identify devices by their hostname.",
            ListDevicesParams,
            path="/v1/device",
            default_sort="hostname",
            metadata=DEVICE_GUIDANCE,
        ),
        api_tool(
            "slide_get_device",
            "Get detailed information about a specific device",
            DeviceIdParams,
            path="/v1/device/{device_id}",
            metadata=DEVICE_GUIDANCE,
        ),
        api_tool(
            "slide_update_device",
            "Update a device's display name, hostname or client assignment",
            UpdateDeviceParams,
            path="/v1/device/{device_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
            metadata=DEVICE_GUIDANCE,
        ),
        api_tool(
            "slide_poweroff_device",
            "Power off a device. The appliance stops taking backups until it is "
            "powered on again.",
            DeviceIdParams,
            path="/v1/device/{device_id}/shutdown/poweroff",
            method="POST",
            access=ToolAccess.DANGEROUS,
            metadata=DEVICE_GUIDANCE,
        ),
        api_tool(
            "slide_reboot_device",
            "Reboot a device",
            DeviceIdParams,
            path="/v1/device/{device_id}/shutdown/reboot",
            method="POST",
            access=ToolAccess.DANGEROUS,
            metadata=DEVICE_GUIDANCE,
        ),
    ]
