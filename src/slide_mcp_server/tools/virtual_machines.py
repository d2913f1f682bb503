"""Tools for virtual machines booted from snapshots."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.config import DEFAULT_VNC_VIEWER_URL
from slide_mcp_server.presentation import vnc_viewer_url
from slide_mcp_server.tools.common import (
    ListParams,
    api_tool,
    deleted_message,
    identifier_guidance,
)
from slide_mcp_server.tools.restores import BootMod, CreateFromSnapshotParams

DiskBus = Literal["sata", "virtio"]
NetworkModel = Literal["hypervisor_default", "e1000", "rtl8139"]
NetworkType = Literal["network", "network-isolated", "bridge", "network-id"]
VirtualMachineState = Literal["running", "stopped", "paused"]

_VM_PRESENTATION = (
    "When referring to the virtual machine, use the virt_id as the primary "
    "identifier. Virtual machine IDs are internal identifiers not commonly used "
    "by humans."
)
_VNC_BROWSER = (
    "Use the vnc_viewer_url to access the virtual machine's console via a "
    "browser-based VNC client."
)


class ListVirtualMachinesParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (created)")


class VirtIdParams(ToolParameters):
    virt_id: str = Field(description="ID of the virtual machine")


class CreateVirtualMachineParams(CreateFromSnapshotParams):
    """Parameters for slide_create_virtual_machine."""

    cpu_count: int | None = Field(
        default=None, description="Number of CPU cores (1-16)"
    )
    memory_in_mb: int | None = Field(
        default=None,
        description="Amount of memory in MB (1024-12288). "
        "Recommended default: 8192MB",
    )
    disk_bus: DiskBus | None = Field(default=None, description="Disk bus type")
    network_model: NetworkModel | None = Field(
        default=None, description="Network adapter model"
    )
    network_type: NetworkType | None = Field(default=None, description="Network type")
    network_source: str | None = Field(
        default=None, description="Network ID when network_type is network-id"
    )
    boot_mods: list[BootMod] | None = Field(
        default=None, description="Optional boot modifications to apply"
    )


class UpdateVirtualMachineParams(VirtIdParams):
    """Parameters for slide_update_virtual_machine."""

    state: VirtualMachineState | None = Field(
        default=None, description="New state of the VM"
    )
    expires_at: str | None = Field(
        default=None,
        description="Expiration time in ISO 8601 format "
        "(e.g., 2024-08-23T01:25:08Z)",
    )
    memory_in_mb: int | None = Field(
        default=None, description="New amount of memory in MB (1024-12288)"
    )
    cpu_count: int | None = Field(
        default=None, description="New number of CPU cores (1-16)"
    )


def virtual_machine_tools(
    viewer_url: str = DEFAULT_VNC_VIEWER_URL,
) -> list[ToolDefinition]:
    """Create the virtual machine tools.

    Args:
        viewer_url: Browser VNC viewer page used for console links.
    """

    def add_viewer_urls(payload: Any, _: Any) -> Any:
        if not isinstance(payload, Mapping) or not isinstance(
            payload.get("data"), list
        ):
            return payload
        machines = [
            {**machine, "_vnc_viewer_url": vnc_viewer_url(machine, viewer_url)}
            if isinstance(machine, Mapping)
            else machine
            for machine in payload["data"]
        ]
        return {**payload, "data": machines}

    def single_vm_metadata(**extra: str) -> Any:
        def metadata(payload: Any) -> dict[str, Any]:
            url = None
            if isinstance(payload, Mapping):
                url = vnc_viewer_url(payload, viewer_url)
            return {
                **identifier_guidance("virt_id", _VM_PRESENTATION, **extra),
                "vnc_viewer_url": url,
            }

        return metadata

    return [
        api_tool(
            "slide_list_virtual_machines",
            "List all virtual machines with pagination and filtering options",
            ListVirtualMachinesParams,
            path="/v1/restore/virt",
            default_sort="created",
            reshape=add_viewer_urls,
            metadata=identifier_guidance(
                "virt_id",
                "When referring to virtual machines, use the virt_id as the "
                "primary identifier. Virtual machine IDs are internal identifiers "
                "not commonly used by humans.",
                workflow_guidance="Virtual machines are created from snapshots. "
                "To create a virtual machine, use slide_create_virtual_machine "
                "with a snapshot_id and device_id.",
                vnc_guidance="Each virtual machine includes a _vnc_viewer_url "
                "property that provides a direct link to access its console "
                "through a browser-based VNC client.",
            ),
        ),
        api_tool(
            "slide_get_virtual_machine",
            "Get detailed information about a specific virtual machine",
            VirtIdParams,
            path="/v1/restore/virt/{virt_id}",
            metadata=single_vm_metadata(vnc_guidance=_VNC_BROWSER),
        ),
        api_tool(
            "slide_create_virtual_machine",
            "Create a virtual machine from a snapshot",
            CreateVirtualMachineParams,
            path="/v1/restore/virt",
            method="POST",
            access=ToolAccess.RESTORE,
            metadata=single_vm_metadata(
                next_steps="Now that you've created a virtual machine, you can "
                "control it using slide_update_virtual_machine to change its "
                "state (running, stopped, paused) or update resources.",
                vnc_guidance="Use the vnc_viewer_url to access the virtual "
                "machine's console.",
                resource_guidance="For optimal performance, 8192MB of RAM is "
                "recommended for most VMs. You can adjust this as needed using "
                "slide_update_virtual_machine.",
            ),
        ),
        api_tool(
            "slide_update_virtual_machine",
            "Update a virtual machine's properties",
            UpdateVirtualMachineParams,
            path="/v1/restore/virt/{virt_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
            metadata=single_vm_metadata(vnc_guidance=_VNC_BROWSER),
        ),
        api_tool(
            "slide_delete_virtual_machine",
            "Delete a virtual machine",
            VirtIdParams,
            path="/v1/restore/virt/{virt_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("Virtual machine", "virt_id"),
        ),
    ]
