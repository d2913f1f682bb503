"""Tools for VM networks and their IPsec, port forward and WireGuard entries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field, field_validator

from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.backend import BackendClient, BackendFailure
from slide_mcp_server.presentation import wireguard_config
from slide_mcp_server.tools.common import (
    ListParams,
    api_tool,
    build_body,
    deleted_message,
    identifier_guidance,
    render_path,
)

NetworkKind = Literal["standard", "bridge-lan"]
PortForwardProto = Literal["tcp", "udp"]

NETWORK_GUIDANCE = identifier_guidance(
    "name",
    "When referring to networks, use the network name as the primary identifier. "
    "Network IDs are internal identifiers not commonly used by humans.",
    wireguard_guidance="If this network has WireGuard enabled, WG peers will "
    "include ready-to-use configuration files in the _wireguard_config field.",
)
WG_PEER_PATH = "/v1/network/{network_id}/wg-peer"


def _peers_with_configs(network: Any) -> Any:
    """Attach a client configuration to every WireGuard peer of a network."""
    if not isinstance(network, Mapping):
        return network
    peers = network.get("wg_peers")
    if not isinstance(peers, list):
        return network
    return {
        **network,
        "wg_peers": [
            {
                **peer,
                "_wireguard_config": wireguard_config(
                    peer, network, peer.get("remote_networks")
                ),
            }
            if isinstance(peer, Mapping)
            else peer
            for peer in peers
        ],
    }


def _network_with_configs(payload: Any, _: Any) -> Any:
    return _peers_with_configs(payload)


def _networks_with_configs(payload: Any, _: Any) -> Any:
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), list):
        return payload
    return {
        **payload,
        "data": [_peers_with_configs(network) for network in payload["data"]],
    }


class ListNetworksParams(ListParams):
    sort_by: str | None = Field(default=None, description="Sort by field (id)")


class NetworkIdParams(ToolParameters):
    network_id: str = Field(description="ID of the network")


class NetworkSettings(ToolParameters):
    """Optional network settings shared by create and update."""

    bridge_device_id: str | None = Field(
        default=None, description="Device ID for bridge networks"
    )
    client_id: str | None = Field(
        default=None,
        description="Client ID for the network - should match the client_id of "
        "VMs that will use this network",
    )
    comments: str | None = Field(default=None, description="Comments about the network")
    dhcp: bool | None = Field(default=None, description="Enable DHCP server")
    dhcp_range_start: str | None = Field(
        default=None, description="DHCP range start address"
    )
    dhcp_range_end: str | None = Field(
        default=None, description="DHCP range end address"
    )
    internet: bool | None = Field(default=None, description="Allow internet access")
    nameservers: list[str] | None = Field(default=None, description="DNS servers")
    router_prefix: str | None = Field(
        default=None,
        description="IP address of the router in CIDR form. It should NOT be the "
        "network address: use '192.168.1.1/24' not '192.168.1.0/24'. Standard "
        "networks must use private IP space.",
    )
    wg: bool | None = Field(default=None, description="Enable WireGuard VPN")
    wg_prefix: str | None = Field(
        default=None,
        description="WireGuard network prefix which must not overlap with any "
        "other network's prefix",
    )

    @field_validator("router_prefix")
    @classmethod
    def _check_router_prefix(cls, value: str | None) -> str | None:
        if value is None:
            return value
        address, sep, _ = value.partition("/")
        if not sep:
            raise ValueError(
                "router_prefix must be in CIDR format (e.g. 192.168.1.1/24)"
            )
        if address.endswith(".0"):
            raise ValueError(
                "router_prefix must be the router address, not the network address"
            )
        return value

    @field_validator("wg_prefix")
    @classmethod
    def _check_wg_prefix(cls, value: str | None) -> str | None:
        if value is not None and "/" not in value:
            raise ValueError("wg_prefix must be in CIDR format (e.g. 10.8.0.0/24)")
        return value


class CreateNetworkParams(NetworkSettings):
    """Parameters for slide_create_network."""

    name: str = Field(description="Name of the network")
    type: NetworkKind = Field(description="Network type")


class UpdateNetworkParams(NetworkIdParams, NetworkSettings):
    """Parameters for slide_update_network."""

    name: str | None = Field(default=None, description="Name of the network")


class CreateIpsecParams(NetworkIdParams):
    name: str = Field(description="Name of the IPSec connection")
    remote_addrs: list[str] = Field(description="Remote addresses")
    remote_networks: list[str] = Field(description="Remote networks")


class IpsecIdParams(NetworkIdParams):
    ipsec_id: str = Field(description="ID of the IPSec connection")


class UpdateIpsecParams(IpsecIdParams):
    name: str | None = Field(default=None, description="Name of the IPSec connection")
    remote_addrs: list[str] | None = Field(default=None, description="Remote addresses")
    remote_networks: list[str] | None = Field(
        default=None, description="Remote networks"
    )


class CreatePortForwardParams(NetworkIdParams):
    proto: PortForwardProto = Field(description="Protocol (tcp/udp)")
    dest: str = Field(description="Destination address:port")


class PortForwardIdParams(NetworkIdParams):
    port_forward_id: str = Field(description="ID of the port forward")


class UpdatePortForwardParams(PortForwardIdParams):
    proto: PortForwardProto | None = Field(
        default=None, description="Protocol (tcp/udp)"
    )
    dest: str | None = Field(default=None, description="Destination address:port")


class CreateWgPeerParams(NetworkIdParams):
    peer_name: str = Field(description="Name of the WireGuard peer")
    remote_networks: list[str] | None = Field(
        default=None, description="Remote networks accessible through this peer"
    )


class WgPeerIdParams(NetworkIdParams):
    wg_peer_id: str = Field(description="ID of the WireGuard peer")


class UpdateWgPeerParams(WgPeerIdParams):
    peer_name: str | None = Field(
        default=None, description="Name of the WireGuard peer"
    )
    remote_networks: list[str] | None = Field(
        default=None, description="Remote networks accessible through this peer"
    )


def _wg_peer_tool(
    name: str,
    description: str,
    parameters_model: type[ToolParameters],
    *,
    method: str,
    path: str,
) -> ToolDefinition:
    """Create a WireGuard peer tool that also renders a client config.

    The network is fetched after the peer call to obtain the server public key
    and the network prefix used as the default ``AllowedIPs``.
    """
    placeholders = ("network_id", "wg_peer_id")

    async def handler(params: Any, backend: BackendClient) -> Any:
        result = await backend.request(
            method,
            render_path(path, params),
            body=build_body(params, exclude=placeholders),
        )
        if isinstance(result, BackendFailure):
            return result
        network = await backend.get(render_path("/v1/network/{network_id}", params))
        if isinstance(network, BackendFailure):
            return network

        peer = result.body if isinstance(result.body, Mapping) else {}
        network_body = network.body if isinstance(network.body, Mapping) else {}
        remote_networks = params.remote_networks or peer.get("remote_networks")
        return {
            **peer,
            "_wireguard_config": wireguard_config(peer, network_body, remote_networks),
            "_metadata": {
                "primary_identifier": "peer_name",
                "presentation_guidance": "Present the _wireguard_config as a "
                "ready-to-import WireGuard client configuration file.",
            },
        }

    return ToolDefinition(
        name=name,
        description=description,
        parameters_model=parameters_model,
        handler=handler,
        access=ToolAccess.RESTORE,
    )


def network_tools() -> list[ToolDefinition]:
    """Create the network tools."""
    network_path = "/v1/network/{network_id}"
    return [
        api_tool(
            "slide_list_networks",
            "List all networks with pagination and filtering options",
            ListNetworksParams,
            path="/v1/network",
            default_sort="id",
            reshape=_networks_with_configs,
            metadata=NETWORK_GUIDANCE,
        ),
        api_tool(
            "slide_get_network",
            "Get detailed information about a specific network",
            NetworkIdParams,
            path=network_path,
            reshape=_network_with_configs,
            metadata=NETWORK_GUIDANCE,
        ),
        api_tool(
            "slide_create_network",
            "Create a new network for virtual machines. Important: The network's "
            "client_id must match the client_id of the VMs that will be placed on "
            "this network. Otherwise it will not work.",
            CreateNetworkParams,
            path="/v1/network",
            method="POST",
            access=ToolAccess.RESTORE,
            reshape=_network_with_configs,
            metadata=NETWORK_GUIDANCE,
        ),
        api_tool(
            "slide_update_network",
            "Update a network's properties",
            UpdateNetworkParams,
            path=network_path,
            method="PATCH",
            access=ToolAccess.RESTORE,
            reshape=_network_with_configs,
            metadata=NETWORK_GUIDANCE,
        ),
        api_tool(
            "slide_delete_network",
            "Delete a network",
            NetworkIdParams,
            path=network_path,
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("Network", "network_id"),
        ),
        api_tool(
            "slide_create_network_ipsec_conn",
            "Create an IPSec connection for a network",
            CreateIpsecParams,
            path=network_path + "/ipsec",
            method="POST",
            access=ToolAccess.RESTORE,
        ),
        api_tool(
            "slide_update_network_ipsec_conn",
            "Update an IPSec connection for a network",
            UpdateIpsecParams,
            path=network_path + "/ipsec/{ipsec_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
        ),
        api_tool(
            "slide_delete_network_ipsec_conn",
            "Delete an IPSec connection from a network",
            IpsecIdParams,
            path=network_path + "/ipsec/{ipsec_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("IPSec connection", "ipsec_id"),
        ),
        api_tool(
            "slide_create_network_port_forward",
            "Create a port forward for a network",
            CreatePortForwardParams,
            path=network_path + "/port-forward",
            method="POST",
            access=ToolAccess.RESTORE,
        ),
        api_tool(
            "slide_update_network_port_forward",
            "Update a port forward for a network",
            UpdatePortForwardParams,
            path=network_path + "/port-forward/{port_forward_id}",
            method="PATCH",
            access=ToolAccess.RESTORE,
        ),
        api_tool(
            "slide_delete_network_port_forward",
            "Delete a port forward from a network",
            PortForwardIdParams,
            path=network_path + "/port-forward/{port_forward_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("Port forward", "port_forward_id"),
        ),
        _wg_peer_tool(
            "slide_create_network_wg_peer",
            "Create a WireGuard peer for a network VPN. The result includes a "
            "ready-to-use client configuration in _wireguard_config.",
            CreateWgPeerParams,
            method="POST",
            path=WG_PEER_PATH,
        ),
        _wg_peer_tool(
            "slide_update_network_wg_peer",
            "Update a WireGuard peer for a network VPN",
            UpdateWgPeerParams,
            method="PATCH",
            path=WG_PEER_PATH + "/{wg_peer_id}",
        ),
        api_tool(
            "slide_delete_network_wg_peer",
            "Delete a WireGuard peer from a network",
            WgPeerIdParams,
            path=WG_PEER_PATH + "/{wg_peer_id}",
            method="DELETE",
            access=ToolAccess.RESTORE,
            reshape=deleted_message("WireGuard peer", "wg_peer_id"),
        ),
    ]
