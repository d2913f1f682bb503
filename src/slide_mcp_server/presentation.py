"""Presentation helpers that enrich API payloads for LLM hosts."""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

from slide_mcp_server.config import DEFAULT_VNC_VIEWER_URL

DEFAULT_ALLOWED_IPS = "0.0.0.0/0, ::/0"


def with_metadata(payload: Any, metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``payload`` with a ``_metadata`` block attached.

    Non-object payloads (including an empty response body) are wrapped under
    ``result`` so the metadata always has an object to live in.
    """
    if isinstance(payload, Mapping):
        body = dict(payload)
    elif payload is None:
        body = {}
    else:
        body = {"result": payload}
    body["_metadata"] = dict(metadata)
    return body


def vnc_viewer_url(
    virtual_machine: Mapping[str, Any], viewer_url: str = DEFAULT_VNC_VIEWER_URL
) -> str | None:
    """Build a browser VNC link for a virtual machine.

    The first ``vnc`` entry exposing a ``websocket_uri`` is used. The
    websocket URI is URL-encoded and the VNC password base64-encoded.

    Returns:
        The viewer URL, or None when the machine exposes no websocket.
    """
    entries = virtual_machine.get("vnc")
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        return None
    websocket_uri = next(
        (
            entry["websocket_uri"]
            for entry in entries
            if isinstance(entry, Mapping) and entry.get("websocket_uri")
        ),
        None,
    )
    if websocket_uri is None:
        return None
    password = str(virtual_machine.get("vnc_password") or "")
    encoded_uri = quote(str(websocket_uri), safe="!~*'()")
    encoded_password = base64.b64encode(password.encode("utf-8")).decode("ascii")
    return (
        f"{viewer_url}?id={virtual_machine.get('virt_id', '')}"
        f"&ws={encoded_uri}"
        f"&password={encoded_password}&encoding=base64"
    )


def wireguard_config(
    peer: Mapping[str, Any],
    network: Mapping[str, Any],
    remote_networks: Sequence[str] | None = None,
) -> str:
    """Render a client WireGuard configuration for a newly created peer."""
    if remote_networks:
        allowed_ips = ", ".join(remote_networks)
    else:
        allowed_ips = str(network.get("wg_prefix") or DEFAULT_ALLOWED_IPS)
    lines = [
        "[Interface]",
        f"PrivateKey = {peer.get('wg_private_key', '')}",
        f"Address = {peer.get('wg_address', '')}",
        "",
        "[Peer]",
        f"PublicKey = {network.get('wg_public_key', '')}",
        f"Endpoint = {peer.get('wg_endpoint', '')}",
        f"AllowedIPs = {allowed_ips}",
        "PersistentKeepalive = 25",
    ]
    return "\n".join(lines) + "\n"
