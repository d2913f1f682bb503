"""Catalog-wide checks over every Slide tool."""

from __future__ import annotations

from typing import Any, Literal, get_args, get_origin

import pytest

from slide_mcp.tools import ToolAccess, ToolDefinition
from slide_mcp_server.tools import build_registry

REGISTRY = build_registry()
TOOLS = list(REGISTRY.values())


def _sample(annotation: Any) -> Any:
    """Return a valid value for a required field annotation."""
    origin = get_origin(annotation)
    if origin is Literal:
        return get_args(annotation)[0]
    if origin is list:
        return [_sample(get_args(annotation)[0])]
    if annotation is bool:
        return True
    if annotation is int:
        return 1
    return "x_1"


def _wrong(annotation: Any) -> Any:
    """Return a value of the wrong JSON type for a field annotation."""
    origin = get_origin(annotation)
    if origin is Literal:
        return "not-a-choice"
    if origin is list:
        return "not-a-list"
    if annotation is bool:
        return "true"
    if annotation is int:
        return "1"
    return 5


def minimal_arguments(tool: ToolDefinition) -> dict[str, Any]:
    return {
        name: _sample(field.annotation)
        for name, field in tool.parameters_model.model_fields.items()
        if field.is_required()
    }


def _required_fields(tool: ToolDefinition) -> list[tuple[str, Any]]:
    return [
        (name, field.annotation)
        for name, field in tool.parameters_model.model_fields.items()
        if field.is_required()
    ]


def test_catalog_names_match_dispatch_keys() -> None:
    """Every advertised tool name resolves to exactly one registry entry."""
    names = [tool.metadata()["name"] for tool in TOOLS]

    assert names == list(REGISTRY)
    assert len(set(names)) == len(names)
    assert all(name.startswith("slide_") for name in names)


def test_catalog_covers_every_entity() -> None:
    """The registry exposes the full Slide surface."""
    expected = {
        "slide_list_devices",
        "slide_update_device",
        "slide_poweroff_device",
        "slide_reboot_device",
        "slide_pair_agent",
        "slide_start_backup",
        "slide_get_snapshot",
        "slide_browse_file_restore",
        "slide_browse_image_export",
        "slide_update_virtual_machine",
        "slide_create_network_wg_peer",
        "slide_delete_network_ipsec_conn",
        "slide_update_alert",
        "slide_update_account",
        "slide_delete_client",
        "slide_get_user",
    }

    assert expected <= set(REGISTRY)
    assert len(REGISTRY) == 57


@pytest.mark.parametrize("tool", TOOLS, ids=lambda tool: tool.name)
def test_minimal_arguments_pass_the_guard(tool: ToolDefinition) -> None:
    """Supplying just the required fields is accepted."""
    assert tool.violations(minimal_arguments(tool)) == []


@pytest.mark.parametrize("tool", TOOLS, ids=lambda tool: tool.name)
def test_missing_or_mistyped_required_fields_fail(tool: ToolDefinition) -> None:
    """Each required field is enforced for presence and type."""
    arguments = minimal_arguments(tool)
    for name, annotation in _required_fields(tool):
        missing = {key: value for key, value in arguments.items() if key != name}
        mistyped = {**arguments, name: _wrong(annotation)}

        assert not tool.accepts(missing), f"{tool.name} accepted missing {name}"
        assert not tool.accepts(mistyped), f"{tool.name} accepted mistyped {name}"


@pytest.mark.parametrize("tool", TOOLS, ids=lambda tool: tool.name)
def test_unknown_arguments_fail(tool: ToolDefinition) -> None:
    """Arguments outside the schema are rejected."""
    assert not tool.accepts({**minimal_arguments(tool), "bogus_field": "x"})


@pytest.mark.parametrize("tool", TOOLS, ids=lambda tool: tool.name)
def test_input_schema_lists_required_fields(tool: ToolDefinition) -> None:
    """The advertised schema matches the validator's required fields."""
    schema = tool.input_schema()

    assert schema["type"] == "object"
    assert sorted(schema.get("required", [])) == sorted(minimal_arguments(tool))
    for name in minimal_arguments(tool):
        assert name in schema["properties"]


def test_read_tools_never_mutate() -> None:
    """List, get and browse tools are classed as read-only."""
    for tool in TOOLS:
        verb = tool.name.split("_")[1]
        if verb in {"list", "get", "browse"}:
            assert tool.access is ToolAccess.READ, tool.name
        else:
            assert tool.access is not ToolAccess.READ, tool.name


@pytest.mark.parametrize(
    ("access", "names"),
    [
        (ToolAccess.DANGEROUS, {"slide_poweroff_device", "slide_reboot_device"}),
        (ToolAccess.WRITE, {"slide_update_alert"}),
    ],
)
def test_access_classes(access: ToolAccess, names: set[str]) -> None:
    """Only power control is dangerous and only alert resolution is a plain write."""
    assert {tool.name for tool in TOOLS if tool.access is access} == names
