"""Settings, logging setup and tools-mode access policy."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from pydantic import ValidationError
from pytest import MonkeyPatch

from slide_mcp_server.access import AccessPolicy
from slide_mcp_server.config import (
    DEFAULT_BASE_URL,
    Settings,
    ToolsMode,
    configure_logging,
)
from slide_mcp_server.tools import build_registry


@pytest.fixture()
def clean_env(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Drop SLIDE_* variables and any .env file from the test's view."""
    for name in ("SLIDE_API_KEY", "SLIDE_BASE_URL", "SLIDE_TOOLS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("SLIDE_DISABLED_TOOLS", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("clean_env")
class TestSettings:
    """Environment and override handling."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.api_key is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.tools is ToolsMode.FULL_SAFE
        assert settings.disabled_tool_names() == frozenset()

    def test_reads_prefixed_environment(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv("SLIDE_API_KEY", "env-key")
        monkeypatch.setenv("SLIDE_TOOLS", "restores")

        settings = Settings()

        assert settings.api_key == "env-key"
        assert settings.tools is ToolsMode.RESTORES

    def test_reads_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("SLIDE_API_KEY=file-key\n", encoding="utf-8")

        assert Settings().api_key == "file-key"

    def test_overrides_replace_only_given_values(
        self, monkeypatch: MonkeyPatch
    ) -> None:
        """Command-line values win and ``None`` leaves the environment alone."""
        monkeypatch.setenv("SLIDE_API_KEY", "env-key")

        settings = Settings().with_overrides(api_key=None, tools="reporting")

        assert settings.api_key == "env-key"
        assert settings.tools is ToolsMode.REPORTING

    def test_invalid_mode_is_rejected(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv("SLIDE_TOOLS", "god-mode")

        with pytest.raises(ValidationError):
            Settings()

    def test_disabled_tool_names_are_trimmed(self) -> None:
        settings = Settings(disabled_tools=" slide_a ,, slide_b,")

        assert settings.disabled_tool_names() == frozenset({"slide_a", "slide_b"})


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_writes_to_file(tmp_path: Path) -> None:
    """Records reach the log file as well as stderr."""
    log_file = tmp_path / "slide.log"

    configure_logging("debug", str(log_file))
    logging.getLogger("slide_mcp_server.test").debug("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logging.getLogger().level == logging.DEBUG
    assert "hello from test" in log_file.read_text(encoding="utf-8")


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_survives_unwritable_file(tmp_path: Path) -> None:
    """A log file in a missing directory only costs the file handler."""
    configure_logging("INFO", str(tmp_path / "missing" / "slide.log"))

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.FileHandler)


class TestAccessPolicy:
    """Tools-mode filtering over the real registry."""

    @pytest.mark.parametrize(
        ("mode", "tool", "allowed"),
        [
            (ToolsMode.REPORTING, "slide_list_devices", True),
            (ToolsMode.REPORTING, "slide_create_file_restore", False),
            (ToolsMode.REPORTING, "slide_update_device", False),
            (ToolsMode.RESTORES, "slide_create_file_restore", True),
            (ToolsMode.RESTORES, "slide_create_network", True),
            (ToolsMode.RESTORES, "slide_update_device", True),
            (ToolsMode.RESTORES, "slide_pair_agent", True),
            (ToolsMode.RESTORES, "slide_start_backup", True),
            (ToolsMode.RESTORES, "slide_delete_client", True),
            (ToolsMode.RESTORES, "slide_update_alert", False),
            (ToolsMode.RESTORES, "slide_reboot_device", False),
            (ToolsMode.FULL_SAFE, "slide_update_alert", True),
            (ToolsMode.FULL_SAFE, "slide_poweroff_device", False),
            (ToolsMode.FULL_SAFE, "slide_reboot_device", False),
            (ToolsMode.FULL, "slide_poweroff_device", True),
            (ToolsMode.FULL, "slide_delete_client", True),
        ],
    )
    def test_mode_filtering(self, mode: ToolsMode, tool: str, allowed: bool) -> None:
        policy = AccessPolicy(mode)

        reason = policy.denial_reason(build_registry()[tool])

        assert (reason is None) is allowed

    def test_full_safe_hides_only_power_control(self) -> None:
        """full-safe differs from full exactly by the dangerous tools."""
        registry = build_registry()

        def exposed(mode: ToolsMode) -> set[str]:
            policy = AccessPolicy(mode)
            return {
                name
                for name, tool in registry.items()
                if policy.denial_reason(tool) is None
            }

        assert exposed(ToolsMode.FULL) - exposed(ToolsMode.FULL_SAFE) == {
            "slide_poweroff_device",
            "slide_reboot_device",
        }

    def test_denial_reasons(self) -> None:
        registry = build_registry()
        policy = AccessPolicy(ToolsMode.REPORTING, {"slide_list_devices"})

        assert (
            policy.denial_reason(registry["slide_list_devices"])
            == "Tool slide_list_devices is disabled"
        )
        assert (
            policy.denial_reason(registry["slide_start_backup"])
            == "Tool slide_start_backup is not available in reporting mode"
        )
