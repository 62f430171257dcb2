"""
Tests that verify Protocol definitions are valid and implementations comply.
These tests don't test behavior - just that contracts exist.
"""

from __future__ import annotations

from pathlib import Path

from qwk_cli import interfaces
from qwk_cli.config import YAMLConfig
from qwk_cli.executor import SubprocessLauncher
from qwk_cli.store import AgentConfigStore, JsonAliasStore
from qwk_cli.ui import PromptToolkitConsole, StdIOConsole

ALIAS_STORE_METHODS = ["get", "set", "remove", "list", "names", "reset"]
AGENT_STORE_METHODS = ["get", "get_raw", "set"]
CONSOLE_METHODS = ["write", "error", "ask", "read_prompt"]
SETTINGS_ATTRS = ["default_agent", "preview_length", "auto_setup_completion"]


def test_alias_store_protocol_exists():
    for method in ALIAS_STORE_METHODS:
        assert hasattr(interfaces.AliasStore, method), f"AliasStore missing {method}"


def test_agent_store_protocol_exists():
    for method in AGENT_STORE_METHODS:
        assert hasattr(interfaces.AgentStore, method), f"AgentStore missing {method}"


def test_launcher_protocol_exists():
    assert hasattr(interfaces.Launcher, "launch")


def test_json_alias_store_conforms(tmp_path: Path):
    store = JsonAliasStore(tmp_path / "aliases.json")
    for method in ALIAS_STORE_METHODS:
        assert callable(getattr(store, method)), f"JsonAliasStore missing {method}"


def test_agent_config_store_conforms(tmp_path: Path):
    store = AgentConfigStore(tmp_path / "agent")
    for method in AGENT_STORE_METHODS:
        assert callable(getattr(store, method)), f"AgentConfigStore missing {method}"


def test_subprocess_launcher_conforms():
    assert callable(SubprocessLauncher().launch)


def test_consoles_conform():
    for console in (StdIOConsole(), PromptToolkitConsole()):
        for method in CONSOLE_METHODS:
            assert callable(getattr(console, method))


def test_yaml_config_conforms_to_settings():
    cfg = YAMLConfig({})
    for attr in SETTINGS_ATTRS:
        assert hasattr(cfg, attr), f"YAMLConfig missing {attr}"
