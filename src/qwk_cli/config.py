# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Filesystem locations and packaged settings for qwk.

Handles:
- Config directory resolution (QWK_CONFIG_HOME, ~/.config/qwk)
- Paths of the alias store, agent file, backups, markers and logs
- Packaged YAML defaults loading (qwk_cli/defaults/system.yaml)
- ANSI coloring constants for interactive prompts
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

try:
    # Py3.9+
    from importlib import resources as importlib_resources
except Exception:  # pragma: no cover
    import importlib_resources  # type: ignore

logger = logging.getLogger(__name__)


# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "pink": "\033[38;5;169;1m",
    "reset": "\033[0m",
    "dim": "\033[2m",
}

FIRST_RUN_MARKER = ".first_run_complete"


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements the Settings protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def default_agent(self) -> str:
        return str(self.get_path("agent.default_command", "claude"))

    @property
    def preview_length(self) -> int:
        return int(self.get_path("list.preview_length", 60))

    @property
    def aliases_filename(self) -> str:
        return str(self.get_path("files.aliases", "aliases.json"))

    @property
    def agent_filename(self) -> str:
        return str(self.get_path("files.agent", "agent"))

    @property
    def backup_prefix(self) -> str:
        return str(self.get_path("backup.prefix", "aliases_backup"))

    @property
    def auto_setup_completion(self) -> bool:
        return bool(self.get_path("completion.auto_setup", True))

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("list.preview_length", 60) -> 60
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Config dir + file helpers
# -----------------------


def get_config_dir() -> Path:
    """Get the config directory for qwk.

    Resolution order:
    1. QWK_CONFIG_HOME environment variable (if set)
    2. ~/.config/qwk (default, XDG_CONFIG_HOME is ignored)

    The directory is not created here; writers create it on demand.
    """
    qwk_config_home = os.getenv("QWK_CONFIG_HOME")
    if qwk_config_home:
        return Path(qwk_config_home)
    return Path.home() / ".config" / "qwk"


def ensure_config_dir(config_dir: Path) -> Path:
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def aliases_path(config_dir: Path, settings: YAMLConfig) -> Path:
    """<config_dir>/aliases.json"""
    return config_dir / settings.aliases_filename


def agent_path(config_dir: Path, settings: YAMLConfig) -> Path:
    """<config_dir>/agent"""
    return config_dir / settings.agent_filename


def first_run_marker_path(config_dir: Path) -> Path:
    return config_dir / FIRST_RUN_MARKER


def logs_dir(config_dir: Path) -> Path:
    return config_dir / "logs"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("qwk_cli.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from qwk_cli/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    logger.debug("Loaded defaults from %s", path)
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
