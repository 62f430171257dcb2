# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
File-backed storage implementation for qwk.

Handles the alias store (JSON mapping of alias -> prompt) and the agent
command file. Every write goes through atomic_write_text, so a crash
mid-write leaves the previous file intact.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from .errors import (
    AgentConfigError,
    AliasNotFoundError,
    InvalidAliasNameError,
    StoreIOError,
)
from .utils import (
    atomic_write_text,
    get_current_datetime,
    parse_agent_command,
    truncate_prompt,
    unique_path,
)

logger = logging.getLogger(__name__)

DEFAULT_AGENT = "claude"
DEFAULT_PREVIEW_LENGTH = 60
DEFAULT_BACKUP_PREFIX = "aliases_backup"


def validate_alias_name(name: str) -> None:
    """Reject names that could not be invoked as `qwk <name>`."""
    if not name or not name.strip():
        raise InvalidAliasNameError("Alias name must not be empty")
    if name.startswith("-"):
        raise InvalidAliasNameError(
            f"Alias name '{name}' must not start with '-'"
        )
    if any(ch.isspace() for ch in name):
        raise InvalidAliasNameError(
            f"Alias name '{name}' must not contain whitespace"
        )


class JsonAliasStore:
    """JSON implementation of AliasStore protocol."""

    def __init__(
        self,
        path: Path,
        backup_dir: Path | None = None,
        backup_prefix: str = DEFAULT_BACKUP_PREFIX,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
    ):
        """Initialize store with the aliases file path.

        Args:
            path: Path to the aliases JSON file (need not exist yet)
            backup_dir: Where reset() puts backups (default: path's folder)
            backup_prefix: Backup filename prefix
            preview_length: Maximum width of list() previews
        """
        self.path = path
        self.backup_dir = backup_dir if backup_dir is not None else path.parent
        self.backup_prefix = backup_prefix
        self.preview_length = preview_length

    # ----------------------------------------------------------------
    # Persistence
    # ----------------------------------------------------------------

    def load(self) -> dict[str, str]:
        """Read the whole mapping. A missing file is an empty store."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Could not read {self.path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StoreIOError(f"Could not parse {self.path}: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str)
            for k, v in data.items()
        ):
            raise StoreIOError(
                f"{self.path} must contain a JSON object of strings"
            )
        return data

    def save(self, aliases: dict[str, str]) -> None:
        content = json.dumps(
            aliases, indent=2, sort_keys=True, ensure_ascii=False
        )
        try:
            atomic_write_text(self.path, content + "\n")
        except OSError as e:
            raise StoreIOError(f"Could not write {self.path}: {e}") from e
        logger.debug("Saved %d aliases to %s", len(aliases), self.path)

    # ----------------------------------------------------------------
    # Alias operations
    # ----------------------------------------------------------------

    def get(self, name: str) -> str:
        """Return the prompt stored for name."""
        aliases = self.load()
        if name not in aliases:
            raise AliasNotFoundError(name)
        return aliases[name]

    def set(self, name: str, prompt: str) -> None:
        """Add or overwrite an alias; the prompt is stored verbatim."""
        validate_alias_name(name)
        aliases = self.load()
        aliases[name] = prompt
        self.save(aliases)

    def remove(self, name: str) -> None:
        """Remove an alias (the file is untouched if it is missing)."""
        aliases = self.load()
        if name not in aliases:
            raise AliasNotFoundError(name)
        del aliases[name]
        self.save(aliases)

    def list(self) -> list[tuple[str, str]]:
        """List (name, preview) pairs sorted by name."""
        aliases = self.load()
        return [
            (name, truncate_prompt(aliases[name], self.preview_length))
            for name in sorted(aliases)
        ]

    def names(self) -> list[str]:
        return sorted(self.load())

    def reset(self) -> Path | None:
        """Copy the store file to a timestamped backup, then empty it.

        Returns:
            Path of the backup, or None if there was no store file.
        """
        if not self.path.exists():
            return None

        backup = unique_path(
            self.backup_dir
            / f"{self.backup_prefix}_{get_current_datetime()}.json"
        )
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.path, backup)
        except OSError as e:
            raise StoreIOError(f"Error creating backup: {e}") from e

        logger.info("Backed up %s to %s", self.path, backup)
        self.save({})
        return backup


class AgentConfigStore:
    """Plain-text implementation of AgentStore protocol."""

    def __init__(self, path: Path, default_command: str = DEFAULT_AGENT):
        self.path = path
        self.default_command = default_command

    def get_raw(self) -> str:
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return self.default_command
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Could not read {self.path}: {e}") from e
        return value or self.default_command

    def get(self) -> tuple[str, list[str]]:
        command, args = parse_agent_command(self.get_raw())
        if not command:
            return self.default_command, []
        return command, args

    def set(self, command: str) -> None:
        if not command.strip():
            raise AgentConfigError("Agent command must not be empty")
        try:
            atomic_write_text(self.path, command)
        except OSError as e:
            raise StoreIOError(f"Error setting agent: {e}") from e
        logger.debug("Agent command set to %r", command)
