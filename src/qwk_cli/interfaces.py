# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the kernel independent of where aliases and the
agent command are stored, how the agent process is spawned, and how the
user is asked for input.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .executor import LaunchResult  # pragma: no cover


class AliasStore(Protocol):
    """Protocol for persistent alias -> prompt storage."""

    def get(self, name: str) -> str:
        """Return the prompt for name or raise AliasNotFoundError."""
        ...

    def set(self, name: str, prompt: str) -> None:
        """Add or overwrite an alias."""
        ...

    def remove(self, name: str) -> None:
        """Remove an alias or raise AliasNotFoundError."""
        ...

    def list(self) -> list[tuple[str, str]]:
        """List (name, preview) pairs sorted by name."""
        ...

    def names(self) -> list[str]:
        """Sorted alias names."""
        ...

    def reset(self) -> Path | None:
        """Back up the store, clear it, and return the backup path."""
        ...


class AgentStore(Protocol):
    """Protocol for the persisted agent command template."""

    def get(self) -> tuple[str, list[str]]:
        """Return (base_command, default_args)."""
        ...

    def get_raw(self) -> str:
        """Return the stored command string (or the default)."""
        ...

    def set(self, command: str) -> None:
        """Persist a new command string."""
        ...


class Launcher(Protocol):
    """Protocol for spawning the agent process."""

    def launch(self, argv: Sequence[str]) -> LaunchResult:
        """Run argv with inherited stdio and wait for it to exit."""
        ...


class Console(Protocol):
    """Minimal interface for user interaction."""

    def write(self, text: str) -> None: ...

    def error(self, text: str) -> None: ...

    def ask(self, prompt: str) -> str: ...

    def read_prompt(self) -> str: ...


class Settings(Protocol):
    """Protocol for packaged settings access."""

    @property
    def default_agent(self) -> str:
        ...

    @property
    def preview_length(self) -> int:
        ...

    @property
    def auto_setup_completion(self) -> bool:
        ...
