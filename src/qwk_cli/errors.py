# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Exception types for qwk.

Every error carries the process exit code the CLI reports for it, so
scripts can tell a missing alias apart from a broken config or an agent
that could not be started.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_ALIAS_NOT_FOUND = 3
EXIT_CONFIG_ERROR = 4
EXIT_SPAWN_ERROR = 127


class QwkError(Exception):
    """Base exception for all qwk errors."""

    exit_code = EXIT_FAILURE


class AliasNotFoundError(QwkError):
    """Raised when a requested alias does not exist in the store."""

    exit_code = EXIT_ALIAS_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Shortcut '{name}' not found")
        self.name = name


class InvalidAliasNameError(QwkError):
    """Raised when an alias name could never be invoked from the shell."""

    exit_code = EXIT_USAGE


class StoreIOError(QwkError):
    """Raised when a persisted file cannot be read, parsed or written."""

    exit_code = EXIT_CONFIG_ERROR


class AgentConfigError(QwkError):
    """Raised when the agent command is unusable."""

    exit_code = EXIT_CONFIG_ERROR


class AgentSpawnError(QwkError):
    """Raised when the agent process could not be started at all."""

    exit_code = EXIT_SPAWN_ERROR

    def __init__(self, command: str, reason: str):
        super().__init__(f"Error executing agent '{command}': {reason}")
        self.command = command
        self.reason = reason


class EmptyPromptError(QwkError):
    """Raised when an alias would be stored without any prompt text."""


class UsageError(QwkError):
    """Raised for malformed command lines."""

    exit_code = EXIT_USAGE


class CompletionSetupError(QwkError):
    """Raised when shell completion cannot be installed."""
