# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Alias resolution: turn `qwk <alias> [-- args...]` into an agent argv.

The final argv is always:

    [base_command, *default_args, *extra_args, prompt]

Default args come from the agent config and apply to every run. Extra
args are one-off flags given after `--`. The prompt goes last so the
agent parses everything before it as options.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import UsageError
from .interfaces import AgentStore, AliasStore

ARGS_SEPARATOR = "--"


def split_invocation(args: Sequence[str]) -> tuple[str, list[str]]:
    """Split run arguments into (alias, extra_args).

    Args:
        args: Command line after the program name, alias first

    Returns:
        The alias and everything after the first literal `--`
    """
    if not args:
        raise UsageError("No shortcut given")

    alias, rest = args[0], list(args[1:])
    if not rest:
        return alias, []

    if rest[0] != ARGS_SEPARATOR:
        raise UsageError(
            f"Invalid usage. Use 'qwk {alias} -- <agent-args>' "
            "to pass arguments to the agent"
        )
    return alias, rest[1:]


def build_argv(
    base_command: str,
    default_args: Sequence[str],
    extra_args: Sequence[str],
    prompt: str,
) -> list[str]:
    return [base_command, *default_args, *extra_args, prompt]


def resolve_command(
    aliases: AliasStore,
    agent: AgentStore,
    alias: str,
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Resolve an alias to the argv the launcher should run.

    Raises:
        AliasNotFoundError: alias is not stored (agent config is not read)
        StoreIOError: a persisted file could not be read
    """
    prompt = aliases.get(alias)
    base_command, default_args = agent.get()
    return build_argv(base_command, default_args, extra_args, prompt)
