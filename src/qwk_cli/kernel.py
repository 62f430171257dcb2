# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
qwk session engine.

Design:
- Kernel owns the user-facing operations (run, set, agent, list, remove,
  reset, complete, setup-completion).
- Storage, launching, console and settings are injected, so tests can
  point everything at temporary locations and fake processes.
- Operations return an exit code and raise QwkError subclasses; the CLI
  turns those into messages and exit statuses.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from . import completion
from . import config as cfg_module
from .errors import EXIT_OK, CompletionSetupError, EmptyPromptError
from .interfaces import AgentStore, AliasStore, Console, Launcher, Settings
from .resolver import resolve_command
from .store import validate_alias_name

logger = logging.getLogger(__name__)

RESET_QUESTION = (
    "This will remove all shortcuts (a backup will be created). "
    "Are you sure? (y/N): "
)


def write_crash_log(
    error: BaseException,
    config_dir: Path,
    raw_command: str = "",
    resolved_command: str = "",
) -> Path | None:
    """Append an entry to <config_dir>/logs/crash.log.

    Logs unhandled exceptions. Only creates the log directory when
    actually needed. Never overwrites earlier entries.
    """
    logs_dir = cfg_module.logs_dir(config_dir)
    crash_log_path = logs_dir / "crash.log"

    lines = [datetime.now().isoformat()]
    if raw_command:
        lines.append(f"raw={raw_command}")
    if resolved_command:
        lines.append(f"resolved={resolved_command}")
    lines.append(f"error={type(error).__name__}: {error}")
    lines.append("traceback:")
    lines.append(
        "".join(
            traceback.format_exception(
                type(error), error, error.__traceback__
            )
        )
    )
    lines.append("----")

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        logger.warning("Could not write crash log %s: %s", crash_log_path, e)
        return None
    return crash_log_path


@dataclass
class Kernel:
    """qwk session engine."""

    aliases: AliasStore
    agent: AgentStore
    launcher: Launcher
    console: Console
    settings: Settings
    config_dir: Path

    # Shell detection inputs (default: real environment and home)
    env: Mapping[str, str] | None = None
    home: Path | None = None

    # ----------------------------------------------------------------
    # Running aliases
    # ----------------------------------------------------------------

    def resolve(self, alias: str, extra_args: Sequence[str] = ()) -> list[str]:
        return resolve_command(self.aliases, self.agent, alias, extra_args)

    def run(self, alias: str, extra_args: Sequence[str] = ()) -> int:
        """Run the agent for alias and return the agent's exit code."""
        argv = self.resolve(alias, extra_args)
        logger.debug("Resolved %r -> %r", alias, argv)
        result = self.launcher.launch(argv)
        return result.exit_code

    # ----------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------

    def set_alias(self, alias: str, prompt: str | None = None) -> int:
        """Store prompt under alias, reading it from the console if None."""
        # Validate first so the user does not type a prompt for nothing
        validate_alias_name(alias)

        text = prompt if prompt is not None else self.console.read_prompt()
        if not text.strip():
            raise EmptyPromptError("No prompt provided; nothing was saved")

        self.aliases.set(alias, text)
        self.console.write(f"Alias '{alias}' set successfully")
        return EXIT_OK

    def configure_agent(self, command: str) -> int:
        self.agent.set(command)
        self.console.write(f"Agent set to '{command}'")
        return EXIT_OK

    def remove_alias(self, alias: str) -> int:
        self.aliases.remove(alias)
        self.console.write(f"Shortcut '{alias}' removed successfully")
        return EXIT_OK

    def reset(self) -> int:
        """Back up and clear all aliases after confirmation."""
        answer = self.console.ask(RESET_QUESTION).strip().lower()
        if answer not in ("y", "yes"):
            self.console.write("Reset cancelled.")
            return EXIT_OK

        backup = self.aliases.reset()
        if backup is None:
            self.console.write("No existing aliases file to backup.")
        else:
            self.console.write(f"Backup created: {backup}")

        self.console.write("All shortcuts have been reset.")
        return EXIT_OK

    # ----------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------

    def list_aliases(self) -> int:
        entries = self.aliases.list()
        if not entries:
            self.console.write("No shortcuts available.")
            return EXIT_OK

        lines = ["Available shortcuts:"]
        for name, preview in entries:
            lines.append(f"  {name} - {preview}")
        self.console.write("\n".join(lines))
        return EXIT_OK

    def complete(self, partial: str | None = None) -> int:
        candidates = completion.completion_candidates(
            self.aliases.names(), partial
        )
        if candidates:
            self.console.write("\n".join(candidates))
        return EXIT_OK

    # ----------------------------------------------------------------
    # Shell integration
    # ----------------------------------------------------------------

    def setup_completion(self) -> int:
        shell, installed = completion.setup_completion_for_current_shell(
            env=self.env, home=self.home
        )
        if not installed:
            self.console.write(
                f"Autocompletion is already set up for {shell.value}"
            )
            return EXIT_OK

        self.console.write(f"Autocompletion set up for {shell.value}!")
        self.console.write(completion.activation_hint(shell))
        return EXIT_OK

    def is_first_run(self) -> bool:
        return not cfg_module.first_run_marker_path(self.config_dir).exists()

    def handle_first_run(self) -> None:
        """Try to install completion once, the first time qwk runs."""
        if not self.is_first_run():
            return

        if self.settings.auto_setup_completion:
            self.console.write("Welcome to qwk! Setting up autocompletion...")
            try:
                self.setup_completion()
            except CompletionSetupError as e:
                self.console.error(
                    f"Note: Could not set up autocompletion automatically: {e}"
                )
                self.console.error(
                    "You can set it up manually later with: "
                    "qwk --setup-completion"
                )

        self.mark_first_run_complete()

    def mark_first_run_complete(self) -> None:
        marker = cfg_module.first_run_marker_path(self.config_dir)
        try:
            cfg_module.ensure_config_dir(self.config_dir)
            marker.write_text("", encoding="utf-8")
        except OSError as e:
            self.console.error(
                f"Warning: Could not mark first run as complete: {e}"
            )
