# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Shell completion for qwk.

Completion scripts call back into `qwk --complete <partial>`, which prints
the alias names and public flags that start with <partial>. Nothing in the
core depends on this module; it only needs the sorted alias names.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path

from .errors import CompletionSetupError

logger = logging.getLogger(__name__)

COMMAND_FLAGS = (
    "--set",
    "--agent",
    "--list",
    "--remove",
    "--reset",
    "--setup-completion",
    "--help",
)

SETUP_COMMENT = "# qwk autocompletion setup"
INSTALLED_MARKERS = ("_qwk_complete", "__qwk_complete")


class Shell(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


_SCRIPTS: dict[Shell, str] = {
    Shell.BASH: """
_qwk_complete() {
    local cur="${COMP_WORDS[COMP_CWORD]}"
    COMPREPLY=($(qwk --complete "$cur" 2>/dev/null))
}
complete -F _qwk_complete qwk
""",
    Shell.ZSH: """
_qwk_complete() {
    local completions
    completions=($(qwk --complete "${words[CURRENT]}" 2>/dev/null))
    compadd -a completions
}
compdef _qwk_complete qwk
""",
    Shell.FISH: """
function __qwk_complete
    qwk --complete (commandline -ct) 2>/dev/null
end
complete -c qwk -f -a "(__qwk_complete)"
""",
}


def completion_candidates(
    alias_names: Iterable[str], partial: str | None = None
) -> list[str]:
    """Aliases plus command flags starting with partial, sorted."""
    candidates = list(alias_names) + list(COMMAND_FLAGS)
    if partial:
        candidates = [c for c in candidates if c.startswith(partial)]
    return sorted(candidates)


def detect_shell(env: Mapping[str, str] | None = None) -> Shell | None:
    """Guess the user's shell from $SHELL."""
    shell = (env if env is not None else os.environ).get("SHELL", "")
    for candidate in (Shell.BASH, Shell.ZSH, Shell.FISH):
        if candidate.value in shell:
            return candidate
    return None


def completion_script(shell: Shell) -> str:
    return _SCRIPTS[shell]


def shell_rc_file(shell: Shell, home: Path | None = None) -> Path:
    """Startup file the completion script is appended to."""
    home = home if home is not None else Path.home()

    if shell is Shell.BASH:
        # Prefer .bashrc, fall back to .bash_profile (macOS login shells)
        bashrc = home / ".bashrc"
        if bashrc.exists():
            return bashrc
        return home / ".bash_profile"
    if shell is Shell.ZSH:
        return home / ".zshrc"
    return home / ".config" / "fish" / "config.fish"


def is_completion_installed(shell: Shell, home: Path | None = None) -> bool:
    rc_file = shell_rc_file(shell, home)
    try:
        content = rc_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return False
    return any(marker in content for marker in INSTALLED_MARKERS)


def install_completion(shell: Shell, home: Path | None = None) -> Path:
    """Append the completion script to the shell's rc file."""
    rc_file = shell_rc_file(shell, home)
    rc_file.parent.mkdir(parents=True, exist_ok=True)

    with rc_file.open("a", encoding="utf-8") as f:
        f.write(f"\n{SETUP_COMMENT}\n{completion_script(shell)}")

    logger.info("Installed %s completion into %s", shell.value, rc_file)
    return rc_file


def activation_hint(shell: Shell) -> str:
    if shell is Shell.FISH:
        return (
            "Restart your shell or run "
            "'source ~/.config/fish/config.fish' to activate."
        )
    return (
        f"Restart your shell or run 'source ~/.{shell.value}rc' to activate."
    )


def setup_completion_for_current_shell(
    env: Mapping[str, str] | None = None, home: Path | None = None
) -> tuple[Shell, bool]:
    """Install completion for the detected shell.

    Returns:
        (shell, installed) where installed is False if it was already set up

    Raises:
        CompletionSetupError: shell unknown or rc file not writable
    """
    shell = detect_shell(env)
    if shell is None:
        raise CompletionSetupError("Could not detect current shell")

    try:
        if is_completion_installed(shell, home):
            return shell, False
        install_completion(shell, home)
    except OSError as e:
        raise CompletionSetupError(
            f"Could not update {shell.value} configuration: {e}"
        ) from e
    return shell, True
