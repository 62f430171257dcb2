# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
User interaction for qwk.

StdIOConsole is used when stdin is piped: prompts are read to EOF.
PromptToolkitConsole is used on a terminal: prompt text is entered in a
multi-line editor and questions go through a PromptSession.
"""

from __future__ import annotations

import sys
from typing import TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings

from .config import ANSI_COLORS

PROMPT_ENTRY_HINT = (
    "Enter the prompt. Finish with Ctrl-D (or Esc then Enter), "
    "cancel with Ctrl-C."
)


class StdIOConsole:
    """Console over plain text streams (pipes, redirects, tests)."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr

    # Resolved on use so redirected sys streams (tests, click) are honoured
    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def write(self, text: str) -> None:
        print(text, file=self.stdout)

    def error(self, text: str) -> None:
        print(text, file=self.stderr)

    def ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        return self.stdin.readline().rstrip("\n")

    def read_prompt(self) -> str:
        """Read everything until EOF."""
        return self.stdin.read().strip()


class PromptToolkitConsole(StdIOConsole):
    """Console for interactive terminals."""

    def ask(self, prompt: str) -> str:
        session: PromptSession[str] = PromptSession()
        try:
            return session.prompt(ANSI(prompt))
        except (KeyboardInterrupt, EOFError):
            self.write("")
            return ""

    def read_prompt(self) -> str:
        """Multi-line entry; Ctrl-D submits, Ctrl-C returns nothing."""
        self.write(ANSI_COLORS["dim"] + PROMPT_ENTRY_HINT + ANSI_COLORS["reset"])
        session: PromptSession[str] = PromptSession(
            multiline=True,
            key_bindings=self.build_key_bindings(),
            prompt_continuation=lambda width, line_number, is_soft_wrap: (
                "." * (width - 1) + " "
            ),
        )
        caret = ANSI_COLORS["pink"] + ">" + ANSI_COLORS["reset"] + " "
        try:
            text = session.prompt(ANSI(caret))
        except (KeyboardInterrupt, EOFError):
            return ""
        return text.strip()

    # ---------- keybindings ----------

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        # Ctrl-D ends the paste (EOF) instead of aborting on empty input
        @kb.add("c-d")
        def _(event):
            event.app.exit(result=event.current_buffer.text)

        return kb


def make_console(stdin: TextIO | None = None) -> StdIOConsole:
    """Pick the console matching the terminal qwk runs in."""
    stream = stdin if stdin is not None else sys.stdin
    try:
        interactive = stream.isatty()
    except (AttributeError, OSError, ValueError):
        interactive = False

    if interactive:
        return PromptToolkitConsole(stdin=stdin)
    return StdIOConsole(stdin=stdin)
