# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed launcher for the agent process.

The agent takes over the terminal: stdin/stdout/stderr are inherited,
nothing is captured, and there is no timeout. qwk blocks until the agent
exits and reports its exit code.

Signals while the agent runs:
- SIGINT is ignored by qwk. Ctrl-C goes to the whole foreground process
  group, so the agent receives it once and decides what to do with it.
- SIGTERM and SIGHUP are forwarded to the agent.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .errors import AgentSpawnError

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)


@dataclass(frozen=True)
class LaunchResult:
    """Result from passthrough execution (no output capture)."""

    exit_code: int
    started_at: str
    duration_ms: int


def normalize_returncode(returncode: int) -> int:
    """Map Popen return codes to shell-style exit codes.

    A child killed by signal N has returncode -N; shells report 128 + N.
    """
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


class _SignalRelay:
    """Forwards termination signals to the agent once it exists.

    Signals that arrive before the agent is spawned are held and
    delivered by attach().
    """

    def __init__(self) -> None:
        self.proc: subprocess.Popen | None = None
        self.pending: list[int] = []
        self.previous: dict[int, Any] = {}

    def handle(self, signum: int, _frame: Any) -> None:
        if self.proc is None:
            self.pending.append(signum)
        elif self.proc.poll() is None:
            logger.debug("Forwarding signal %s to pid %s", signum, self.proc.pid)
            self.proc.send_signal(signum)

    def attach(self, proc: subprocess.Popen) -> None:
        self.proc = proc
        pending, self.pending = self.pending, []
        for signum in pending:
            self.handle(signum, None)

    def restore_in_child(self) -> None:
        """Runs in the forked child before exec.

        SIG_IGN survives exec, so the agent would otherwise inherit
        qwk's ignored SIGINT.
        """
        for signum, handler in self.previous.items():
            signal.signal(
                signum,
                signal.SIG_IGN if handler == signal.SIG_IGN else signal.SIG_DFL,
            )


@contextmanager
def _forward_signals() -> Iterator[_SignalRelay | None]:
    """Ignore SIGINT and relay termination signals for the whole launch.

    Handlers go in before the agent is spawned so a Ctrl-C can never hit
    qwk between spawn and wait.
    """
    if threading.current_thread() is not threading.main_thread():
        # signal handlers can only be installed from the main thread
        yield None
        return

    relay = _SignalRelay()
    relay.previous[signal.SIGINT] = signal.signal(signal.SIGINT, signal.SIG_IGN)
    for signum in FORWARDED_SIGNALS:
        relay.previous[signum] = signal.signal(signum, relay.handle)
    try:
        yield relay
    finally:
        for signum, handler in relay.previous.items():
            signal.signal(
                signum, handler if handler is not None else signal.SIG_DFL
            )
        # Spawn failed with a termination signal pending: deliver it to qwk
        for signum in relay.pending:
            signal.raise_signal(signum)


class SubprocessLauncher:
    """Subprocess implementation of Launcher protocol."""

    def __init__(self, env: dict[str, str] | None = None, cwd: str | None = None):
        """Initialize launcher.

        Args:
            env: Environment for the agent (default: inherit qwk's)
            cwd: Working directory for the agent (default: current)
        """
        self.env = env
        self.cwd = cwd

    def launch(self, argv: Sequence[str]) -> LaunchResult:
        """Run argv with full terminal control and wait for it to exit.

        Args:
            argv: Agent command, its arguments, and the prompt last

        Returns:
            LaunchResult (exit_code, started_at, duration_ms)

        Raises:
            AgentSpawnError: the agent could not be started
        """
        if not argv:
            raise AgentSpawnError("", "empty command")

        started_at = datetime.now().isoformat()
        start_ts = time.time()

        logger.debug("Launching %r", list(argv))
        with _forward_signals() as relay:
            proc = self._spawn(argv, relay)
            if relay is not None:
                relay.attach(proc)
            returncode = proc.wait()

        duration_ms = int((time.time() - start_ts) * 1000)
        exit_code = normalize_returncode(returncode)
        logger.debug("Agent exited with %s after %sms", exit_code, duration_ms)

        return LaunchResult(
            exit_code=exit_code,
            started_at=started_at,
            duration_ms=duration_ms,
        )

    def _spawn(
        self, argv: Sequence[str], relay: _SignalRelay | None
    ) -> subprocess.Popen:
        preexec_fn = None
        if relay is not None and os.name == "posix":
            preexec_fn = relay.restore_in_child

        try:
            # Inherit stdin/stdout/stderr from qwk
            return subprocess.Popen(
                list(argv),
                stdin=None,
                stdout=None,
                stderr=None,
                env=self.env,
                cwd=self.cwd,
                preexec_fn=preexec_fn,
            )
        except FileNotFoundError:
            raise AgentSpawnError(argv[0], "command not found") from None
        except PermissionError:
            raise AgentSpawnError(argv[0], "permission denied") from None
        except OSError as e:
            raise AgentSpawnError(argv[0], str(e)) from e
