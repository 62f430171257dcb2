# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for qwk.
"""

from __future__ import annotations

import os
import shlex
import tempfile
from datetime import datetime
from pathlib import Path


def truncate_prompt(prompt: str, max_length: int) -> str:
    """Collapse a prompt onto one line and cap it at max_length characters.

    Newlines and runs of whitespace become single spaces. Prompts longer
    than max_length are cut and end with "..." so the result never exceeds
    max_length. Below 3 characters there is no room for "...", so the text
    is simply cut.

    Args:
        prompt: Prompt text, possibly multi-line
        max_length: Maximum number of characters to return

    Returns:
        Single-line preview string
    """
    cleaned = " ".join(prompt.split())

    if len(cleaned) <= max_length:
        return cleaned
    if max_length < 3:
        return cleaned[: max(0, max_length)]
    return cleaned[: max_length - 3] + "..."


def get_current_datetime(now: datetime | None = None) -> str:
    """Return a sortable timestamp: YYYYMMDD_HHMMSS."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def unique_path(path: Path) -> Path:
    """Return path, or path with _1, _2, ... appended to the stem if taken."""
    if not path.exists():
        return path

    n = 1
    while True:
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
        if not candidate.exists():
            return candidate
        n += 1


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path via a temp file in the same directory + rename.

    Readers see either the old content or the new content, never a
    partially written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def parse_agent_command(agent_str: str) -> tuple[str, list[str]]:
    """Split an agent command template into (command, default_args).

    Uses shell-style tokenization so quoted tokens survive; a template with
    unbalanced quotes falls back to plain whitespace splitting.

    Examples:
        "claude" -> ("claude", [])
        "claude --model opus" -> ("claude", ["--model", "opus"])
        '"my agent" -v' -> ("my agent", ["-v"])
    """
    try:
        parts = shlex.split(agent_str)
    except ValueError:
        parts = agent_str.split()

    if not parts:
        return "", []
    return parts[0], parts[1:]
