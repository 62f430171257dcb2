# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
qwk core package.

Bind short aliases to stored prompts and launch an AI agent CLI with
them: `qwk --set docs "Generate docs"`, then `qwk docs`.
"""
from .kernel import Kernel as Kernel  # noqa: F401 (re-export)

__version__ = "0.1.0"
