# qwk — Prompt Alias Launcher for AI Agent CLIs
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
qwk CLI entry point.

Design:
- `qwk <alias> [-- agent-args...]` runs an alias and is dispatched before
  option parsing, so agent flags after `--` never reach click.
- `qwk --complete [partial]` is also dispatched directly (completion
  scripts pass partial flags such as `--se` through it).
- Everything else is a click command with one action flag per call.
- QwkError subclasses become `Error: ...` on stderr plus their exit code;
  anything unexpected is written to the crash log.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

import click
import yaml

from . import config
from .errors import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILURE,
    EXIT_OK,
    QwkError,
)
from .executor import SubprocessLauncher
from .kernel import Kernel, write_crash_log
from .resolver import split_invocation
from .store import AgentConfigStore, JsonAliasStore
from .ui import StdIOConsole, make_console

logger = logging.getLogger(__name__)

COMPLETE_FLAG = "--complete"
SETUP_COMPLETION_FLAG = "--setup-completion"
EXIT_INTERRUPTED = 130

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

EPILOG = """\b
Run a shortcut:
  qwk <alias>                    run the agent with the stored prompt
  qwk <alias> -- <agent-args>    pass one-off arguments to the agent
"""


def configure_logging() -> None:
    """Warnings to stderr; everything with QWK_DEBUG=1."""
    level = logging.DEBUG if os.environ.get("QWK_DEBUG") == "1" else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_kernel(
    console: StdIOConsole | None = None, config_dir: Path | None = None
) -> Kernel:
    """Wire settings, stores, launcher and console into a Kernel."""
    settings = config.load_system_config()
    config_dir = config_dir if config_dir is not None else config.get_config_dir()

    aliases = JsonAliasStore(
        config.aliases_path(config_dir, settings),
        backup_prefix=settings.backup_prefix,
        preview_length=settings.preview_length,
    )
    agent = AgentConfigStore(
        config.agent_path(config_dir, settings),
        default_command=settings.default_agent,
    )
    return Kernel(
        aliases=aliases,
        agent=agent,
        launcher=SubprocessLauncher(),
        console=console if console is not None else make_console(),
        settings=settings,
        config_dir=config_dir,
    )


@click.command(name="qwk", context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option(
    "--set", "set_name", metavar="ALIAS",
    help="Set an alias for a prompt. Reads the prompt from stdin if "
    "PROMPT is not given.",
)
@click.option(
    "--agent", "agent_command", metavar="COMMAND",
    help="Set the agent command to use. Can include default arguments "
    "(in quotes) passed on every call. Defaults to 'claude'.",
)
@click.option(
    "--list", "list_all", is_flag=True,
    help="List all available shortcuts with a preview of their prompts.",
)
@click.option(
    "--remove", "remove_name", metavar="ALIAS",
    help="Remove a specific shortcut.",
)
@click.option(
    "--reset", "reset_all", is_flag=True,
    help="Reset all shortcuts (creates a backup). The agent setting is "
    "preserved.",
)
@click.option(
    "--setup-completion", "setup_completion", is_flag=True,
    help="Set up shell autocompletion for the current shell.",
)
@click.argument("prompt", nargs=-1)
@click.pass_context
def qwk_command(
    ctx: click.Context,
    set_name: str | None,
    agent_command: str | None,
    list_all: bool,
    remove_name: str | None,
    reset_all: bool,
    setup_completion: bool,
    prompt: tuple[str, ...],
) -> None:
    """A CLI tool for creating aliases for AI agents."""
    kernel: Kernel = ctx.obj

    chosen = [
        set_name is not None,
        agent_command is not None,
        list_all,
        remove_name is not None,
        reset_all,
        setup_completion,
    ]
    if sum(chosen) > 1:
        raise click.UsageError("Use only one action flag per call.")

    if prompt and set_name is None:
        raise click.UsageError(
            f"Unexpected argument '{prompt[0]}'. "
            "Shortcuts must come first: qwk <alias> -- <agent-args>"
        )

    if set_name is not None:
        if len(prompt) > 1:
            raise click.UsageError(
                "Quote the prompt: qwk --set <alias> \"<prompt text>\""
            )
        code = kernel.set_alias(set_name, prompt[0] if prompt else None)
    elif agent_command is not None:
        code = kernel.configure_agent(agent_command)
    elif list_all:
        code = kernel.list_aliases()
    elif remove_name is not None:
        code = kernel.remove_alias(remove_name)
    elif reset_all:
        code = kernel.reset()
    elif setup_completion:
        code = kernel.setup_completion()
    else:
        click.echo(ctx.get_help())
        code = EXIT_OK

    ctx.exit(code)


def _invoke_click(args: Sequence[str], kernel: Kernel) -> int:
    try:
        rv = qwk_command.main(
            args=list(args),
            prog_name="qwk",
            standalone_mode=False,
            obj=kernel,
        )
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.exceptions.Abort:
        return EXIT_FAILURE
    return rv if isinstance(rv, int) else EXIT_OK


def dispatch(args: Sequence[str], kernel: Kernel) -> int:
    """Run one qwk invocation and return the process exit code."""
    args = list(args)
    try:
        if args and args[0] == COMPLETE_FLAG:
            return kernel.complete(args[1] if len(args) > 1 else None)

        if args and args[0] == SETUP_COMPLETION_FLAG:
            # the explicit setup below replaces the automatic one
            kernel.mark_first_run_complete()
        else:
            kernel.handle_first_run()

        if args and not args[0].startswith("-"):
            alias, extra_args = split_invocation(args)
            return kernel.run(alias, extra_args)

        return _invoke_click(args, kernel)
    except QwkError as e:
        logger.debug("%s: %s", type(e).__name__, e)
        kernel.console.error(f"Error: {e}")
        return e.exit_code


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the qwk CLI."""
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        kernel = build_kernel()
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: could not load qwk settings: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        code = dispatch(args, kernel)
    except KeyboardInterrupt:
        kernel.console.error("")
        code = EXIT_INTERRUPTED
    except Exception as e:
        # Unhandled exception - write crash log
        write_crash_log(e, kernel.config_dir, raw_command=" ".join(args))
        kernel.console.error(
            f"[ERROR] Unhandled exception: {type(e).__name__}: {e}"
        )
        code = EXIT_FAILURE

    sys.exit(code)
