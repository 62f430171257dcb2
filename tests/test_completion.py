from __future__ import annotations

from pathlib import Path

import pytest

from qwk_cli.completion import (
    COMMAND_FLAGS,
    SETUP_COMMENT,
    Shell,
    activation_hint,
    completion_candidates,
    completion_script,
    detect_shell,
    install_completion,
    is_completion_installed,
    setup_completion_for_current_shell,
    shell_rc_file,
)
from qwk_cli.errors import CompletionSetupError


# ----------------------------------------------------------------
# Candidates
# ----------------------------------------------------------------


def test_candidates_include_aliases_and_flags_sorted() -> None:
    result = completion_candidates(["zeta", "alpha"])

    assert result == sorted(["zeta", "alpha", *COMMAND_FLAGS])


def test_candidates_filtered_by_prefix() -> None:
    assert completion_candidates(["docs", "deploy", "test"], "d") == [
        "deploy",
        "docs",
    ]
    assert completion_candidates([], "--se") == ["--set", "--setup-completion"]


def test_empty_partial_means_no_filter() -> None:
    assert len(completion_candidates(["docs"], "")) == len(COMMAND_FLAGS) + 1


# ----------------------------------------------------------------
# Shell detection + scripts
# ----------------------------------------------------------------


@pytest.mark.parametrize(
    "shell,expected",
    [
        ("/bin/bash", Shell.BASH),
        ("/usr/local/bin/zsh", Shell.ZSH),
        ("/usr/bin/fish", Shell.FISH),
        ("/bin/tcsh", None),
        ("", None),
    ],
)
def test_detect_shell(shell: str, expected: Shell | None) -> None:
    assert detect_shell({"SHELL": shell}) is expected


def test_detect_shell_without_shell_variable() -> None:
    assert detect_shell({}) is None


def test_completion_scripts_call_back_into_qwk() -> None:
    bash = completion_script(Shell.BASH)
    assert "_qwk_complete" in bash
    assert "COMP_WORDS" in bash

    zsh = completion_script(Shell.ZSH)
    assert "_qwk_complete" in zsh
    assert "compdef" in zsh

    fish = completion_script(Shell.FISH)
    assert "__qwk_complete" in fish
    assert "commandline" in fish

    for shell in Shell:
        assert "qwk --complete" in completion_script(shell)


def test_activation_hints() -> None:
    assert "~/.zshrc" in activation_hint(Shell.ZSH)
    assert "config.fish" in activation_hint(Shell.FISH)


# ----------------------------------------------------------------
# rc files + installation
# ----------------------------------------------------------------


def test_bash_prefers_bashrc(tmp_path: Path) -> None:
    assert shell_rc_file(Shell.BASH, tmp_path) == tmp_path / ".bash_profile"

    (tmp_path / ".bashrc").write_text("")
    assert shell_rc_file(Shell.BASH, tmp_path) == tmp_path / ".bashrc"


def test_zsh_and_fish_rc_files(tmp_path: Path) -> None:
    assert shell_rc_file(Shell.ZSH, tmp_path) == tmp_path / ".zshrc"
    assert (
        shell_rc_file(Shell.FISH, tmp_path)
        == tmp_path / ".config" / "fish" / "config.fish"
    )


def test_install_appends_and_is_detected(tmp_path: Path) -> None:
    rc = tmp_path / ".zshrc"
    rc.write_text("export EDITOR=vim\n")
    assert not is_completion_installed(Shell.ZSH, tmp_path)

    assert install_completion(Shell.ZSH, tmp_path) == rc

    content = rc.read_text()
    assert content.startswith("export EDITOR=vim\n")
    assert SETUP_COMMENT in content
    assert is_completion_installed(Shell.ZSH, tmp_path)


def test_install_fish_creates_config_dir(tmp_path: Path) -> None:
    rc = install_completion(Shell.FISH, tmp_path)

    assert rc.exists()
    assert is_completion_installed(Shell.FISH, tmp_path)


def test_setup_for_current_shell_is_idempotent(tmp_path: Path) -> None:
    env = {"SHELL": "/bin/zsh"}

    assert setup_completion_for_current_shell(env, tmp_path) == (Shell.ZSH, True)
    assert setup_completion_for_current_shell(env, tmp_path) == (Shell.ZSH, False)
    assert (tmp_path / ".zshrc").read_text().count(SETUP_COMMENT) == 1


def test_setup_for_unknown_shell_raises(tmp_path: Path) -> None:
    with pytest.raises(CompletionSetupError):
        setup_completion_for_current_shell({"SHELL": "/bin/tcsh"}, tmp_path)
