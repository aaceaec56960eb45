"""
Side-effecting collaborators: shell commands and environment variables.

The engine calls these through plain callables so tests and embedders can
swap them out. Commands are executed as given; nothing is sandboxed.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Mapping

from jresolve.exceptions import EnvVarMissingError, ShellCommandError
from jresolve.utils.logging import get_logger

logger = get_logger("jresolve.core.external")

CommandRunner = Callable[[str], str]


def make_shell_runner(executable: str | None = None) -> CommandRunner:
    """
    Build a runner that executes commands through the system shell.

    Args:
        executable: Shell to use (default: the platform's /bin/sh)

    Returns:
        Callable returning the command's stdout without trailing newlines
        (undecodable bytes become U+FFFD)
    """

    def run(command: str) -> str:
        logger.debug(f"Running shell command: {command}")
        try:
            completed = subprocess.run(
                command,
                shell=True,
                executable=executable,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ShellCommandError(command, 127, str(e)) from e
        if completed.returncode != 0:
            raise ShellCommandError(command, completed.returncode, completed.stderr)
        return completed.stdout.rstrip("\n")

    return run


run_shell_command = make_shell_runner()


def read_env_var(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return a non-empty environment variable or raise EnvVarMissingError."""
    source = os.environ if environ is None else environ
    value = source.get(name)
    if not value:
        raise EnvVarMissingError(name)
    return value
