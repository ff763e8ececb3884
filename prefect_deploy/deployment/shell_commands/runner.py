"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
the helm and kubectl command modules.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from loguru import logger

from ..errors import ToolNotFoundError
from ..types import CommandResult

MASK = "****"


def _mask(arg: str, secrets: set[str]) -> str:
    if arg in secrets:
        return MASK
    key, sep, value = arg.partition("=")
    if sep and value in secrets:
        return f"{shlex.quote(key)}={MASK}"
    return shlex.quote(arg)


def format_command(cmd: Sequence[str], secrets: Iterable[str] = ()) -> str:
    """Render a command for display with secret values masked.

    Only whole arguments, or the value of a ``key=value`` argument, that
    equal a secret are masked.
    """
    hidden = {secret for secret in secrets if secret}
    return " ".join(_mask(arg, hidden) for arg in cmd)


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Commands run one at a time and block until the child exits. A
    KeyboardInterrupt reaches the child through the shared process group and
    propagates to the caller unchanged.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        dry_run: bool = False,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            dry_run: Print commands instead of executing them
            echo: Callback receiving the rendered command in dry-run mode
        """
        self.project_root = project_root
        self.dry_run = dry_run
        self._echo = echo or print

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        input_text: str | None = None,
        secrets: Iterable[str] = (),
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr
            input_text: Text written to the command's stdin
            secrets: Values masked whenever the command is displayed

        Returns:
            CommandResult with success status, output, and return code

        Raises:
            ToolNotFoundError: If the executable is not on PATH
        """
        rendered = format_command(cmd, secrets)

        if self.dry_run:
            self._echo(f"[dry-run] {rendered}")
            return CommandResult(success=True, command=rendered)

        logger.debug(f"Running: {rendered}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.project_root,
                capture_output=capture_output,
                input=input_text,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(cmd[0]) from e

        logger.debug(f"Exit code {result.returncode}: {rendered}")
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
            command=rendered,
        )
