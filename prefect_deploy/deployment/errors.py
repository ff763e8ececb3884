"""Errors raised by deployment steps."""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ToolNotFoundError(DeploymentError):
    """Raised when a required CLI tool (helm, kubectl) is not on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(
            f"Required tool '{tool}' was not found",
            details=f"Install {tool} and make sure it is on your PATH.",
        )


class CommandFailedError(DeploymentError):
    """Raised when an external command exits with a non-zero status.

    The command's output is kept exactly as the tool produced it so the CLI
    can surface it without rewording.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message, details=stderr or stdout or None)


class StepGraphError(DeploymentError):
    """Raised for an invalid step graph or an unknown target."""


class UnknownParameterError(DeploymentError):
    """Raised when an override names a parameter that does not exist."""


class InvalidParameterError(DeploymentError):
    """Raised when a parameter value cannot be converted to its type."""
