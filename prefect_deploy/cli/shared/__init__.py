"""Console, logging and error handling shared by CLI commands."""

from .console import CLIConsole, console, with_error_handling
from .logging import configure_logging

__all__ = ["CLIConsole", "console", "configure_logging", "with_error_handling"]
