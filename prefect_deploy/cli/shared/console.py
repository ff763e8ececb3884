"""Shared console output and error handling for CLI commands."""

from collections.abc import Callable
from functools import wraps

import typer
from rich.console import Console, ConsoleRenderable
from rich.panel import Panel

from prefect_deploy.deployment.errors import CommandFailedError, DeploymentError


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self) -> None:
        """Initialize the CLI console."""
        self.console = Console()
        self.err_console = Console(stderr=True)

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def output(self, text: str) -> None:
        """Print tool output exactly as received (no markup, no highlighting)."""
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.err_console.print(f"[red]❌[/red] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def step(self, name: str) -> None:
        self.console.print(f"\n[bold blue]▶ {name}[/bold blue]")

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.error(f"[bold red]{message}[/bold red]")
        if details:
            self.err_console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)

    def handle_command_failure(self, error: CommandFailedError) -> None:
        """Report a failed external command and exit with its status.

        The tool's stderr is written unmodified so nothing it said is lost
        to markup or wrapping.
        """
        self.error(f"[bold red]{error.message}[/bold red]")
        if error.command:
            self.err_console.print(f"[dim]$ {error.command}[/dim]", highlight=False)
        output = error.stderr or error.stdout
        if output:
            self.err_console.print(
                output.rstrip("\n"), markup=False, highlight=False, soft_wrap=True
            )
        raise typer.Exit(error.returncode or 1)

    def print_header(self, title: str, style: str = "blue") -> None:
        """Print a styled header panel.

        Args:
            title: Header title text
            style: Border style color
        """
        self.console.print(
            Panel.fit(
                f"[bold {style}]{title}[/bold {style}]",
                border_style=style,
            )
        )


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Catches deployment errors and interrupts and turns them into exit codes:
    the failing tool's own code for CommandFailedError, 1 for other
    deployment errors, 130 for Ctrl+C.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except CommandFailedError as e:
            console.handle_command_failure(e)
        except DeploymentError as e:
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
