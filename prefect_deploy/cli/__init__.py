"""Main CLI application module.

This module provides the main entry point for the prefect-deploy CLI.
Every command is a named target of the deployment step graph; running a
target runs its prerequisites first, each exactly once.

Parameters resolve in this order: options given here, then environment
variables (a .env file in the project root is loaded without overriding
real ones), then the built-in defaults.
"""

from typing import Annotated

import typer

from prefect_deploy.config import parse_assignments

from .commands import COMMANDS
from .context import build_cli_context
from .shared import configure_logging, with_error_handling

# Create the main CLI application
app = typer.Typer(
    help="🚀 Prefect server, worker and OAuth2 Proxy deployment on Kubernetes",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
@with_error_handling
def main_callback(
    ctx: typer.Context,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Kubernetes namespace"),
    ] = None,
    context: Annotated[
        str | None,
        typer.Option("--context", help="kubeconfig context for helm and kubectl"),
    ] = None,
    chart_version: Annotated[
        str | None,
        typer.Option(
            "--chart-version", help="Prefect chart version ('latest' to track)"
        ),
    ] = None,
    server_values: Annotated[
        str | None,
        typer.Option("--server-values", help="Server values overlay file"),
    ] = None,
    worker_values: Annotated[
        str | None,
        typer.Option("--worker-values", help="Worker values overlay file"),
    ] = None,
    oauth2_values: Annotated[
        str | None,
        typer.Option("--oauth2-values", help="OAuth2 Proxy values overlay file"),
    ] = None,
    work_queue: Annotated[
        str | None,
        typer.Option("--work-queue", help="Work queue polled by the worker"),
    ] = None,
    set_params: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            help="Override any parameter as NAME=VALUE (repeatable)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print commands instead of running them"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Resolve parameters once and share them with the invoked target."""
    configure_logging(verbose)

    overrides: dict[str, str | None] = parse_assignments(set_params)
    # Dedicated options win over --set for the same parameter
    for name, value in {
        "namespace": namespace,
        "kube_context": context,
        "chart_version": chart_version,
        "server_values_file": server_values,
        "worker_values_file": worker_values,
        "oauth2_values_file": oauth2_values,
        "worker_work_queue": work_queue,
    }.items():
        if value is not None:
            overrides[name] = value

    ctx.obj = build_cli_context(overrides, dry_run=dry_run)


for _name, _command in COMMANDS.items():
    app.command(_name)(_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
