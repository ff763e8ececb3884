"""Overlay scaffolding targets and the target listing."""

import typer

from prefect_deploy.cli.shared import console, with_error_handling

from .shared import run_target, targets_table


@with_error_handling
def create_server_values(ctx: typer.Context) -> None:
    """Create the default server values file if it doesn't exist."""
    run_target(ctx, "create-server-values")


@with_error_handling
def create_worker_values(ctx: typer.Context) -> None:
    """Create the default worker values file if it doesn't exist."""
    run_target(ctx, "create-worker-values")


@with_error_handling
def create_values(ctx: typer.Context) -> None:
    """Create both default values files if they don't exist."""
    run_target(ctx, "create-values")


@with_error_handling
def show_help(ctx: typer.Context) -> None:
    """List every target with its prerequisites."""
    console.print_header("Prefect Server and Worker Helm Deployment")
    console.print(targets_table(ctx))
    console.print(
        "\n[dim]Parameters can be set with environment variables, a .env file, "
        "or --set NAME=VALUE before the target name.[/dim]"
    )


COMMANDS = {
    "create-server-values": create_server_values,
    "create-worker-values": create_worker_values,
    "create-values": create_values,
    "help": show_help,
}
