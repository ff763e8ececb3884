"""Helpers shared by the target commands."""

import typer
from rich.table import Table

from prefect_deploy.cli.context import get_cli_context


def run_target(ctx: typer.Context, target: str) -> None:
    """Run a step-graph target with all of its prerequisites."""
    cli_ctx = get_cli_context(ctx)
    executed = cli_ctx.runner().run(target)
    cli_ctx.console.ok(
        f"[bold]{target}[/bold] completed ({len(executed)} step(s) run)"
    )


def targets_table(ctx: typer.Context) -> Table:
    """Build a table of every target, its prerequisites and description."""
    graph = get_cli_context(ctx).graph
    table = Table(title="Available targets")
    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Runs first", style="dim")
    table.add_column("Description")
    for step in graph:
        table.add_row(step.name, ", ".join(step.requires), step.description)
    return table
