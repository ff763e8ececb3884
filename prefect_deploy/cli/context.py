"""CLI context and dependency container."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import click
import typer
from dotenv import load_dotenv

from prefect_deploy.cli.shared.console import CLIConsole, console
from prefect_deploy.config import DeploymentSettings, load_settings
from prefect_deploy.constants import DeploymentConstants, DeploymentPaths
from prefect_deploy.deployment.shell_commands import ShellCommands
from prefect_deploy.deployment.steps import StepContext, build_step_graph
from prefect_deploy.orchestrator import StepGraph, StepRunner
from prefect_deploy.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    settings: DeploymentSettings
    commands: ShellCommands
    constants: DeploymentConstants
    paths: DeploymentPaths
    graph: StepGraph[StepContext]
    dry_run: bool = False

    def step_context(self) -> StepContext:
        return StepContext(
            settings=self.settings,
            paths=self.paths,
            helm=self.commands.helm,
            kubectl=self.commands.kubectl,
            console=self.console,
            constants=self.constants,
            dry_run=self.dry_run,
        )

    def runner(self) -> StepRunner[StepContext]:
        """A fresh runner; each CLI invocation gets its own memo of completed steps."""
        return StepRunner(
            self.graph,
            self.step_context(),
            on_step=lambda step: self.console.step(step.name),
        )


def build_cli_context(
    overrides: Mapping[str, str | None] | None = None,
    *,
    dry_run: bool = False,
) -> CLIContext:
    """Build a fresh CLIContext.

    The project's .env file is loaded first without overriding variables
    already set, then every parameter is resolved once.
    """
    project_root = get_project_root()
    load_dotenv(project_root / ".env", override=False)

    settings = load_settings(project_root, overrides)
    constants = DeploymentConstants()
    paths = DeploymentPaths(project_root)

    return CLIContext(
        console=console,
        project_root=project_root,
        settings=settings,
        commands=ShellCommands(
            project_root,
            kube_context=settings.kube_context,
            dry_run=dry_run,
            echo=console.output,
        ),
        constants=constants,
        paths=paths,
        graph=build_step_graph(),
        dry_run=dry_run,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
