"""Tests for CLI context dependency injection."""

import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from prefect_deploy.cli.context import CLIContext, build_cli_context, get_cli_context
from prefect_deploy.deployment.steps import StepContext


def _context(**kwargs) -> CLIContext:
    fields = {
        "console": Mock(),
        "project_root": Path("/test"),
        "settings": Mock(),
        "commands": Mock(),
        "constants": Mock(),
        "paths": Mock(),
        "graph": Mock(),
    }
    fields.update(kwargs)
    return CLIContext(**fields)


def test_cli_context_is_immutable():
    """Test that CLIContext is frozen/immutable."""
    ctx = _context()

    with pytest.raises(AttributeError):
        ctx.console = Mock()  # type: ignore[misc]


@patch("prefect_deploy.cli.context.get_project_root")
def test_build_cli_context_creates_all_dependencies(mock_get_root, tmp_path):
    """Test that build_cli_context creates all required dependencies."""
    mock_get_root.return_value = tmp_path

    ctx = build_cli_context()

    assert ctx.project_root == tmp_path
    assert ctx.paths.project_root == tmp_path
    assert ctx.settings.namespace == "prefect"
    assert "upgrade" in ctx.graph
    assert ctx.dry_run is False


@patch("prefect_deploy.cli.context.get_project_root")
def test_build_cli_context_applies_overrides(mock_get_root, tmp_path, monkeypatch):
    mock_get_root.return_value = tmp_path
    monkeypatch.setenv("NAMESPACE", "from-env")

    ctx = build_cli_context({"namespace": "from-cli"})

    assert ctx.settings.namespace == "from-cli"


@patch("prefect_deploy.cli.context.get_project_root")
def test_dotenv_does_not_override_environment(mock_get_root, tmp_path, monkeypatch):
    mock_get_root.return_value = tmp_path
    (tmp_path / ".env").write_text("NAMESPACE=dotenv\nWORKER_WORK_QUEUE=gpu\n")
    monkeypatch.setenv("NAMESPACE", "shell")

    with patch.dict(os.environ):
        ctx = build_cli_context()

    assert ctx.settings.namespace == "shell"
    assert ctx.settings.worker_work_queue == "gpu"


@patch("prefect_deploy.cli.context.ShellCommands")
@patch("prefect_deploy.cli.context.get_project_root")
def test_shell_commands_receive_context_and_dry_run(
    mock_get_root, mock_shell_commands, tmp_path
):
    """Test that ShellCommands is initialized from the resolved settings."""
    mock_get_root.return_value = tmp_path

    ctx = build_cli_context({"kube_context": "staging"}, dry_run=True)

    mock_shell_commands.assert_called_once_with(
        tmp_path,
        kube_context="staging",
        dry_run=True,
        echo=ctx.console.output,
    )


def test_step_context_uses_shell_command_clients():
    commands = Mock()
    ctx = _context(commands=commands, dry_run=True)

    step_ctx = ctx.step_context()

    assert isinstance(step_ctx, StepContext)
    assert step_ctx.helm is commands.helm
    assert step_ctx.kubectl is commands.kubectl
    assert step_ctx.dry_run is True


def test_runner_reports_each_step():
    console = Mock()
    graph = Mock()
    ctx = _context(console=console, graph=graph)

    runner = ctx.runner()
    step = Mock()
    step.name = "add-repos"
    runner.on_step(step)

    assert runner.graph is graph
    console.step.assert_called_once_with("add-repos")


def test_get_cli_context_from_typer_context():
    """Test that get_cli_context retrieves from Typer context."""
    mock_ctx_obj = _context()
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = mock_ctx_obj

    assert get_cli_context(typer_ctx) is mock_ctx_obj


def test_get_cli_context_with_invalid_obj_falls_back():
    """Test that get_cli_context falls back when ctx.obj is not CLIContext."""
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = "invalid"

    with patch("prefect_deploy.cli.context.build_cli_context") as mock_build:
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(typer_ctx)

        mock_build.assert_called_once()


@patch("click.get_current_context")
def test_get_cli_context_uses_click_context_as_fallback(mock_get_click_ctx):
    """Test that get_cli_context uses click context when typer ctx is None."""
    mock_ctx_obj = _context()
    mock_click_context = Mock()
    mock_click_context.obj = mock_ctx_obj
    mock_get_click_ctx.return_value = mock_click_context

    result = get_cli_context(None)

    assert result is mock_ctx_obj
    mock_get_click_ctx.assert_called_once_with(silent=True)
