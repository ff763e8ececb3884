"""Shell command abstractions for Helm/kubectl deployment operations.

This package provides the production implementations of the
ReleaseManager and ClusterClient interfaces:

- helm: Helm repository and release management
- kubectl: Kubernetes resource management

Usage:
    from prefect_deploy.deployment.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."))
    commands.helm.upgrade_install(
        "prefect-server", "prefect/prefect-server", "prefect"
    )
"""

from collections.abc import Callable
from pathlib import Path

from ..types import CommandResult, HelmRelease
from .helm import HelmCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner, format_command


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes kubectl commands
    """

    def __init__(
        self,
        project_root: Path,
        *,
        kube_context: str | None = None,
        dry_run: bool = False,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            kube_context: kubeconfig context applied to every helm/kubectl call
            dry_run: Print commands instead of executing them
            echo: Callback used to print commands in dry-run mode
        """
        self._project_root = Path(project_root)
        self._runner = CommandRunner(self._project_root, dry_run=dry_run, echo=echo)

        self.helm = HelmCommands(self._runner, kube_context=kube_context)
        self.kubectl = KubectlCommands(self._runner, kube_context=kube_context)

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root

    @property
    def dry_run(self) -> bool:
        """Whether commands are printed instead of executed."""
        return self._runner.dry_run


__all__ = [
    "ShellCommands",
    "CommandResult",
    "HelmRelease",
    "HelmCommands",
    "KubectlCommands",
    "CommandRunner",
    "format_command",
]
