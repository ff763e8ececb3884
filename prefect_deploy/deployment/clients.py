"""Abstract interfaces for the external tools the harness drives.

Deployment steps only talk to these interfaces. The production
implementations shell out to ``helm`` and ``kubectl``
(see prefect_deploy.deployment.shell_commands); tests substitute in-memory
fakes that record every call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from .types import CommandResult, HelmRelease


class ReleaseManager(ABC):
    """Release-manager operations (install, upgrade, uninstall, repos)."""

    # =========================================================================
    # Repositories
    # =========================================================================

    @abstractmethod
    def add_repo(self, name: str, url: str) -> CommandResult:
        """Register a chart repository under a local name."""
        ...

    @abstractmethod
    def update_repos(self) -> CommandResult:
        """Refresh the local index of every registered repository."""
        ...

    # =========================================================================
    # Releases
    # =========================================================================

    @abstractmethod
    def install(
        self,
        release_name: str,
        chart: str,
        namespace: str,
        *,
        version: str | None = None,
        value_files: Sequence[Path] = (),
        set_values: Mapping[str, str] | None = None,
        set_files: Mapping[str, Path] | None = None,
        secret_values: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Install a release. Fails if the release already exists.

        Args:
            release_name: Name of the release
            chart: Chart reference (repo/chart or path)
            namespace: Target namespace
            version: Chart version to pin (None for latest)
            value_files: Overlay files, in order of precedence
            set_values: Individual ``--set`` values
            set_files: ``--set-file`` values read from files
            secret_values: ``--set`` values that must never be displayed
        """
        ...

    @abstractmethod
    def upgrade_install(
        self,
        release_name: str,
        chart: str,
        namespace: str,
        *,
        version: str | None = None,
        value_files: Sequence[Path] = (),
        set_values: Mapping[str, str] | None = None,
        set_files: Mapping[str, Path] | None = None,
        secret_values: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Upgrade a release, installing it first if it does not exist.

        Takes the same arguments as install().
        """
        ...

    @abstractmethod
    def uninstall(self, release_name: str, namespace: str) -> CommandResult:
        """Remove a release and its resources."""
        ...

    @abstractmethod
    def list_releases(self, namespace: str) -> list[HelmRelease]:
        """List releases in a namespace.

        Raises:
            CommandFailedError: If the release manager cannot be queried
        """
        ...


class ClusterClient(ABC):
    """Cluster-control operations (apply, delete, get, port-forward, logs)."""

    @abstractmethod
    def apply_file(self, path: Path, namespace: str | None = None) -> CommandResult:
        """Declaratively apply a manifest file."""
        ...

    @abstractmethod
    def apply_manifest(self, manifest: str) -> CommandResult:
        """Declaratively apply a manifest given as text."""
        ...

    @abstractmethod
    def render_namespace(self, namespace: str) -> CommandResult:
        """Render a Namespace manifest without touching the cluster."""
        ...

    @abstractmethod
    def delete_file(
        self,
        path: Path,
        namespace: str | None = None,
        *,
        ignore_not_found: bool = True,
    ) -> CommandResult:
        """Delete the resources described by a manifest file."""
        ...

    @abstractmethod
    def get(self, resources: str, namespace: str) -> CommandResult:
        """Show resources of the given kinds in a namespace."""
        ...

    @abstractmethod
    def port_forward(
        self,
        namespace: str,
        target: str,
        local_port: int,
        remote_port: int,
    ) -> CommandResult:
        """Forward a local port to a service or pod. Blocks until interrupted."""
        ...

    @abstractmethod
    def logs(self, namespace: str, target: str, *, tail: int) -> CommandResult:
        """Fetch recent logs of a workload."""
        ...
