"""Helm command abstractions.

This module provides commands for Helm repository and release management,
including installation, upgrades, uninstallation, and status queries.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..clients import ReleaseManager
from ..errors import CommandFailedError
from ..types import CommandResult, HelmRelease

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands(ReleaseManager):
    """Helm-related shell commands.

    Provides operations for:
    - Repository management (add, update)
    - Release management (install, upgrade --install, uninstall)
    - Status queries (list releases)
    """

    def __init__(
        self, runner: CommandRunner, *, kube_context: str | None = None
    ) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
            kube_context: kubeconfig context passed as --kube-context when set
        """
        self._runner = runner
        self._kube_context = kube_context

    def _context_args(self) -> list[str]:
        if self._kube_context:
            return ["--kube-context", self._kube_context]
        return []

    # =========================================================================
    # Repository Management
    # =========================================================================

    def add_repo(self, name: str, url: str) -> CommandResult:
        """Add a chart repository."""
        return self._runner.run(["helm", "repo", "add", name, url])

    def update_repos(self) -> CommandResult:
        """Update the local chart index of all repositories."""
        return self._runner.run(["helm", "repo", "update"])

    # =========================================================================
    # Release Management
    # =========================================================================

    def _release_command(
        self,
        verb: list[str],
        release_name: str,
        chart: str,
        namespace: str,
        *,
        version: str | None,
        value_files: Sequence[Path],
        set_values: Mapping[str, str] | None,
        set_files: Mapping[str, Path] | None,
        secret_values: Mapping[str, str] | None,
    ) -> list[str]:
        cmd = ["helm", *verb, release_name, chart, "--namespace", namespace]

        if version:
            cmd.extend(["--version", version])
        for vf in value_files:
            cmd.extend(["--values", str(vf)])
        for key, value in (set_values or {}).items():
            cmd.extend(["--set", f"{key}={value}"])
        for key, value in (secret_values or {}).items():
            cmd.extend(["--set", f"{key}={value}"])
        for key, path in (set_files or {}).items():
            cmd.extend(["--set-file", f"{key}={path}"])

        cmd.extend(self._context_args())
        return cmd

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
        """Install a Helm release.

        Uses plain `helm install`, which fails if a release with the same
        name already exists in the namespace.

        Args:
            release_name: Name for the Helm release (e.g., "prefect-server")
            chart: Chart reference (e.g., "prefect/prefect-server")
            namespace: Kubernetes namespace for deployment
            version: Chart version to pin, or None for the latest
            value_files: values.yaml override files
            set_values: Individual values passed with --set
            set_files: Values read from files, passed with --set-file
            secret_values: Values passed with --set but masked in output

        Returns:
            CommandResult with installation status
        """
        cmd = self._release_command(
            ["install"],
            release_name,
            chart,
            namespace,
            version=version,
            value_files=value_files,
            set_values=set_values,
            set_files=set_files,
            secret_values=secret_values,
        )
        return self._runner.run(cmd, secrets=(secret_values or {}).values())

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
        """Deploy or upgrade a Helm release.

        Uses `helm upgrade --install` to idempotently deploy a chart.
        If the release doesn't exist, it will be installed. If it exists,
        it will be upgraded.

        Example:
            >>> helm.upgrade_install(
            ...     "prefect-server",
            ...     "prefect/prefect-server",
            ...     "prefect",
            ...     value_files=[Path("deploy/server/values.yaml")],
            ... )
        """
        cmd = self._release_command(
            ["upgrade", "--install"],
            release_name,
            chart,
            namespace,
            version=version,
            value_files=value_files,
            set_values=set_values,
            set_files=set_files,
            secret_values=secret_values,
        )
        return self._runner.run(cmd, secrets=(secret_values or {}).values())

    def uninstall(self, release_name: str, namespace: str) -> CommandResult:
        """Uninstall a Helm release.

        Args:
            release_name: Name of the release to uninstall
            namespace: Kubernetes namespace

        Returns:
            CommandResult with uninstall status
        """
        cmd = ["helm", "uninstall", release_name, "--namespace", namespace]
        cmd.extend(self._context_args())
        return self._runner.run(cmd)

    # =========================================================================
    # Status Queries
    # =========================================================================

    def list_releases(self, namespace: str) -> list[HelmRelease]:
        """List Helm releases in a namespace.

        Args:
            namespace: Kubernetes namespace to query

        Returns:
            List of HelmRelease objects (empty if helm prints nothing or
            output that is not JSON)

        Raises:
            CommandFailedError: If `helm list` exits non-zero
        """
        cmd = ["helm", "list", "--namespace", namespace, "-o", "json"]
        cmd.extend(self._context_args())

        result = self._runner.run(cmd)
        if not result.success:
            raise CommandFailedError(
                f"Listing Helm releases failed (exit code {result.returncode})",
                command=result.command,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        if not result.stdout:
            return []

        try:
            releases_data = json.loads(result.stdout)
            return [
                HelmRelease(
                    name=r.get("name", ""),
                    namespace=r.get("namespace", ""),
                    status=r.get("status", ""),
                    revision=str(r.get("revision", "")),
                    chart=r.get("chart", ""),
                )
                for r in releases_data
            ]
        except json.JSONDecodeError:
            return []
