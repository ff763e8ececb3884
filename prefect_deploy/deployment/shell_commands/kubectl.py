"""Kubectl command abstractions.

This module provides commands for Kubernetes resource management via kubectl:
declarative apply/delete, namespace rendering, queries, port forwarding and
logs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..clients import ClusterClient
from ..types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class KubectlCommands(ClusterClient):
    """Kubectl-related shell commands.

    Provides operations for:
    - Declarative resource management (apply, delete)
    - Namespace manifest rendering
    - Resource queries
    - Port forwarding and logs
    """

    def __init__(
        self, runner: CommandRunner, *, kube_context: str | None = None
    ) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
            kube_context: kubeconfig context passed as --context when set
        """
        self._runner = runner
        self._kube_context = kube_context

    def _base(self) -> list[str]:
        cmd = ["kubectl"]
        if self._kube_context:
            cmd.extend(["--context", self._kube_context])
        return cmd

    # =========================================================================
    # Declarative Apply / Delete
    # =========================================================================

    def apply_file(self, path: Path, namespace: str | None = None) -> CommandResult:
        """Apply a manifest file with `kubectl apply -f`."""
        cmd = [*self._base(), "apply", "-f", str(path)]
        if namespace:
            cmd.extend(["--namespace", namespace])
        return self._runner.run(cmd)

    def apply_manifest(self, manifest: str) -> CommandResult:
        """Apply a manifest passed on stdin (`kubectl apply -f -`)."""
        return self._runner.run(
            [*self._base(), "apply", "-f", "-"], input_text=manifest
        )

    def render_namespace(self, namespace: str) -> CommandResult:
        """Render a Namespace manifest client-side.

        The output is fed to apply_manifest() so that creating an existing
        namespace is a no-op instead of an error.
        """
        cmd = [
            *self._base(),
            "create",
            "namespace",
            namespace,
            "--dry-run=client",
            "-o",
            "yaml",
        ]
        return self._runner.run(cmd)

    def delete_file(
        self,
        path: Path,
        namespace: str | None = None,
        *,
        ignore_not_found: bool = True,
    ) -> CommandResult:
        """Delete the resources described by a manifest file."""
        cmd = [*self._base(), "delete", "-f", str(path)]
        if namespace:
            cmd.extend(["--namespace", namespace])
        if ignore_not_found:
            cmd.append("--ignore-not-found")
        return self._runner.run(cmd)

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, resources: str, namespace: str) -> CommandResult:
        """Run `kubectl get <resources>` in a namespace."""
        return self._runner.run(
            [*self._base(), "get", resources, "--namespace", namespace]
        )

    def logs(self, namespace: str, target: str, *, tail: int) -> CommandResult:
        """Fetch the last `tail` log lines of a workload (e.g. deployment/x)."""
        cmd = [
            *self._base(),
            "logs",
            "--namespace",
            namespace,
            target,
            "--tail",
            str(tail),
        ]
        return self._runner.run(cmd)

    # =========================================================================
    # Port Forwarding
    # =========================================================================

    def port_forward(
        self,
        namespace: str,
        target: str,
        local_port: int,
        remote_port: int,
    ) -> CommandResult:
        """Forward a local port to a service or pod.

        Output is not captured so kubectl's own progress lines reach the
        terminal. Blocks until kubectl exits or the user interrupts.
        """
        cmd = [
            *self._base(),
            "port-forward",
            "--namespace",
            namespace,
            target,
            f"{local_port}:{remote_port}",
        ]
        return self._runner.run(cmd, capture_output=False)
