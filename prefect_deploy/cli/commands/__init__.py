"""CLI target commands.

Each command runs the step-graph target of the same name:

- releases: install / upgrade / uninstall of the Helm releases
- cluster: repositories, namespace, RBAC, ingress, status, logs, port-forward
- values: overlay scaffolding and the target listing
"""

from collections.abc import Callable

from . import cluster, releases, values

COMMANDS: dict[str, Callable[..., None]] = {
    **cluster.COMMANDS,
    **releases.COMMANDS,
    **values.COMMANDS,
}

__all__ = ["COMMANDS"]
