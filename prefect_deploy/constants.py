"""Deployment constants and configuration.

This module centralizes the chart coordinates, value keys and manifest
locations used throughout the deployment steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for the Prefect Helm deployment.

    Values that users are expected to change live in the parameter table
    (see prefect_deploy.config.parameters). Everything here is fixed by the
    upstream charts or by the layout of this repository.
    """

    # Helm repositories
    PREFECT_REPO_NAME: str = "prefect"
    PREFECT_REPO_URL: str = "https://prefecthq.github.io/prefect-helm"
    OAUTH2_REPO_NAME: str = "oauth2-proxy"
    OAUTH2_REPO_URL: str = "https://oauth2-proxy.github.io/manifests"

    # Chart value keys
    WORKER_BASE_JOB_TEMPLATE_KEY: str = "worker.config.baseJobTemplate.configuration"
    WORKER_WORK_QUEUE_KEY: str = "worker.config.workQueues[0]"
    OAUTH2_CLIENT_ID_KEY: str = "config.clientID"
    OAUTH2_CLIENT_SECRET_KEY: str = "config.clientSecret"
    OAUTH2_COOKIE_SECRET_KEY: str = "config.cookieSecret"

    # Chart version sentinel meaning "whatever the repo index has"
    LATEST_CHART_VERSION: str = "latest"

    # Prefect UI / API port exposed by the server service
    PREFECT_UI_PORT: int = 4200

    # Resources shown by the status target
    STATUS_RESOURCES: str = "pods,svc,deployments,ingress"

    # Number of log lines fetched by the logs targets
    DEFAULT_LOG_TAIL: int = 200

    # Relative path fragments for project structure
    DEPLOY_DIR: str = "deploy"
    SERVER_DIR: str = "server"
    WORKER_DIR: str = "worker"
    OAUTH2_DIR: str = "oauth-proxy"


class DeploymentPaths:
    """Path resolver for the manifests shipped with the harness.

    Overlay (values) files and the worker job template are parameters and
    are resolved by DeploymentSettings instead.
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize deployment paths.

        Args:
            project_root: Path to the project root directory
        """
        self._project_root = project_root
        self._constants = DEFAULT_CONSTANTS

        self.deploy = project_root / self._constants.DEPLOY_DIR
        self.server = self.deploy / self._constants.SERVER_DIR
        self.worker = self.deploy / self._constants.WORKER_DIR
        self.oauth2 = self.deploy / self._constants.OAUTH2_DIR

    @property
    def project_root(self) -> Path:
        """Get path to project root."""
        return self._project_root

    @property
    def worker_rbac(self) -> Path:
        """Get path to the worker RBAC manifest."""
        return self.worker / "rbac.yaml"

    @property
    def cluster_issuer(self) -> Path:
        """Get path to the Let's Encrypt ClusterIssuer manifest."""
        return self.oauth2 / "cluster-issuer.yaml"

    @property
    def oauth2_ingress(self) -> Path:
        """Get path to the oauth2-proxy Ingress manifest."""
        return self.oauth2 / "oauth-ingress.yaml"

    @property
    def server_ingress(self) -> Path:
        """Get path to the Prefect server Ingress manifest."""
        return self.server / "server-ingress.yaml"


DEFAULT_CONSTANTS = DeploymentConstants()
