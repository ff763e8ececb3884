"""Deployment step catalogue.

Every CLI target maps to one step here. Steps receive a StepContext carrying
the resolved settings and the ReleaseManager / ClusterClient to drive, and
raise CommandFailedError as soon as a command exits non-zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich.table import Table

from prefect_deploy.config import DeploymentSettings
from prefect_deploy.constants import (
    DEFAULT_CONSTANTS,
    DeploymentConstants,
    DeploymentPaths,
)
from prefect_deploy.orchestrator import Step, StepGraph
from prefect_deploy.utils.console_like import ConsoleLike

from .clients import ClusterClient, ReleaseManager
from .errors import CommandFailedError
from .overlays import overlay_files, write_default_values
from .types import CommandResult


@dataclass(frozen=True)
class StepContext:
    """Everything a step needs, fixed for the whole invocation."""

    settings: DeploymentSettings
    paths: DeploymentPaths
    helm: ReleaseManager
    kubectl: ClusterClient
    console: ConsoleLike
    constants: DeploymentConstants = DEFAULT_CONSTANTS
    dry_run: bool = False


@dataclass(frozen=True)
class ReleaseSpec:
    """Arguments for installing or upgrading one Helm release."""

    label: str
    release_name: str
    chart: str
    namespace: str
    version: str | None = None
    value_files: list[Path] = field(default_factory=list)
    set_values: dict[str, str] = field(default_factory=dict)
    set_files: dict[str, Path] = field(default_factory=dict)
    secret_values: dict[str, str] = field(default_factory=dict)


def check(result: CommandResult, action: str) -> CommandResult:
    """Raise CommandFailedError unless the command succeeded."""
    if not result.success:
        raise CommandFailedError(
            f"{action} failed (exit code {result.returncode})",
            command=result.command,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result


# ---------------------------------------------------------------------------
# Release specs
# ---------------------------------------------------------------------------


def server_release(ctx: StepContext) -> ReleaseSpec:
    s = ctx.settings
    return ReleaseSpec(
        label="Prefect server",
        release_name=s.server_release_name,
        chart=s.server_chart,
        namespace=s.namespace,
        version=s.version_flag,
        value_files=overlay_files(s.server_values_file),
    )


def worker_release(ctx: StepContext) -> ReleaseSpec:
    """Worker release; the base job template is always attached."""
    s, c = ctx.settings, ctx.constants
    return ReleaseSpec(
        label="Prefect worker",
        release_name=s.worker_release_name,
        chart=s.worker_chart,
        namespace=s.namespace,
        version=s.version_flag,
        value_files=overlay_files(s.worker_values_file),
        set_values={c.WORKER_WORK_QUEUE_KEY: s.worker_work_queue},
        set_files={c.WORKER_BASE_JOB_TEMPLATE_KEY: s.worker_base_job_template},
    )


def oauth2_release(ctx: StepContext) -> ReleaseSpec:
    """oauth2-proxy release.

    OAuth values that are unset are left off entirely so the chart's own
    defaults apply. CHART_VERSION only pins the Prefect charts.
    """
    s, c = ctx.settings, ctx.constants
    set_values = {}
    if s.oauth2_client_id is not None:
        set_values[c.OAUTH2_CLIENT_ID_KEY] = s.oauth2_client_id
    secrets = {
        key: value
        for key, value in (
            (c.OAUTH2_CLIENT_SECRET_KEY, s.oauth2_client_secret),
            (c.OAUTH2_COOKIE_SECRET_KEY, s.oauth2_cookie_secret),
        )
        if value is not None
    }
    return ReleaseSpec(
        label="OAuth2 Proxy",
        release_name=s.oauth2_release_name,
        chart=s.oauth2_chart,
        namespace=s.namespace,
        value_files=overlay_files(s.oauth2_values_file),
        set_values=set_values,
        secret_values=secrets,
    )


def deploy_release(ctx: StepContext, spec: ReleaseSpec, *, upgrade: bool) -> None:
    """Install (strict) or upgrade-or-install a release."""
    verb = "Upgrading" if upgrade else "Installing"
    ctx.console.info(f"{verb} {spec.label} in namespace {spec.namespace}...")
    deploy = ctx.helm.upgrade_install if upgrade else ctx.helm.install
    result = deploy(
        spec.release_name,
        spec.chart,
        spec.namespace,
        version=spec.version,
        value_files=spec.value_files,
        set_values=spec.set_values,
        set_files=spec.set_files,
        secret_values=spec.secret_values,
    )
    check(result, f"{verb} {spec.label}")
    ctx.console.ok(f"{spec.label} release '{spec.release_name}' is deployed")


def uninstall_release(ctx: StepContext, label: str, release_name: str) -> None:
    namespace = ctx.settings.namespace
    ctx.console.info(f"Uninstalling {label} from namespace {namespace}...")
    check(ctx.helm.uninstall(release_name, namespace), f"Uninstalling {label}")
    ctx.console.ok(f"{label} release '{release_name}' removed")


# ---------------------------------------------------------------------------
# Cluster preparation
# ---------------------------------------------------------------------------


def add_repos(ctx: StepContext) -> None:
    c = ctx.constants
    ctx.console.info("Adding Prefect and OAuth2 Proxy Helm repositories...")
    for name, url in (
        (c.PREFECT_REPO_NAME, c.PREFECT_REPO_URL),
        (c.OAUTH2_REPO_NAME, c.OAUTH2_REPO_URL),
    ):
        check(ctx.helm.add_repo(name, url), f"Adding Helm repository '{name}'")
    check(ctx.helm.update_repos(), "Updating Helm repositories")


def create_namespace(ctx: StepContext) -> None:
    """Create the namespace if missing; applying it again is a no-op."""
    namespace = ctx.settings.namespace
    ctx.console.info(f"Creating namespace {namespace} if it doesn't exist...")
    rendered = check(
        ctx.kubectl.render_namespace(namespace), f"Rendering namespace '{namespace}'"
    )
    check(
        ctx.kubectl.apply_manifest(rendered.stdout),
        f"Applying namespace '{namespace}'",
    )


def add_rbac(ctx: StepContext) -> None:
    ctx.console.info("Adding RBAC permissions for the Prefect worker...")
    check(
        ctx.kubectl.apply_file(ctx.paths.worker_rbac, ctx.settings.namespace),
        "Applying worker RBAC",
    )


def create_cluster_issuer(ctx: StepContext) -> None:
    ctx.console.info("Creating cluster issuer for Let's Encrypt...")
    check(
        ctx.kubectl.apply_file(
            ctx.paths.cluster_issuer, ctx.settings.cert_manager_namespace
        ),
        "Applying ClusterIssuer",
    )


# ---------------------------------------------------------------------------
# Releases
# ---------------------------------------------------------------------------


def install_server(ctx: StepContext) -> None:
    deploy_release(ctx, server_release(ctx), upgrade=False)


def install_worker(ctx: StepContext) -> None:
    deploy_release(ctx, worker_release(ctx), upgrade=False)


def install_oauth_proxy(ctx: StepContext) -> None:
    deploy_release(ctx, oauth2_release(ctx), upgrade=False)


def upgrade_server(ctx: StepContext) -> None:
    deploy_release(ctx, server_release(ctx), upgrade=True)


def upgrade_worker(ctx: StepContext) -> None:
    deploy_release(ctx, worker_release(ctx), upgrade=True)


def upgrade_oauth_proxy(ctx: StepContext) -> None:
    deploy_release(ctx, oauth2_release(ctx), upgrade=True)


def uninstall_server(ctx: StepContext) -> None:
    uninstall_release(ctx, "Prefect server", ctx.settings.server_release_name)


def uninstall_worker(ctx: StepContext) -> None:
    uninstall_release(ctx, "Prefect worker", ctx.settings.worker_release_name)


def uninstall_oauth_proxy(ctx: StepContext) -> None:
    uninstall_release(ctx, "OAuth2 Proxy", ctx.settings.oauth2_release_name)


# ---------------------------------------------------------------------------
# Ingress
# ---------------------------------------------------------------------------


def upgrade_server_ingress(ctx: StepContext) -> None:
    ctx.console.info("Applying Prefect server Ingress...")
    check(
        ctx.kubectl.apply_file(ctx.paths.server_ingress, ctx.settings.namespace),
        "Applying server Ingress",
    )


def upgrade_oauth2_ingress(ctx: StepContext) -> None:
    ctx.console.info("Applying OAuth2 Ingress...")
    check(
        ctx.kubectl.apply_file(ctx.paths.oauth2_ingress, ctx.settings.namespace),
        "Applying OAuth2 Ingress",
    )


def uninstall_server_ingress(ctx: StepContext) -> None:
    ctx.console.info("Deleting Prefect server Ingress...")
    check(
        ctx.kubectl.delete_file(ctx.paths.server_ingress, ctx.settings.namespace),
        "Deleting server Ingress",
    )


def uninstall_oauth2_ingress(ctx: StepContext) -> None:
    ctx.console.info("Deleting OAuth2 Ingress...")
    check(
        ctx.kubectl.delete_file(ctx.paths.oauth2_ingress, ctx.settings.namespace),
        "Deleting OAuth2 Ingress",
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def port_forward(ctx: StepContext) -> None:
    s, c = ctx.settings, ctx.constants
    ctx.console.info(
        f"Port forwarding Prefect UI to http://localhost:{s.port_forward_local_port} "
        "(Ctrl+C to stop)..."
    )
    check(
        ctx.kubectl.port_forward(
            s.namespace,
            f"svc/{s.server_release_name}",
            s.port_forward_local_port,
            c.PREFECT_UI_PORT,
        ),
        "Port forwarding",
    )


def status(ctx: StepContext) -> None:
    namespace = ctx.settings.namespace
    ctx.console.info(f"Checking deployment status in namespace {namespace}...")
    result = check(
        ctx.kubectl.get(ctx.constants.STATUS_RESOURCES, namespace),
        "Querying cluster resources",
    )
    if result.stdout:
        ctx.console.output(result.stdout)

    releases = ctx.helm.list_releases(namespace)
    if not releases:
        ctx.console.warn(f"No Helm releases found in namespace {namespace}")
        return

    table = Table(title=f"Helm releases in {namespace}")
    table.add_column("Release", style="cyan")
    table.add_column("Chart")
    table.add_column("Revision", justify="right")
    table.add_column("Status")
    for release in releases:
        style = "green" if release.status == "deployed" else "yellow"
        table.add_row(
            release.name,
            release.chart,
            release.revision,
            f"[{style}]{release.status}[/{style}]",
        )
    ctx.console.print(table)


def _show_logs(ctx: StepContext, label: str, release_name: str) -> None:
    namespace = ctx.settings.namespace
    ctx.console.info(f"Fetching {label} logs from namespace {namespace}...")
    result = check(
        ctx.kubectl.logs(
            namespace,
            f"deployment/{release_name}",
            tail=ctx.constants.DEFAULT_LOG_TAIL,
        ),
        f"Fetching {label} logs",
    )
    if result.stdout:
        ctx.console.output(result.stdout)


def logs_server(ctx: StepContext) -> None:
    _show_logs(ctx, "Prefect server", ctx.settings.server_release_name)


def logs_worker(ctx: StepContext) -> None:
    _show_logs(ctx, "Prefect worker", ctx.settings.worker_release_name)


# ---------------------------------------------------------------------------
# Overlay scaffolding
# ---------------------------------------------------------------------------


def _scaffold_values(
    ctx: StepContext, path: Path, component: str, chart: str
) -> None:
    if path.exists():
        ctx.console.info(f"{path} already exists, leaving it unchanged")
        return
    if ctx.dry_run:
        ctx.console.info(
            f"(dry-run) would create default {component} values at {path}"
        )
        return
    write_default_values(path, component, chart)
    ctx.console.ok(f"Created default {component} values file at {path}")


def create_server_values(ctx: StepContext) -> None:
    _scaffold_values(ctx, ctx.settings.server_values_file, "server", "prefect-server")


def create_worker_values(ctx: StepContext) -> None:
    _scaffold_values(ctx, ctx.settings.worker_values_file, "worker", "prefect-worker")


def aggregate(ctx: StepContext) -> None:
    """Aggregate targets only exist to order their prerequisites."""


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


def build_step_graph() -> StepGraph[StepContext]:
    """Build and validate the full deployment step graph."""
    graph: StepGraph[StepContext] = StepGraph()
    prepare = ("add-repos", "create-namespace")

    steps = [
        Step(
            "add-repos",
            add_repos,
            description="Add Prefect and OAuth2 Proxy Helm repositories",
        ),
        Step(
            "create-namespace",
            create_namespace,
            description="Create the Kubernetes namespace",
        ),
        Step(
            "add-rbac",
            add_rbac,
            ("create-namespace",),
            "Add RBAC permissions for the Prefect worker",
        ),
        Step(
            "create-cluster-issuer",
            create_cluster_issuer,
            description="Create the Let's Encrypt ClusterIssuer",
        ),
        # Strict installs
        Step("install-server", install_server, prepare, "Install the Prefect server"),
        Step("install-worker", install_worker, prepare, "Install the Prefect worker"),
        Step(
            "install-oauth-proxy",
            install_oauth_proxy,
            prepare,
            "Install the OAuth2 Proxy",
        ),
        # Idempotent upgrades
        Step(
            "upgrade-server",
            upgrade_server,
            prepare,
            "Upgrade or install the Prefect server",
        ),
        Step(
            "upgrade-worker",
            upgrade_worker,
            prepare,
            "Upgrade or install the Prefect worker",
        ),
        Step(
            "upgrade-oauth-proxy",
            upgrade_oauth_proxy,
            prepare,
            "Upgrade or install the OAuth2 Proxy",
        ),
        Step(
            "upgrade-server-ingress",
            upgrade_server_ingress,
            description="Apply the Prefect server Ingress",
        ),
        Step(
            "upgrade-oauth2-ingress",
            upgrade_oauth2_ingress,
            ("create-cluster-issuer",),
            "Apply the OAuth2 Ingress",
        ),
        Step(
            "create-ingress",
            aggregate,
            (
                "upgrade-server-ingress",
                "create-cluster-issuer",
                "upgrade-oauth2-ingress",
            ),
            "Create the ClusterIssuer and both Ingress resources",
        ),
        Step(
            "install",
            aggregate,
            (
                "install-server",
                "install-worker",
                "install-oauth-proxy",
                "create-ingress",
            ),
            "Install server, worker, OAuth2 Proxy and ingress",
        ),
        Step(
            "upgrade",
            aggregate,
            (
                "upgrade-server",
                "upgrade-worker",
                "upgrade-oauth-proxy",
                "create-ingress",
            ),
            "Upgrade server, worker, OAuth2 Proxy and ingress",
        ),
        # Teardown
        Step(
            "uninstall-server",
            uninstall_server,
            description="Uninstall the Prefect server",
        ),
        Step(
            "uninstall-worker",
            uninstall_worker,
            description="Uninstall the Prefect worker",
        ),
        Step(
            "uninstall-oauth-proxy",
            uninstall_oauth_proxy,
            description="Uninstall the OAuth2 Proxy",
        ),
        Step(
            "uninstall-server-ingress",
            uninstall_server_ingress,
            description="Delete the Prefect server Ingress",
        ),
        Step(
            "uninstall-oauth2-ingress",
            uninstall_oauth2_ingress,
            description="Delete the OAuth2 Ingress",
        ),
        Step(
            "uninstall",
            aggregate,
            (
                "uninstall-server-ingress",
                "uninstall-oauth2-ingress",
                "uninstall-server",
                "uninstall-worker",
                "uninstall-oauth-proxy",
            ),
            "Uninstall ingress, server, worker and OAuth2 Proxy",
        ),
        # Operations
        Step(
            "port-forward",
            port_forward,
            description="Port forward the Prefect UI to localhost",
        ),
        Step(
            "status",
            status,
            description="Show pods, services, deployments and releases",
        ),
        Step("logs-server", logs_server, description="Show recent Prefect server logs"),
        Step("logs-worker", logs_worker, description="Show recent Prefect worker logs"),
        # Scaffolding
        Step(
            "create-server-values",
            create_server_values,
            description="Create default server values if missing",
        ),
        Step(
            "create-worker-values",
            create_worker_values,
            description="Create default worker values if missing",
        ),
        Step(
            "create-values",
            aggregate,
            ("create-server-values", "create-worker-values"),
            "Create both default values files if missing",
        ),
    ]

    for step in steps:
        graph.add(step)
    graph.validate()
    return graph
