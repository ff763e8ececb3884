"""Cluster preparation, ingress and day-two operation targets."""

import typer

from prefect_deploy.cli.shared import with_error_handling

from .shared import run_target


@with_error_handling
def add_repos(ctx: typer.Context) -> None:
    """Add the Prefect and OAuth2 Proxy Helm repositories."""
    run_target(ctx, "add-repos")


@with_error_handling
def add_rbac(ctx: typer.Context) -> None:
    """Add RBAC permissions for the Prefect worker."""
    run_target(ctx, "add-rbac")


@with_error_handling
def create_namespace(ctx: typer.Context) -> None:
    """Create the Kubernetes namespace if it doesn't exist."""
    run_target(ctx, "create-namespace")


@with_error_handling
def create_cluster_issuer(ctx: typer.Context) -> None:
    """Create the Let's Encrypt ClusterIssuer."""
    run_target(ctx, "create-cluster-issuer")


@with_error_handling
def upgrade_server_ingress(ctx: typer.Context) -> None:
    """Apply the Prefect server Ingress."""
    run_target(ctx, "upgrade-server-ingress")


@with_error_handling
def upgrade_oauth2_ingress(ctx: typer.Context) -> None:
    """Apply the OAuth2 Ingress (creates the ClusterIssuer first)."""
    run_target(ctx, "upgrade-oauth2-ingress")


@with_error_handling
def create_ingress(ctx: typer.Context) -> None:
    """Create the ClusterIssuer and both Ingress resources."""
    run_target(ctx, "create-ingress")


@with_error_handling
def uninstall_server_ingress(ctx: typer.Context) -> None:
    """Delete the Prefect server Ingress."""
    run_target(ctx, "uninstall-server-ingress")


@with_error_handling
def uninstall_oauth2_ingress(ctx: typer.Context) -> None:
    """Delete the OAuth2 Ingress."""
    run_target(ctx, "uninstall-oauth2-ingress")


@with_error_handling
def port_forward(ctx: typer.Context) -> None:
    """Port forward the Prefect UI to localhost."""
    run_target(ctx, "port-forward")


@with_error_handling
def status(ctx: typer.Context) -> None:
    """Show pods, services, deployments, ingress and Helm releases."""
    run_target(ctx, "status")


@with_error_handling
def logs_server(ctx: typer.Context) -> None:
    """Show recent Prefect server logs."""
    run_target(ctx, "logs-server")


@with_error_handling
def logs_worker(ctx: typer.Context) -> None:
    """Show recent Prefect worker logs."""
    run_target(ctx, "logs-worker")


COMMANDS = {
    "add-repos": add_repos,
    "add-rbac": add_rbac,
    "create-namespace": create_namespace,
    "create-cluster-issuer": create_cluster_issuer,
    "upgrade-server-ingress": upgrade_server_ingress,
    "upgrade-oauth2-ingress": upgrade_oauth2_ingress,
    "create-ingress": create_ingress,
    "uninstall-server-ingress": uninstall_server_ingress,
    "uninstall-oauth2-ingress": uninstall_oauth2_ingress,
    "port-forward": port_forward,
    "status": status,
    "logs-server": logs_server,
    "logs-worker": logs_worker,
}
