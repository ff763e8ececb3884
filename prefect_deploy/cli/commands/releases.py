"""Helm release targets: strict install, upgrade-or-install, uninstall."""

import typer

from prefect_deploy.cli.shared import with_error_handling

from .shared import run_target


@with_error_handling
def install_server(ctx: typer.Context) -> None:
    """Install the Prefect server (fails if the release exists)."""
    run_target(ctx, "install-server")


@with_error_handling
def install_worker(ctx: typer.Context) -> None:
    """Install the Prefect worker (fails if the release exists)."""
    run_target(ctx, "install-worker")


@with_error_handling
def install_oauth_proxy(ctx: typer.Context) -> None:
    """Install the OAuth2 Proxy (fails if the release exists)."""
    run_target(ctx, "install-oauth-proxy")


@with_error_handling
def install(ctx: typer.Context) -> None:
    """Install server, worker, OAuth2 Proxy and ingress."""
    run_target(ctx, "install")


@with_error_handling
def upgrade_server(ctx: typer.Context) -> None:
    """Upgrade or install the Prefect server."""
    run_target(ctx, "upgrade-server")


@with_error_handling
def upgrade_worker(ctx: typer.Context) -> None:
    """Upgrade or install the Prefect worker."""
    run_target(ctx, "upgrade-worker")


@with_error_handling
def upgrade_oauth_proxy(ctx: typer.Context) -> None:
    """Upgrade or install the OAuth2 Proxy."""
    run_target(ctx, "upgrade-oauth-proxy")


@with_error_handling
def upgrade(ctx: typer.Context) -> None:
    """Upgrade server, worker, OAuth2 Proxy and ingress."""
    run_target(ctx, "upgrade")


@with_error_handling
def uninstall_server(ctx: typer.Context) -> None:
    """Uninstall the Prefect server."""
    run_target(ctx, "uninstall-server")


@with_error_handling
def uninstall_worker(ctx: typer.Context) -> None:
    """Uninstall the Prefect worker."""
    run_target(ctx, "uninstall-worker")


@with_error_handling
def uninstall_oauth_proxy(ctx: typer.Context) -> None:
    """Uninstall the OAuth2 Proxy."""
    run_target(ctx, "uninstall-oauth-proxy")


@with_error_handling
def uninstall(ctx: typer.Context) -> None:
    """Uninstall ingress, server, worker and OAuth2 Proxy."""
    run_target(ctx, "uninstall")


COMMANDS = {
    "install-server": install_server,
    "install-worker": install_worker,
    "install-oauth-proxy": install_oauth_proxy,
    "install": install,
    "upgrade-server": upgrade_server,
    "upgrade-worker": upgrade_worker,
    "upgrade-oauth-proxy": upgrade_oauth_proxy,
    "upgrade": upgrade,
    "uninstall-server": uninstall_server,
    "uninstall-worker": uninstall_worker,
    "uninstall-oauth-proxy": uninstall_oauth_proxy,
    "uninstall": uninstall,
}
