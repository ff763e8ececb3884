"""Tests for the deployment step catalogue, run against in-memory fakes."""

import os
from pathlib import Path

import pytest

from prefect_deploy.constants import DEFAULT_CONSTANTS
from prefect_deploy.deployment.errors import CommandFailedError
from prefect_deploy.deployment.steps import (
    build_step_graph,
    create_namespace,
    oauth2_release,
    worker_release,
)
from prefect_deploy.deployment.types import HelmRelease
from prefect_deploy.orchestrator import StepRunner

INGRESS_LABELS = (
    "apply_file:server-ingress.yaml",
    "apply_file:oauth-ingress.yaml",
)


@pytest.fixture
def graph():
    return build_step_graph()


@pytest.fixture
def run_target(graph, make_step_context):
    def _run(target, settings=None, *, dry_run=False):
        ctx = make_step_context(settings, dry_run=dry_run)
        runner = StepRunner(graph, ctx)
        return runner.run(target), ctx

    return _run


class TestGraph:
    def test_every_cli_target_is_registered(self, graph):
        expected = {
            "add-repos",
            "create-namespace",
            "add-rbac",
            "create-cluster-issuer",
            "install-server",
            "install-worker",
            "install-oauth-proxy",
            "upgrade-server",
            "upgrade-worker",
            "upgrade-oauth-proxy",
            "upgrade-server-ingress",
            "upgrade-oauth2-ingress",
            "create-ingress",
            "install",
            "upgrade",
            "uninstall-server",
            "uninstall-worker",
            "uninstall-oauth-proxy",
            "uninstall-server-ingress",
            "uninstall-oauth2-ingress",
            "uninstall",
            "port-forward",
            "status",
            "logs-server",
            "logs-worker",
            "create-server-values",
            "create-worker-values",
            "create-values",
        }
        assert set(graph.names) == expected

    def test_every_step_has_a_description(self, graph):
        assert all(step.description for step in graph)

    def test_upgrade_order(self, graph):
        order = graph.execution_order("upgrade")

        first_ingress = min(
            order.index("upgrade-server-ingress"),
            order.index("upgrade-oauth2-ingress"),
        )
        for release in ("upgrade-server", "upgrade-worker", "upgrade-oauth-proxy"):
            assert order.index(release) < first_ingress
        assert order.index("create-cluster-issuer") < order.index(
            "upgrade-oauth2-ingress"
        )
        assert order.index("add-repos") < order.index("upgrade-server")
        assert order.index("create-namespace") < order.index("upgrade-server")

    def test_shared_prerequisites_run_once(self, graph):
        order = graph.execution_order("install")

        assert order.count("add-repos") == 1
        assert order.count("create-namespace") == 1
        assert order.count("create-cluster-issuer") == 1
        assert order[-1] == "install"

    def test_uninstall_removes_ingress_before_releases(self, graph):
        order = graph.execution_order("uninstall")

        assert order[:2] == ["uninstall-server-ingress", "uninstall-oauth2-ingress"]
        assert order.index("uninstall-oauth-proxy") > order.index("uninstall-server")


class TestUpgrade:
    def test_full_upgrade_issues_calls_in_order(self, run_target, call_log):
        run_target("upgrade")

        releases = [c.target for c in call_log.find("upgrade_install")]
        assert releases == ["prefect-server", "prefect-worker", "prefect-oauth2-proxy"]

        labels = call_log.labels
        last_release = labels.index("upgrade_install:prefect-oauth2-proxy")
        for ingress in INGRESS_LABELS:
            assert labels.index(ingress) > last_release
        assert labels.index("apply_file:cluster-issuer.yaml") < labels.index(
            "apply_file:oauth-ingress.yaml"
        )

    def test_repos_added_before_update(self, run_target, call_log):
        run_target("add-repos")

        assert call_log.labels == [
            "add_repo:prefect",
            "add_repo:oauth2-proxy",
            "update_repos:",
        ]

    def test_server_failure_stops_the_run(self, run_target, call_log):
        call_log.fail(
            "upgrade_install", "prefect-server", returncode=3, stderr="Error: bad"
        )

        with pytest.raises(CommandFailedError) as excinfo:
            run_target("upgrade")

        assert excinfo.value.returncode == 3
        assert excinfo.value.stderr == "Error: bad"
        assert call_log.find("upgrade_install", "prefect-worker") == []
        assert call_log.find("apply_file") == []

    def test_chart_version_pins_prefect_charts_only(
        self, run_target, make_settings, call_log
    ):
        run_target("upgrade", make_settings(chart_version="2025.1.1"))

        versions = {
            c.target: c.kwargs["version"] for c in call_log.find("upgrade_install")
        }
        assert versions == {
            "prefect-server": "2025.1.1",
            "prefect-worker": "2025.1.1",
            "prefect-oauth2-proxy": None,
        }

    def test_latest_chart_version_is_not_pinned(self, run_target, call_log):
        run_target("upgrade-server")

        (call,) = call_log.find("upgrade_install")
        assert call.kwargs["version"] is None


class TestWorker:
    def test_staging_namespace_without_overlay(
        self, run_target, make_settings, call_log, project_root
    ):
        settings = make_settings(environ={"NAMESPACE": "staging"})

        run_target("upgrade-worker", settings)

        (call,) = call_log.find("upgrade_install", "prefect-worker")
        assert call.args[2] == "staging"
        assert call.kwargs["value_files"] == []
        assert call.kwargs["set_files"] == {
            DEFAULT_CONSTANTS.WORKER_BASE_JOB_TEMPLATE_KEY: project_root
            / "deploy/worker/base-job-template.json"
        }

    def test_work_queue_is_set(self, make_step_context, make_settings):
        ctx = make_step_context(make_settings(worker_work_queue="gpu"))

        spec = worker_release(ctx)

        assert spec.set_values == {DEFAULT_CONSTANTS.WORKER_WORK_QUEUE_KEY: "gpu"}

    def test_existing_overlay_is_used(self, make_step_context, project_root):
        overlay = project_root / "deploy" / "worker" / "values.yaml"
        overlay.parent.mkdir(parents=True)
        overlay.write_text("worker:\n  replicas: 2\n")

        spec = worker_release(make_step_context())

        assert spec.value_files == [overlay]


class TestOAuth2Proxy:
    def test_unset_credentials_are_omitted(self, make_step_context):
        spec = oauth2_release(make_step_context())

        assert spec.set_values == {}
        assert spec.secret_values == {}
        assert spec.version is None

    def test_credentials_are_passed(self, make_step_context, make_settings):
        settings = make_settings(
            oauth2_client_id="client",
            oauth2_client_secret="secret",
            oauth2_cookie_secret="cookie",
        )

        spec = oauth2_release(make_step_context(settings))

        assert spec.set_values == {"config.clientID": "client"}
        assert spec.secret_values == {
            "config.clientSecret": "secret",
            "config.cookieSecret": "cookie",
        }

    def test_empty_secret_from_environment_is_omitted(
        self, make_step_context, make_settings
    ):
        settings = make_settings(environ={"OAUTH2_CLIENT_SECRET": ""})

        spec = oauth2_release(make_step_context(settings))

        assert "config.clientSecret" not in spec.secret_values


class TestInstall:
    def test_install_uses_strict_install(self, run_target, call_log):
        run_target("install")

        assert call_log.find("upgrade_install") == []
        assert [c.target for c in call_log.find("install")] == [
            "prefect-server",
            "prefect-worker",
            "prefect-oauth2-proxy",
        ]


class TestClusterSteps:
    def test_namespace_manifest_is_piped_to_apply(self, make_step_context, call_log):
        create_namespace(make_step_context())

        render, apply = call_log.calls
        assert render.label == "render_namespace:prefect"
        assert apply.method == "apply_manifest"
        assert "name: prefect" in apply.target

    def test_namespace_render_failure_skips_apply(self, make_step_context, call_log):
        call_log.fail("render_namespace", "prefect")

        with pytest.raises(CommandFailedError):
            create_namespace(make_step_context())

        assert call_log.find("apply_manifest") == []

    def test_rbac_requires_namespace(self, run_target, call_log):
        run_target("add-rbac")

        assert call_log.labels[-1] == "apply_file:rbac.yaml"
        assert call_log.calls[-1].kwargs["namespace"] == "prefect"

    def test_cluster_issuer_targets_cert_manager_namespace(
        self, run_target, call_log
    ):
        run_target("create-cluster-issuer")

        (call,) = call_log.find("apply_file", "cluster-issuer.yaml")
        assert call.kwargs["namespace"] == "cert-manager"

    def test_uninstall_order(self, run_target, call_log):
        run_target("uninstall")

        assert call_log.labels == [
            "delete_file:server-ingress.yaml",
            "delete_file:oauth-ingress.yaml",
            "uninstall:prefect-server",
            "uninstall:prefect-worker",
            "uninstall:prefect-oauth2-proxy",
        ]
        assert all(c.kwargs["ignore_not_found"] for c in call_log.find("delete_file"))

    def test_uninstall_of_missing_release_fails(self, run_target, call_log):
        call_log.fail("uninstall", "prefect-server", stderr="release: not found")

        with pytest.raises(CommandFailedError):
            run_target("uninstall-server")


class TestOperations:
    def test_port_forward(self, run_target, make_settings, call_log):
        run_target("port-forward", make_settings(port_forward_local_port="8080"))

        (call,) = call_log.find("port_forward")
        assert call.args == ("prefect", "svc/prefect-server", 8080, 4200)

    def test_status_prints_resources_and_releases(
        self, run_target, fake_kubectl, fake_helm
    ):
        fake_kubectl.stdout["get"] = "NAME READY\nprefect-server-0 1/1\n"
        fake_helm.releases.append(
            HelmRelease("prefect-server", "prefect", "deployed", "2", "prefect-server")
        )

        _, ctx = run_target("status")

        ctx.console.output.assert_called_once_with(
            "NAME READY\nprefect-server-0 1/1\n"
        )
        ctx.console.print.assert_called_once()
        ctx.console.warn.assert_not_called()

    def test_status_without_releases_warns(self, run_target):
        _, ctx = run_target("status")

        ctx.console.warn.assert_called_once()

    def test_status_fails_when_helm_cannot_list(self, make_step_context, call_log):
        call_log.fail(
            "list_releases",
            "prefect",
            stderr="Error: Kubernetes cluster unreachable",
        )
        ctx = make_step_context()

        with pytest.raises(CommandFailedError) as excinfo:
            StepRunner(build_step_graph(), ctx).run("status")

        assert excinfo.value.stderr == "Error: Kubernetes cluster unreachable"
        ctx.console.warn.assert_not_called()

    def test_worker_logs(self, run_target, fake_kubectl, call_log):
        fake_kubectl.stdout["logs"] = "worker started\n"

        _, ctx = run_target("logs-worker")

        (call,) = call_log.find("logs")
        assert call.args == ("prefect", "deployment/prefect-worker")
        assert call.kwargs == {"tail": DEFAULT_CONSTANTS.DEFAULT_LOG_TAIL}
        ctx.console.output.assert_called_once_with("worker started\n")


class TestCreateValues:
    def test_creates_both_files(self, run_target, project_root):
        run_target("create-values")

        server = project_root / "deploy/server/values.yaml"
        worker = project_root / "deploy/worker/values.yaml"
        assert "server:\n  replicas: 1" in server.read_text()
        assert "worker:\n  replicas: 1" in worker.read_text()

    def test_is_idempotent(self, run_target, project_root):
        files = [
            project_root / "deploy/server/values.yaml",
            project_root / "deploy/worker/values.yaml",
        ]
        for path in files:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("custom: true\n")
            os.utime(path, (1_000_000, 1_000_000))

        run_target("create-values")

        for path in files:
            assert path.read_text() == "custom: true\n"
            assert path.stat().st_mtime == 1_000_000

    def test_dry_run_writes_nothing(self, run_target, project_root):
        run_target("create-values", dry_run=True)

        assert not (project_root / "deploy").exists()

    def test_makes_no_cluster_calls(self, run_target, call_log):
        run_target("create-values")

        assert call_log.calls == []


def test_created_overlay_is_picked_up_by_later_upgrade(
    run_target, call_log, project_root: Path
):
    run_target("create-server-values")
    run_target("upgrade-server")

    (call,) = call_log.find("upgrade_install")
    assert call.kwargs["value_files"] == [project_root / "deploy/server/values.yaml"]
