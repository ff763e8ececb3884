from collections.abc import Callable
from pathlib import Path
from unittest.mock import Mock

import pytest

from prefect_deploy.config import PARAMETERS, DeploymentSettings, load_settings
from prefect_deploy.constants import DeploymentPaths
from prefect_deploy.deployment.steps import StepContext
from tests.fakes import CallLog, FakeClusterClient, FakeReleaseManager


@pytest.fixture(autouse=True)
def _clean_parameter_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell from leaking into parameter resolution."""
    for param in PARAMETERS:
        monkeypatch.delenv(param.env_var, raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def make_settings(
    project_root: Path,
) -> Callable[..., DeploymentSettings]:
    """Build settings from explicit overrides and an explicit environment."""

    def _make(
        environ: dict[str, str] | None = None, **overrides: str | None
    ) -> DeploymentSettings:
        return load_settings(project_root, overrides, environ=environ or {})

    return _make


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def fake_helm(call_log: CallLog) -> FakeReleaseManager:
    return FakeReleaseManager(call_log)


@pytest.fixture
def fake_kubectl(call_log: CallLog) -> FakeClusterClient:
    return FakeClusterClient(call_log)


@pytest.fixture
def make_step_context(
    project_root: Path,
    make_settings: Callable[..., DeploymentSettings],
    fake_helm: FakeReleaseManager,
    fake_kubectl: FakeClusterClient,
) -> Callable[..., StepContext]:
    def _make(
        settings: DeploymentSettings | None = None, *, dry_run: bool = False
    ) -> StepContext:
        return StepContext(
            settings=settings or make_settings(),
            paths=DeploymentPaths(project_root),
            helm=fake_helm,
            kubectl=fake_kubectl,
            console=Mock(),
            dry_run=dry_run,
        )

    return _make
