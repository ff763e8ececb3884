"""Resolved, immutable deployment settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from prefect_deploy.constants import DEFAULT_CONSTANTS
from prefect_deploy.deployment.errors import InvalidParameterError
from prefect_deploy.utils.paths import resolve_path

from .parameters import PARAMETERS, PARAMETERS_BY_NAME, resolve_parameters


class DeploymentSettings(BaseModel):
    """Every parameter after resolution, passed explicitly to each step."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    cert_manager_namespace: str
    server_release_name: str
    worker_release_name: str
    oauth2_release_name: str
    server_chart: str
    worker_chart: str
    oauth2_chart: str
    chart_version: str
    server_values_file: Path
    worker_values_file: Path
    oauth2_values_file: Path
    worker_base_job_template: Path
    kube_context: str | None = None
    worker_work_queue: str
    oauth2_client_id: str | None = None
    oauth2_client_secret: str | None = None
    oauth2_cookie_secret: str | None = None
    port_forward_local_port: int

    @property
    def version_flag(self) -> str | None:
        """Chart version to pin, or None when tracking the latest release."""
        if self.chart_version == DEFAULT_CONSTANTS.LATEST_CHART_VERSION:
            return None
        return self.chart_version

    def redacted(self) -> dict[str, object]:
        """Settings as a dict with sensitive values masked."""
        data = self.model_dump()
        for param in PARAMETERS:
            if param.sensitive and data.get(param.name) is not None:
                data[param.name] = "****"
        return data


_PATH_FIELDS = (
    "server_values_file",
    "worker_values_file",
    "oauth2_values_file",
    "worker_base_job_template",
)


def load_settings(
    project_root: Path,
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> DeploymentSettings:
    """Resolve parameters into a DeploymentSettings record.

    Args:
        project_root: Base directory for relative file parameters
        overrides: Explicit invocation-time values keyed by parameter name
        environ: Environment to read (defaults to os.environ)

    Returns:
        Frozen DeploymentSettings

    Raises:
        InvalidParameterError: If a value cannot be converted (e.g. a
            non-numeric port)
    """
    values: dict[str, object] = dict(
        resolve_parameters(overrides, os.environ if environ is None else environ)
    )
    for field in _PATH_FIELDS:
        values[field] = resolve_path(str(values[field]), project_root)

    try:
        settings = DeploymentSettings.model_validate(values)
    except ValidationError as e:
        raise _invalid_parameter(e, values) from e
    logger.debug(f"Resolved deployment settings: {settings.redacted()}")
    return settings


def _invalid_parameter(
    error: ValidationError, values: Mapping[str, object]
) -> InvalidParameterError:
    """Name the offending parameter and its environment variable."""
    first = error.errors()[0]
    name = str(first["loc"][0]) if first["loc"] else ""
    param = PARAMETERS_BY_NAME.get(name)
    if param is None:
        return InvalidParameterError("Invalid deployment parameters", str(error))
    shown = "****" if param.sensitive else repr(values.get(name))
    return InvalidParameterError(
        f"Invalid value {shown} for parameter '{name}' ({param.env_var})",
        details=first["msg"],
    )
