"""Named deployment parameters and their resolution.

Each parameter is resolved in this order:

1. an explicit override given at invocation time (CLI option or ``--set``)
2. the environment variable of the same logical name
3. the static default

Optional parameters (the kube context) and sensitive parameters (credentials,
secrets) have no default. If no source provides a non-empty value they resolve
to ``None`` and the matching flag is left off the command line entirely. Only
sensitive values are masked when settings are logged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from prefect_deploy.deployment.errors import UnknownParameterError


@dataclass(frozen=True)
class Parameter:
    """A named, overridable deployment parameter.

    Attributes:
        name: Logical name, also the DeploymentSettings field name
        env_var: Environment variable consulted when no override is given
        default: Value used when neither override nor environment is set
        optional: Empty values count as unset (the flag is left off)
        sensitive: Masked in logs; implies optional
        description: Short help text
    """

    name: str
    env_var: str
    default: str | None
    optional: bool = False
    sensitive: bool = False
    description: str = ""

    @property
    def unset_when_empty(self) -> bool:
        return self.optional or self.sensitive


PARAMETERS: tuple[Parameter, ...] = (
    Parameter("namespace", "NAMESPACE", "prefect", description="Target namespace"),
    Parameter(
        "cert_manager_namespace",
        "CERT_MANAGER_NAMESPACE",
        "cert-manager",
        description="Namespace of cert-manager",
    ),
    Parameter(
        "server_release_name",
        "SERVER_RELEASE_NAME",
        "prefect-server",
        description="Helm release name of the Prefect server",
    ),
    Parameter(
        "worker_release_name",
        "WORKER_RELEASE_NAME",
        "prefect-worker",
        description="Helm release name of the Prefect worker",
    ),
    Parameter(
        "oauth2_release_name",
        "OAUTH2_RELEASE_NAME",
        "prefect-oauth2-proxy",
        description="Helm release name of the oauth2-proxy",
    ),
    Parameter(
        "server_chart",
        "SERVER_CHART_REPO",
        "prefect/prefect-server",
        description="Chart reference of the Prefect server",
    ),
    Parameter(
        "worker_chart",
        "WORKER_CHART_REPO",
        "prefect/prefect-worker",
        description="Chart reference of the Prefect worker",
    ),
    Parameter(
        "oauth2_chart",
        "OAUTH2_CHART_REPO",
        "oauth2-proxy/oauth2-proxy",
        description="Chart reference of the oauth2-proxy",
    ),
    Parameter(
        "chart_version",
        "CHART_VERSION",
        "latest",
        description="Chart version ('latest' omits --version)",
    ),
    Parameter(
        "server_values_file",
        "SERVER_VALUES_FILE",
        "deploy/server/values.yaml",
        description="Server overlay file",
    ),
    Parameter(
        "worker_values_file",
        "WORKER_VALUES_FILE",
        "deploy/worker/values.yaml",
        description="Worker overlay file",
    ),
    Parameter(
        "oauth2_values_file",
        "OAUTH2_VALUES_FILE",
        "deploy/oauth-proxy/values.yaml",
        description="oauth2-proxy overlay file",
    ),
    Parameter(
        "worker_base_job_template",
        "WORKER_BASE_JOB_TEMPLATE",
        "deploy/worker/base-job-template.json",
        description="Base job template passed to the worker chart",
    ),
    Parameter(
        "kube_context",
        "KUBE_CONTEXT",
        None,
        optional=True,
        description="kubeconfig context (unset uses the current context)",
    ),
    Parameter(
        "worker_work_queue",
        "WORKER_WORK_QUEUE",
        "default",
        description="Work queue polled by the worker",
    ),
    Parameter(
        "oauth2_client_id",
        "OAUTH2_CLIENT_ID",
        None,
        sensitive=True,
        description="OAuth client id",
    ),
    Parameter(
        "oauth2_client_secret",
        "OAUTH2_CLIENT_SECRET",
        None,
        sensitive=True,
        description="OAuth client secret",
    ),
    Parameter(
        "oauth2_cookie_secret",
        "OAUTH2_COOKIE_SECRET",
        None,
        sensitive=True,
        description="oauth2-proxy cookie secret",
    ),
    Parameter(
        "port_forward_local_port",
        "PORT_FORWARD_PORT",
        "4200",
        description="Local port used by port-forward",
    ),
)

PARAMETERS_BY_NAME: dict[str, Parameter] = {p.name: p for p in PARAMETERS}


def resolve_parameter(
    parameter: Parameter,
    overrides: Mapping[str, str | None],
    environ: Mapping[str, str],
) -> str | None:
    """Resolve a single parameter.

    An override of ``None`` means "not given". For optional and sensitive
    parameters an empty string from any source is treated the same as unset.
    """
    candidates = (overrides.get(parameter.name), environ.get(parameter.env_var))
    for value in candidates:
        if value is None:
            continue
        if parameter.unset_when_empty and value == "":
            continue
        return value
    return parameter.default


def resolve_parameters(
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str | None]:
    """Resolve every known parameter.

    Args:
        overrides: Explicit values keyed by parameter name
        environ: Environment mapping (empty when omitted, keeping this pure)

    Returns:
        Mapping of parameter name to resolved value

    Raises:
        UnknownParameterError: If an override names an unknown parameter
    """
    overrides = overrides or {}
    environ = environ or {}

    unknown = sorted(set(overrides) - set(PARAMETERS_BY_NAME))
    if unknown:
        raise UnknownParameterError(
            f"Unknown parameter(s): {', '.join(unknown)}",
            details="Known parameters: " + ", ".join(PARAMETERS_BY_NAME),
        )

    return {p.name: resolve_parameter(p, overrides, environ) for p in PARAMETERS}


def parse_assignments(assignments: list[str] | None) -> dict[str, str]:
    """Parse ``NAME=VALUE`` strings into an override mapping.

    Names may be given either as the parameter name (``namespace``) or as
    its environment variable (``NAMESPACE``).

    Raises:
        UnknownParameterError: If an assignment is malformed or unknown
    """
    by_env_var = {p.env_var: p.name for p in PARAMETERS}
    parsed: dict[str, str] = {}
    for assignment in assignments or []:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise UnknownParameterError(
                f"Invalid assignment '{assignment}'",
                details="Expected NAME=VALUE, for example --set namespace=staging",
            )
        name = by_env_var.get(key, key)
        if name not in PARAMETERS_BY_NAME:
            raise UnknownParameterError(
                f"Unknown parameter '{key}'",
                details="Known parameters: " + ", ".join(PARAMETERS_BY_NAME),
            )
        parsed[name] = value
    return parsed
