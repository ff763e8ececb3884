"""Parameter resolution and the resolved settings record."""

from .parameters import (
    PARAMETERS,
    PARAMETERS_BY_NAME,
    Parameter,
    parse_assignments,
    resolve_parameter,
    resolve_parameters,
)
from .settings import DeploymentSettings, load_settings

__all__ = [
    "PARAMETERS",
    "PARAMETERS_BY_NAME",
    "Parameter",
    "DeploymentSettings",
    "load_settings",
    "parse_assignments",
    "resolve_parameter",
    "resolve_parameters",
]
