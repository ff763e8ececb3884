"""Prefect server, worker and oauth2-proxy deployment harness for Kubernetes."""

from loguru import logger

__version__ = "0.1.0"

# Library logging stays silent unless the CLI enables it with --verbose
logger.disable("prefect_deploy")
