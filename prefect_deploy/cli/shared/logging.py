"""Loguru configuration for the CLI."""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(verbose: bool = False) -> None:
    """Route prefect_deploy logs to stderr when verbose, silence them otherwise."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=LOG_FORMAT)
        logger.enable("prefect_deploy")
    else:
        logger.disable("prefect_deploy")
