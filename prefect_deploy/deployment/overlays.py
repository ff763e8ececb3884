"""Optional values overlays for the Helm charts.

An overlay file is passed to Helm only if it exists when the command is
built. The existence check runs every time, because the scaffold targets
may create the file between two runs.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger

CHART_DOCS_URL = "https://github.com/PrefectHQ/prefect-helm/tree/main/charts/{chart}"


def overlay_files(path: Path) -> list[Path]:
    """Return ``[path]`` if the overlay exists, otherwise an empty list."""
    if path.is_file():
        return [path]
    logger.debug(f"No overlay at {path}, using chart defaults")
    return []


def render_default_values(component: str, chart: str) -> str:
    """Render the default overlay for a chart component.

    Args:
        component: Top-level values key (``server`` or ``worker``)
        chart: Chart name used for the documentation link

    Returns:
        YAML document with a short comment header
    """
    header = [
        f"# Prefect {component.capitalize()} Helm chart configuration",
        f"# See {CHART_DOCS_URL.format(chart=chart)} for all options",
        "",
        f"# {component.capitalize()} configuration",
    ]
    body = yaml.safe_dump({component: {"replicas": 1}}, sort_keys=False)
    return "\n".join(header) + "\n" + body


def write_default_values(path: Path, component: str, chart: str) -> bool:
    """Create a default overlay file unless one already exists.

    Args:
        path: Destination file
        component: Top-level values key (``server`` or ``worker``)
        chart: Chart name used for the documentation link

    Returns:
        True if the file was written, False if it already existed
    """
    if path.exists():
        logger.debug(f"Overlay {path} already exists, leaving it untouched")
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_default_values(component, chart))
    logger.info(f"Created default {component} values at {path}")
    return True
