from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Walks up from the current working directory to find the project root,
    identified by the presence of pyproject.toml or a deploy/ directory.

    Returns:
        Path to the project root directory
    """
    current = Path.cwd().resolve()

    # Walk up the directory tree looking for a project marker
    for parent in [current, *current.parents]:
        if (parent / "pyproject.toml").exists() or (parent / "deploy").is_dir():
            return parent

    return current


def resolve_path(path: str | Path, project_root: Path) -> Path:
    """Resolve a possibly relative path against the project root."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return project_root / candidate
