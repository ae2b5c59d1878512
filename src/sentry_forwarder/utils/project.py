from functools import lru_cache
from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any

# Distribution name used when neither pyproject.toml nor settings say otherwise.
DEFAULT_PROJECT_NAME = "sentry-forwarder"

# --------------------
# Find pyproject.toml
# --------------------


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None

# --------------------
# Load pyproject
# --------------------


def load_pyproject_data(pyproject_path: Path) -> dict:
    """
    Parse and return the contents of a pyproject.toml file as a dictionary.
    """
    # tomllib is stdlib from Python 3.11; tomli is declared for older interpreters.
    try:
        import tomllib as _toml_loader
    except ImportError:
        import tomli as _toml_loader

    with pyproject_path.open("rb") as f:
        return _toml_loader.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return the value for the dot-separated `key` (e.g. "project.version") from the
    nearest pyproject.toml, searching upwards from `start` (this module's folder
    by default). Returns `default` when the file or the key is missing or unreadable.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start=start_path, max_up=max_up)
    if not pyproject or not key:
        return default

    try:
        data = load_pyproject_data(pyproject)
    except (OSError, ValueError):
        return default

    cur = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default

    return cur


# pyproject.toml and the installed metadata do not change while the process runs.
@lru_cache()
def get_project_name(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str | None = DEFAULT_PROJECT_NAME,
) -> str | None:
    """
    Convenience wrapper for project.name in pyproject.toml.
    """
    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_distribution_version(name: str) -> str | None:
    """
    Installed version of distribution `name`, or None when it is not installed.
    """
    try:
        return importlib_metadata.version(name)
    except importlib_metadata.PackageNotFoundError:
        return None


@lru_cache()
def get_project_version(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = "unknown",
) -> str:
    """
    Version of this project.

    The installed distribution wins (useful in containers without the source
    tree); otherwise project.version from pyproject.toml, otherwise `default`.
    """
    name = get_project_name(start=start, max_up=max_up)
    if name:
        installed = get_distribution_version(name)
        if installed:
            return installed

    val = get_pyproject_value("project.version", start=start, max_up=max_up, default=None)
    return val if val is not None else default


__all__ = [
    "DEFAULT_PROJECT_NAME",
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_distribution_version",
    "get_project_version",
]
