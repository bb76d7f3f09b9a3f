"""
Environment helpers.

`GEOVERIFY_*` settings may live in a `.env` file next to the deployment, and the
CLI accepts relative paths (e.g. a `nearby` candidates file). Both are resolved
against one base directory:
- `GEOVERIFY_PROJECT_ROOT` when set,
- else the nearest parent of the working directory holding `.env` or `pyproject.toml`,
- else the working directory.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", "pyproject.toml")


@lru_cache
def get_project_root() -> Path:
    """Return the base directory for `.env` and relative CLI paths (cached)."""
    override = os.getenv("GEOVERIFY_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).is_file() for marker in _ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present (existing env vars win); returns the loaded path."""
    explicit = os.getenv("GEOVERIFY_ENV_FILE")
    env_path = Path(explicit).expanduser().resolve() if explicit else get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
