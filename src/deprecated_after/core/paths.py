"""Project root detection helpers.

`Path.cwd()` is only allowed in this module.
"""

from __future__ import annotations

from pathlib import Path

PROJECT_MARKER = "pyproject.toml"


def find_project_root(start: Path | None = None) -> Path:
    cur = (start or Path.cwd()).resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        if (cur / PROJECT_MARKER).is_file():
            return cur
        if cur.parent == cur:
            raise RuntimeError(f"unable to resolve project root: no {PROJECT_MARKER} above {start or Path.cwd()}")
        cur = cur.parent


def try_find_project_root(start: Path | None = None) -> Path | None:
    try:
        return find_project_root(start)
    except RuntimeError:
        return None


def resolve_project_root(explicit: str | None) -> Path:
    if explicit:
        root = Path(explicit)
        return (Path.cwd() / root).resolve() if not root.is_absolute() else root.resolve()
    return try_find_project_root() or Path.cwd().resolve()
