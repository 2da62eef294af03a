from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

EXCLUDED_PARTS = {
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
    ".hypothesis",
    ".tox",
    ".nox",
    "build",
    "dist",
    "node_modules",
}


def relative_posix(path: Path, base: Path) -> str:
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


def iter_files(root: Path, suffixes: Iterable[str], *, base: Path | None = None, exclude: Iterable[str] = ()) -> list[Path]:
    wanted = set(suffixes)
    patterns = tuple(exclude)
    anchor = base or root
    candidates = [root] if root.is_file() else sorted(root.rglob("*"))
    out: list[Path] = []
    for path in candidates:
        if not path.is_file() or path.suffix not in wanted:
            continue
        rel = relative_posix(path, anchor)
        if any(part in EXCLUDED_PARTS for part in Path(rel).parts):
            continue
        if any(fnmatch(rel, pattern) for pattern in patterns):
            continue
        out.append(path)
    return out


def iter_python_files(root: Path, *, base: Path | None = None, exclude: Iterable[str] = ()) -> list[Path]:
    return iter_files(root, {".py"}, base=base, exclude=exclude)
