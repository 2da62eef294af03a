"""Find `deprecated_after` markers by importing packages and reading the attached metadata."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, Iterator

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG, ERR_DISCOVERY
from ..core.scan import relative_posix
from ..marker import DeprecationMarker, marker_of
from ..validation.model import AnnotationRecord


def _import(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except Exception as exc:
        raise ScriptError(f"unable to import {name}: {exc}", ERR_DISCOVERY, kind="discovery_error") from exc


def iter_modules(package_name: str) -> list[ModuleType]:
    root = _import(package_name)
    modules = [root]
    search_path = getattr(root, "__path__", None)
    if search_path is None:
        return modules
    failures: list[str] = []
    infos = sorted(pkgutil.walk_packages(search_path, prefix=f"{root.__name__}.", onerror=failures.append), key=lambda item: item.name)
    if failures:
        raise ScriptError(f"unable to import {failures[0]} while walking {package_name}", ERR_DISCOVERY, kind="discovery_error")
    for info in infos:
        modules.append(_import(info.name))
    return modules


def _location(obj: Any, project_root: Path | None) -> tuple[str, int]:
    try:
        source = inspect.getsourcefile(obj) or ""
        _, line = inspect.getsourcelines(obj)
    except (OSError, TypeError):
        return "", 0
    if not source:
        return "", 0
    path = Path(source)
    return (relative_posix(path, project_root) if project_root else path.as_posix()), line


def _record(label: str, marker: DeprecationMarker, kind: str, obj: Any, project_root: Path | None) -> AnnotationRecord:
    path, line = _location(obj, project_root)
    return AnnotationRecord(
        element_label=label,
        value=marker.value,
        reason=marker.reason,
        replacement=marker.replacement,
        element_kind=kind,
        path=path,
        line=line,
    )


def _class_members(cls: type, module_name: str, project_root: Path | None, seen: set[int]) -> Iterator[AnnotationRecord]:
    prefix = f"{module_name}.{cls.__qualname__}"
    for name, member in vars(cls).items():
        if isinstance(member, property):
            marker = marker_of(member)
            if marker is not None and id(member) not in seen:
                seen.add(id(member))
                yield _record(f"{prefix}.{name}", marker, "property", member.fget, project_root)
            continue
        if inspect.isclass(member):
            if member.__module__ == module_name and member.__qualname__ == f"{cls.__qualname__}.{name}":
                yield from _walk_class(member, module_name, project_root, seen)
            continue
        func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
        if not inspect.isfunction(func):
            continue
        marker = marker_of(func)
        if marker is None or id(func) in seen:
            continue
        seen.add(id(func))
        kind = "constructor" if name == "__init__" else "function"
        yield _record(f"{prefix}.{name}", marker, kind, func, project_root)


def _walk_class(cls: type, module_name: str, project_root: Path | None, seen: set[int]) -> Iterator[AnnotationRecord]:
    if id(cls) in seen:
        return
    seen.add(id(cls))
    marker = marker_of(cls)
    if marker is not None:
        yield _record(f"{module_name}.{cls.__qualname__}", marker, "class", cls, project_root)
    yield from _class_members(cls, module_name, project_root, seen)


def records_from_module(module: ModuleType, *, project_root: Path | None = None, seen: set[int] | None = None) -> list[AnnotationRecord]:
    tracked = seen if seen is not None else set()
    records: list[AnnotationRecord] = []
    for obj in list(vars(module).values()):
        if getattr(obj, "__module__", None) != module.__name__:
            continue
        if inspect.isclass(obj):
            records.extend(_walk_class(obj, module.__name__, project_root, tracked))
        elif inspect.isfunction(obj):
            marker = marker_of(obj)
            if marker is not None and id(obj) not in tracked:
                tracked.add(id(obj))
                records.append(_record(f"{module.__name__}.{obj.__qualname__}", marker, "function", obj, project_root))
    return records


def discover_imported(packages: Iterable[str], *, project_root: Path | None = None) -> list[AnnotationRecord]:
    names = [name for name in packages if name.strip()]
    if not names:
        raise ScriptError("import discovery requires at least one package (--package or `packages` in pyproject)", ERR_CONFIG, kind="config_error")
    seen: set[int] = set()
    records: list[AnnotationRecord] = []
    for package_name in names:
        for module in iter_modules(package_name):
            records.extend(records_from_module(module, project_root=project_root, seen=seen))
    return records
