"""Find `deprecated_after` markers by parsing source files; user code is never imported."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Iterable

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG, ERR_DISCOVERY
from ..core.scan import iter_python_files, relative_posix
from ..validation.model import AnnotationRecord

DEFAULT_MARKER_NAMES = ("deprecated_after",)
_PROPERTY_DECORATORS = {"property", "cached_property"}
_PROPERTY_ACCESSORS = {"setter", "getter", "deleter"}
_FIELDS = ("value", "reason", "replacement")


def module_name_for(path: Path, source_root: Path) -> str:
    if source_root.is_file():
        return path.stem
    rel = path.relative_to(source_root).with_suffix("")
    parts = list(rel.parts)
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts) or source_root.name


def _marker_aliases(module: ast.Module, marker_names: frozenset[str]) -> frozenset[str]:
    names = set(marker_names)
    for node in ast.walk(module):
        if isinstance(node, ast.ImportFrom):
            for alias in node.names:
                if alias.name in marker_names:
                    names.add(alias.asname or alias.name)
    return frozenset(names)


def _import_roots(module: ast.Module) -> frozenset[str]:
    """Names bound by import statements, so `x.deprecated_after` only counts when `x` is a module."""
    roots: set[str] = set()
    for node in ast.walk(module):
        if isinstance(node, ast.Import):
            for alias in node.names:
                roots.add(alias.asname or alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            for alias in node.names:
                roots.add(alias.asname or alias.name)
    return frozenset(roots)


def _root_name(node: ast.expr) -> str:
    while isinstance(node, ast.Attribute):
        node = node.value
    return node.id if isinstance(node, ast.Name) else ""


def _is_marker(node: ast.expr, names: frozenset[str], marker_names: frozenset[str], roots: frozenset[str]) -> bool:
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id in names
    if isinstance(target, ast.Attribute):
        return target.attr in marker_names and _root_name(target.value) in roots
    return False


def _literal(node: ast.expr | None, *, strict: bool) -> str:
    if node is None:
        return ""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    text = ast.unparse(node)
    return f"<{text}>" if strict else text


def _marker_fields(node: ast.expr) -> tuple[str, str, str]:
    if not isinstance(node, ast.Call):
        return "", "", ""
    by_name: dict[str, ast.expr | None] = dict.fromkeys(_FIELDS)
    for name, arg in zip(_FIELDS, node.args):
        by_name[name] = arg
    for keyword in node.keywords:
        if keyword.arg in by_name:
            by_name[keyword.arg] = keyword.value
    return (
        _literal(by_name["value"], strict=True),
        _literal(by_name["reason"], strict=False),
        _literal(by_name["replacement"], strict=False),
    )


def _decorator_name(node: ast.expr) -> str:
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return ""


class _MarkerVisitor(ast.NodeVisitor):
    def __init__(
        self, module: str, rel_path: str, names: frozenset[str], marker_names: frozenset[str], roots: frozenset[str]
    ) -> None:
        self.module = module
        self.rel_path = rel_path
        self.names = names
        self.marker_names = marker_names
        self.roots = roots
        self.scope: list[tuple[str, bool]] = []
        self.records: list[AnnotationRecord] = []

    def _label(self, name: str) -> str:
        qual = ".".join(part for part, _ in self.scope)
        return ".".join(p for p in (self.module, qual, name) if p)

    def _collect(self, node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef, kind: str) -> None:
        for decorator in node.decorator_list:
            if not _is_marker(decorator, self.names, self.marker_names, self.roots):
                continue
            value, reason, replacement = _marker_fields(decorator)
            self.records.append(
                AnnotationRecord(
                    element_label=self._label(node.name),
                    value=value,
                    reason=reason,
                    replacement=replacement,
                    element_kind=kind,
                    path=self.rel_path,
                    line=decorator.lineno,
                )
            )

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._collect(node, "class")
        self.scope.append((node.name, True))
        self.generic_visit(node)
        self.scope.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_function(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._visit_function(node)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self._collect(node, self._function_kind(node))
        self.scope.append((node.name, False))
        self.scope.append(("<locals>", False))
        self.generic_visit(node)
        self.scope.pop()
        self.scope.pop()

    def _function_kind(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> str:
        in_class = bool(self.scope) and self.scope[-1][1]
        if not in_class:
            return "function"
        if node.name == "__init__":
            return "constructor"
        for decorator in node.decorator_list:
            name = _decorator_name(decorator)
            if name in _PROPERTY_DECORATORS:
                return "property"
            if name in _PROPERTY_ACCESSORS and isinstance(decorator, ast.Attribute):
                return "property"
        return "function"


def scan_source(
    text: str,
    *,
    module: str,
    rel_path: str = "",
    marker_names: Iterable[str] = DEFAULT_MARKER_NAMES,
) -> list[AnnotationRecord]:
    wanted = frozenset(marker_names)
    if not any(name in text for name in wanted):
        return []
    tree = ast.parse(text, filename=rel_path or module)
    visitor = _MarkerVisitor(module, rel_path, _marker_aliases(tree, wanted), wanted, _import_roots(tree))
    visitor.visit(tree)
    return visitor.records


def discover_static(
    paths: Iterable[Path],
    *,
    project_root: Path,
    exclude: Iterable[str] = (),
    marker_names: Iterable[str] = DEFAULT_MARKER_NAMES,
) -> list[AnnotationRecord]:
    names = tuple(marker_names)
    patterns = tuple(exclude)
    records: list[AnnotationRecord] = []
    seen: set[Path] = set()
    for source_root in paths:
        if not source_root.exists():
            raise ScriptError(f"source path not found: {relative_posix(source_root, project_root)}", ERR_CONFIG, kind="config_error")
        for path in iter_python_files(source_root, base=project_root, exclude=patterns):
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            rel_path = relative_posix(path, project_root)
            try:
                text = path.read_text(encoding="utf-8")
                records.extend(scan_source(text, module=module_name_for(path, source_root), rel_path=rel_path, marker_names=names))
            except (SyntaxError, UnicodeDecodeError, ValueError) as exc:
                raise ScriptError(f"unable to parse {rel_path}: {exc}", ERR_DISCOVERY, kind="discovery_error") from exc
    return records
