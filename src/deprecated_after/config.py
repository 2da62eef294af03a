"""Resolve run settings from flags, environment and `pyproject.toml`.

Precedence for every setting is flag, then environment, then the
`[tool.deprecated-after]` table, then the built-in default.
"""

from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from .contracts.validate import CONFIG, validate
from .core.clock import utc_today
from .core.errors import ScriptError
from .core.exit_codes import ERR_CONFIG
from .discovery.static import DEFAULT_MARKER_NAMES
from .threshold.errors import ThresholdError
from .threshold.model import parse_date

TOOL_KEY = "deprecated-after"
ENV_PROJECT_VERSION = "DEPRECATED_AFTER_PROJECT_VERSION"
ENV_TODAY = "DEPRECATED_AFTER_TODAY"


@dataclass(frozen=True)
class ProjectConfig:
    project_root: Path
    paths: tuple[Path, ...]
    exclude: tuple[str, ...]
    project_version: str | None
    version_source: str
    reference_date: dt.date
    date_source: str
    discovery: str
    packages: tuple[str, ...]
    marker_names: tuple[str, ...]


def load_pyproject(project_root: Path) -> dict[str, Any]:
    pyproject = project_root / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    try:
        return tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ScriptError(f"unable to read {pyproject.name}: {exc}", ERR_CONFIG, kind="config_error") from exc


def tool_settings(data: Mapping[str, Any]) -> dict[str, Any]:
    settings = data.get("tool", {}).get(TOOL_KEY, {})
    validate(CONFIG, settings, code=ERR_CONFIG, kind="config_error")
    return dict(settings)


def resolve_project_version(
    data: Mapping[str, Any],
    settings: Mapping[str, Any],
    *,
    cli_value: str | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[str | None, str]:
    environ = os.environ if env is None else env
    if cli_value:
        return cli_value, "flag"
    if environ.get(ENV_PROJECT_VERSION):
        return environ[ENV_PROJECT_VERSION], "env"
    if settings.get("version"):
        return str(settings["version"]), "tool.deprecated-after.version"
    project = data.get("project", {})
    if "version" in project.get("dynamic", []):
        return None, "dynamic"
    if "version" in project:
        return str(project["version"]), "project.version"
    return None, "missing"


def resolve_reference_date(*, cli_value: str | None = None, env: Mapping[str, str] | None = None) -> tuple[dt.date, str]:
    environ = os.environ if env is None else env
    raw, source = (cli_value, "flag") if cli_value else (environ.get(ENV_TODAY), "env")
    if not raw:
        return utc_today(), "clock"
    try:
        threshold = parse_date(raw)
    except ThresholdError as exc:
        raise ScriptError(f"invalid reference date from {source}: {exc}", ERR_CONFIG, kind="config_error") from exc
    return threshold.date, source


def _default_paths(project_root: Path) -> tuple[Path, ...]:
    src = project_root / "src"
    return (src,) if src.is_dir() else (project_root,)


def _resolve_paths(project_root: Path, raw: Sequence[str]) -> tuple[Path, ...]:
    out: list[Path] = []
    for item in raw:
        path = Path(item)
        out.append(path.resolve() if path.is_absolute() else (project_root / path).resolve())
    return tuple(out)


def resolve_config(
    project_root: Path,
    *,
    paths: Sequence[str] = (),
    exclude: Sequence[str] = (),
    project_version: str | None = None,
    today: str | None = None,
    discovery: str | None = None,
    packages: Sequence[str] = (),
    env: Mapping[str, str] | None = None,
) -> ProjectConfig:
    data = load_pyproject(project_root)
    settings = tool_settings(data)
    version, version_source = resolve_project_version(data, settings, cli_value=project_version, env=env)
    reference_date, date_source = resolve_reference_date(cli_value=today, env=env)
    raw_paths = list(paths) or list(settings.get("paths", []))
    return ProjectConfig(
        project_root=project_root,
        paths=_resolve_paths(project_root, raw_paths) if raw_paths else _default_paths(project_root),
        exclude=tuple(settings.get("exclude", [])) + tuple(exclude),
        project_version=version,
        version_source=version_source,
        reference_date=reference_date,
        date_source=date_source,
        discovery=discovery or str(settings.get("discovery", "static")),
        packages=tuple(packages) or tuple(settings.get("packages", [])),
        marker_names=tuple(settings.get("marker-names", DEFAULT_MARKER_NAMES)),
    )
