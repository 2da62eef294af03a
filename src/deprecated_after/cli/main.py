from __future__ import annotations

import argparse
import sys
from typing import Any

from .. import __version__
from ..config import ProjectConfig, resolve_config
from ..core.context import RunContext
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL, ERR_USAGE, ERR_VIOLATIONS, OK
from ..core.logging import log_event
from ..core.serialize import dumps_json
from ..discovery import DISCOVERY_MODES, discover_imported, discover_static
from ..reporting import build_inventory_payload, build_report_payload, render_inventory_text, render_text
from ..threshold import InvalidProjectVersion, ThresholdError, ThresholdKind, parse_project_version, parse_threshold
from ..validation import AnnotationRecord, validate
from .output import emit, render_error, resolve_output_format, write_out_file


def _add_discovery_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--project-root", help="project root holding pyproject.toml")
    p.add_argument("--path", action="append", default=[], help="source path to scan (repeatable)")
    p.add_argument("--exclude", action="append", default=[], help="glob of relative paths to skip (repeatable)")
    p.add_argument("--discovery", choices=list(DISCOVERY_MODES), default=None, help="discovery mode")
    p.add_argument("--package", action="append", default=[], help="package to import in `import` discovery (repeatable)")
    p.add_argument("--out-file", help="optional output path for JSON report")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deprecated-after")
    p.add_argument("--version", action="version", version=f"deprecated-after {__version__}")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--run-id", help="run identifier stamped on logs and reports")
    p.add_argument("--log-json", action="store_true", help="emit log events as JSON lines")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="emit log events to stderr")
    vg.add_argument("--quiet", action="store_true", help="only print failing elements")
    sub = p.add_subparsers(dest="cmd", required=True)

    validate_p = sub.add_parser(
        "validate",
        help="verification: fail when a deprecation threshold has been crossed",
        description="Validates deprecated_after markers against the project version and the current date.",
    )
    _add_discovery_options(validate_p)
    validate_p.add_argument("--project-version", help="override the project version")
    validate_p.add_argument("--today", help="override the reference date (yyyy-MM-dd)")

    list_p = sub.add_parser("list", help="list discovered markers without evaluating them")
    _add_discovery_options(list_p)

    classify_p = sub.add_parser("classify", help="show how a threshold string parses")
    classify_p.add_argument("value")
    classify_p.add_argument("--json", action="store_true", help="emit JSON output")

    version_p = sub.add_parser("version", help="print the tool version")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def _load_config(ctx: RunContext, ns: argparse.Namespace) -> ProjectConfig:
    cfg = resolve_config(
        ctx.project_root,
        paths=ns.path,
        exclude=ns.exclude,
        project_version=getattr(ns, "project_version", None),
        today=getattr(ns, "today", None),
        discovery=ns.discovery,
        packages=ns.package,
    )
    log_event(
        ctx,
        "info",
        "config",
        "resolved",
        project_root=cfg.project_root,
        version_source=cfg.version_source,
        date_source=cfg.date_source,
        discovery=cfg.discovery,
    )
    return cfg


def _discover(ctx: RunContext, cfg: ProjectConfig) -> list[AnnotationRecord]:
    if cfg.discovery == "import":
        records = discover_imported(cfg.packages, project_root=cfg.project_root)
    else:
        records = discover_static(cfg.paths, project_root=cfg.project_root, exclude=cfg.exclude, marker_names=cfg.marker_names)
    log_event(ctx, "info", "discovery", "done", mode=cfg.discovery, records=len(records))
    return records


def _reference_version(cfg: ProjectConfig):
    if cfg.project_version is None:
        detail = "project version is declared dynamic" if cfg.version_source == "dynamic" else "project version is not configured"
        raise InvalidProjectVersion("", f"{detail}; pass --project-version or set DEPRECATED_AFTER_PROJECT_VERSION")
    return parse_project_version(cfg.project_version)


def _run_validate(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    cfg = _load_config(ctx, ns)
    reference_version = _reference_version(cfg)
    records = _discover(ctx, cfg)
    result = validate(cfg.reference_date, reference_version, records)
    log_event(
        ctx,
        "info",
        "validation",
        "evaluated",
        evaluated=result.evaluated,
        violations=len(result.violations),
        malformed=result.malformed_count,
    )
    payload = build_report_payload(
        result,
        run_id=ctx.run_id,
        reference_date=cfg.reference_date,
        project_version=reference_version.raw,
    )
    write_out_file(ns.out_file, dumps_json(payload, pretty=True))
    print(dumps_json(payload, pretty=False) if as_json else render_text(payload, quiet=ctx.quiet))
    return OK if result.passed else ERR_VIOLATIONS


def _run_list(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    cfg = _load_config(ctx, ns)
    payload = build_inventory_payload(_discover(ctx, cfg), run_id=ctx.run_id, discovery=cfg.discovery)
    write_out_file(ns.out_file, dumps_json(payload, pretty=True))
    print(dumps_json(payload, pretty=False) if as_json else render_inventory_text(payload))
    return OK


def _classify_payload(value: str) -> dict[str, Any]:
    payload: dict[str, Any] = {"schema_version": 1, "tool": "deprecated-after", "value": value}
    try:
        threshold = parse_threshold(value)
    except ThresholdError as exc:
        payload.update({"status": "invalid", "error_code": exc.error_code, "message": str(exc)})
        return payload
    payload.update({"status": "ok", "kind": threshold.kind.value})
    if threshold.kind is ThresholdKind.DATE:
        payload["date"] = threshold.date.isoformat()
    else:
        payload["components"] = list(threshold.components)
    return payload


def _run_classify(ns: argparse.Namespace, as_json: bool) -> int:
    payload = _classify_payload(ns.value)
    if as_json:
        emit(payload, as_json)
    elif payload["status"] == "ok":
        parsed = payload.get("date") or ".".join(str(part) for part in payload["components"])
        print(f"{payload['kind']} {parsed}")
    else:
        print(f"invalid ({payload['error_code']}): {payload['message']}")
    return OK if payload["status"] == "ok" else ERR_VIOLATIONS


def main(argv: list[str] | None = None) -> int:
    raw_argv = argv if argv is not None else sys.argv[1:]
    p = build_parser()
    ns = p.parse_args(raw_argv)
    if ns.format and "--json" in raw_argv and ns.format != "json":
        usage = ScriptError("conflicting output flags: use either --format json or --json", ERR_USAGE, kind="usage_error")
        print(render_error(usage, as_json=False), file=sys.stderr)
        return ERR_USAGE
    fmt = resolve_output_format(cli_json=("--json" in raw_argv), cli_format=ns.format)
    ctx = RunContext.from_args(ns.run_id, getattr(ns, "project_root", None), fmt, ns.verbose, ns.quiet, ns.log_json)
    as_json = ctx.output_format == "json"
    try:
        log_event(ctx, "info", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format)
        if ns.cmd == "version":
            if as_json:
                emit({"schema_version": 1, "tool": "deprecated-after", "status": "ok", "version": __version__}, as_json)
            else:
                print(f"deprecated-after {__version__}")
            return OK
        if ns.cmd == "classify":
            return _run_classify(ns, as_json)
        if ns.cmd == "list":
            return _run_list(ctx, ns, as_json)
        if ns.cmd == "validate":
            code = _run_validate(ctx, ns, as_json)
            log_event(ctx, "info", "cli", "finish", cmd=ns.cmd, exit_code=code)
            return code
        return ERR_USAGE
    except ScriptError as exc:
        print(render_error(exc, as_json=as_json, run_id=ctx.run_id), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        internal = ScriptError(f"internal error: {exc}", ERR_INTERNAL, kind="internal_error")
        print(render_error(internal, as_json=as_json, run_id=ctx.run_id), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
