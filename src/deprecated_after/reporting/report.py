from __future__ import annotations

import datetime as dt
from typing import Any, Iterable

from ..contracts.validate import INVENTORY, REPORT, validate_self
from ..threshold.errors import ThresholdError
from ..threshold.model import classify
from ..validation.model import AnnotationRecord, ValidationResult

TOOL = "deprecated-after"


def violations_as_rows(result: ValidationResult) -> list[dict[str, Any]]:
    return [
        {
            "element": item.element_label,
            "element_kind": item.element_kind,
            "threshold": item.threshold_raw,
            "kind": item.kind.value if item.kind is not None else None,
            "reason": item.reason,
            "replacement": item.replacement,
            "error_code": item.error_code,
            "path": item.path,
            "line": item.line,
        }
        for item in result.violations
    ]


def build_report_payload(result: ValidationResult, *, run_id: str, reference_date: dt.date, project_version: str) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_name": REPORT,
        "schema_version": 1,
        "tool": TOOL,
        "kind": "validation-run",
        "run_id": run_id,
        "status": "pass" if result.passed else "fail",
        "reference_date": reference_date.isoformat(),
        "project_version": project_version,
        "summary": {
            "evaluated": result.evaluated,
            "violations": len(result.violations),
            "malformed": result.malformed_count,
        },
        "violations": violations_as_rows(result),
    }
    return validate_self(REPORT, payload)


def _kind_label(value: str) -> str:
    try:
        return classify(value).value
    except ThresholdError:
        return "invalid"


def build_inventory_payload(records: Iterable[AnnotationRecord], *, run_id: str, discovery: str) -> dict[str, Any]:
    rows = [
        {
            "element": record.element_label,
            "element_kind": record.element_kind,
            "value": record.value,
            "kind": _kind_label(record.value),
            "reason": record.reason,
            "replacement": record.replacement,
            "path": record.path,
            "line": record.line,
        }
        for record in records
    ]
    payload: dict[str, Any] = {
        "schema_name": INVENTORY,
        "schema_version": 1,
        "tool": TOOL,
        "status": "ok",
        "run_id": run_id,
        "discovery": discovery,
        "count": len(rows),
        "records": rows,
    }
    return validate_self(INVENTORY, payload)


def render_text(payload: dict[str, Any], *, quiet: bool = False) -> str:
    rows = payload.get("violations", [])
    if quiet:
        lines = [f"FAIL {row['element']}" for row in rows]
        return "\n".join(lines) if lines else "PASS"
    out: list[str] = []
    for row in rows:
        out.append(f"FAIL {row['element']} ({row['threshold']})")
        if row.get("reason"):
            out.append(f"  reason: {row['reason']}")
        if row.get("replacement"):
            out.append(f"  replacement: {row['replacement']}")
        if row.get("path"):
            location = f"{row['path']}:{row['line']}" if row.get("line") else row["path"]
            out.append(f"  at: {location}")
    summary = payload.get("summary", {})
    out.append(
        f"summary: evaluated={int(summary.get('evaluated', 0))} "
        f"violations={int(summary.get('violations', 0))} status={payload.get('status', '')}"
    )
    return "\n".join(out)


def render_inventory_text(payload: dict[str, Any]) -> str:
    out: list[str] = []
    for row in payload.get("records", []):
        location = f"{row['path']}:{row['line']}" if row.get("line") else row.get("path", "")
        line = f"{row['kind'].upper():<8} {row['value'] or '<missing>'} {row['element']} [{row['element_kind']}]"
        out.append(f"{line} {location}".rstrip())
    out.append(f"markers: {int(payload.get('count', 0))}")
    return "\n".join(out)
