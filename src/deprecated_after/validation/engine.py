"""Evaluate discovered deprecation markers against a reference date and version.

Per-record problems never abort a run: a threshold that cannot be classified or
parsed is reported as a violation, since compliance that cannot be determined
is treated as lost. Only an unusable project version stops evaluation, and it
does so before the first record is looked at.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable

from ..threshold.errors import ThresholdError
from ..threshold.model import (
    Threshold,
    ThresholdKind,
    classify,
    compare_date,
    compare_version,
    parse_date,
    parse_project_version,
    parse_version,
)
from .model import AnnotationRecord, ValidationResult, ViolationReport


def _malformed(record: AnnotationRecord, kind: ThresholdKind | None, exc: ThresholdError) -> ViolationReport:
    reason = f"malformed deprecation threshold ({exc.error_code}): {exc}"
    if record.reason:
        reason = f"{reason}; declared reason: {record.reason}"
    return _report(record, kind, reason=reason, error_code=exc.error_code)


def _report(record: AnnotationRecord, kind: ThresholdKind | None, *, reason: str, error_code: str = "") -> ViolationReport:
    return ViolationReport(
        element_label=record.element_label,
        threshold_raw=record.value,
        kind=kind,
        reason=reason,
        replacement=record.replacement,
        error_code=error_code,
        element_kind=record.element_kind,
        path=record.path,
        line=record.line,
    )


def evaluate_record(record: AnnotationRecord, reference_date: dt.date, reference_version: Threshold) -> ViolationReport | None:
    try:
        kind = classify(record.value)
    except ThresholdError as exc:
        return _malformed(record, None, exc)
    try:
        if kind is ThresholdKind.DATE:
            crossed = compare_date(parse_date(record.value), reference_date)
        else:
            crossed = compare_version(parse_version(record.value), reference_version)
    except ThresholdError as exc:
        return _malformed(record, kind, exc)
    if not crossed:
        return None
    return _report(record, kind, reason=record.reason)


def validate(reference_date: dt.date, reference_version: str | Threshold, records: Iterable[AnnotationRecord]) -> ValidationResult:
    if isinstance(reference_version, Threshold):
        version = parse_project_version(reference_version.raw)
    else:
        version = parse_project_version(reference_version)
    if isinstance(reference_date, dt.datetime):
        reference_date = reference_date.date()
    violations: list[ViolationReport] = []
    evaluated = 0
    for record in records:
        evaluated += 1
        report = evaluate_record(record, reference_date, version)
        if report is not None:
            violations.append(report)
    return ValidationResult(violations=tuple(violations), evaluated=evaluated)
