from __future__ import annotations

import datetime as dt
from typing import Iterator

import pytest

from deprecated_after.threshold import InvalidProjectVersion, ThresholdKind, parse_project_version
from deprecated_after.validation import AnnotationRecord, ValidationResult, evaluate_record, validate

TODAY = dt.date(2025, 6, 1)


def _record(value: str, label: str = "pkg.mod.Foo.bar", **kwargs: str) -> AnnotationRecord:
    return AnnotationRecord(element_label=label, value=value, **kwargs)


def test_zero_records_pass() -> None:
    result = validate(TODAY, "2.0.0", [])
    assert result.passed
    assert result.violations == ()
    assert result.evaluated == 0


def test_crossed_date_reports_element() -> None:
    result = validate(TODAY, "1.0.0", [_record("2025-01-01", label="Foo.bar", reason="use baz", replacement="Foo.baz")])
    assert not result.passed
    (violation,) = result.violations
    assert violation.element_label == "Foo.bar"
    assert violation.threshold_raw == "2025-01-01"
    assert violation.kind is ThresholdKind.DATE
    assert violation.reason == "use baz"
    assert violation.replacement == "Foo.baz"
    assert not violation.malformed


def test_date_on_reference_day_is_a_violation() -> None:
    assert len(validate(TODAY, "1.0", [_record("2025-06-01")]).violations) == 1
    assert validate(TODAY, "1.0", [_record("2025-06-02")]).passed


def test_future_version_is_not_reached() -> None:
    assert validate(TODAY, "2.0.0", [_record("3.0.0")]).passed


def test_reached_version_is_a_violation() -> None:
    result = validate(TODAY, "2.0.0", [_record("1.5.0")])
    assert [v.kind for v in result.violations] == [ThresholdKind.VERSION]


def test_equal_version_under_padding_is_a_violation() -> None:
    assert not validate(TODAY, "1.2", [_record("1.2.0")]).passed


@pytest.mark.parametrize(
    ("value", "code", "kind"),
    [
        ("not-a-date", "invalid_threshold_format", None),
        ("", "invalid_threshold_format", None),
        ("2025-02-30", "invalid_date", ThresholdKind.DATE),
        (f"1.{2**31}", "invalid_version", ThresholdKind.VERSION),
    ],
)
def test_malformed_threshold_is_exactly_one_violation(value: str, code: str, kind: ThresholdKind | None) -> None:
    result = validate(TODAY, "1.0.0", [_record(value, reason="drop it")])
    (violation,) = result.violations
    assert violation.error_code == code
    assert violation.kind is kind
    assert violation.malformed
    assert code in violation.reason
    assert violation.reason.endswith("declared reason: drop it")
    assert result.malformed_count == 1


def test_violations_keep_discovery_order() -> None:
    records = [_record("2020-01-01", label="a"), _record("9.0", label="b"), _record("bogus", label="c"), _record("0.1", label="d")]
    result = validate(TODAY, "1.0", records)
    assert [v.element_label for v in result.violations] == ["a", "c", "d"]
    assert result.evaluated == 4


def test_result_is_deterministic() -> None:
    records = [_record("2020-01-01", label="a"), _record("0.1", label="b")]
    assert validate(TODAY, "1.0", records) == validate(TODAY, "1.0", list(records))


def test_malformed_project_version_aborts_before_evaluation() -> None:
    consumed: list[AnnotationRecord] = []

    def records() -> Iterator[AnnotationRecord]:
        for record in (_record("2020-01-01"), _record("0.1")):
            consumed.append(record)
            yield record

    with pytest.raises(InvalidProjectVersion):
        validate(TODAY, "abc", records())
    assert consumed == []


def test_validate_accepts_parsed_reference_and_datetime() -> None:
    result = validate(dt.datetime(2025, 6, 1, 23, 59), parse_project_version("2.0"), [_record("2025-06-01")])
    assert len(result.violations) == 1


def test_evaluate_record_returns_none_when_compliant() -> None:
    assert evaluate_record(_record("2030-01-01"), TODAY, parse_project_version("1.0")) is None


def test_validation_result_passed_flag() -> None:
    assert ValidationResult().passed


def test_annotation_record_normalizes_and_checks_kind() -> None:
    record = AnnotationRecord(element_label="  pkg.f ", value="1.0", reason=None, path="src/pkg.py", line=3)  # type: ignore[arg-type]
    assert record.element_label == "pkg.f"
    assert record.reason == ""
    assert record.location == "src/pkg.py:3"
    with pytest.raises(ValueError):
        AnnotationRecord(element_label="x", value="1.0", element_kind="module")


def test_huge_version_segment_is_recovered_into_a_violation() -> None:
    result = validate(TODAY, "1.0", [_record("1." + "9" * 5000)])
    (violation,) = result.violations
    assert violation.error_code == "invalid_version"
    assert violation.kind is ThresholdKind.VERSION


def test_huge_project_version_aborts_with_invalid_project_version() -> None:
    with pytest.raises(InvalidProjectVersion):
        validate(TODAY, "9" * 5000, [])
