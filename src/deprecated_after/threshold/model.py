"""Deprecation thresholds: shape classification, strict parsing and comparison.

A threshold is either a calendar date (`yyyy-MM-dd`) or a dot-separated numeric
version (`1`, `1.4`, `2.0.0`). Shape is decided before parsing so callers can
tell "not a threshold at all" apart from "a date with month 13".
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .errors import InvalidDate, InvalidProjectVersion, InvalidThresholdFormat, InvalidVersion, ThresholdError

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_VERSION_SHAPE = re.compile(r"[0-9]+(?:\.[0-9]+)*")
MAX_COMPONENT = 2**31 - 1


class ThresholdKind(str, Enum):
    DATE = "date"
    VERSION = "version"


@dataclass(frozen=True)
class Threshold:
    kind: ThresholdKind
    raw: str
    date: dt.date | None = None
    components: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is ThresholdKind.DATE and self.date is None:
            raise ValueError(f"date threshold `{self.raw}` requires a date")
        if self.kind is ThresholdKind.VERSION and not self.components:
            raise ValueError(f"version threshold `{self.raw}` requires components")

    @property
    def year(self) -> int:
        return self._require_date().year

    @property
    def month(self) -> int:
        return self._require_date().month

    @property
    def day(self) -> int:
        return self._require_date().day

    def _require_date(self) -> dt.date:
        if self.date is None:
            raise AttributeError(f"{self.kind.value} threshold `{self.raw}` has no calendar fields")
        return self.date

    def __str__(self) -> str:
        return self.raw


def classify(raw: str) -> ThresholdKind:
    text = str(raw)
    if _DATE_SHAPE.fullmatch(text):
        return ThresholdKind.DATE
    if _VERSION_SHAPE.fullmatch(text):
        return ThresholdKind.VERSION
    raise InvalidThresholdFormat(text, "expected a yyyy-MM-dd date or a dot-separated numeric version")


def parse_date(raw: str) -> Threshold:
    text = str(raw)
    fields = text.split("-")
    if [len(f) for f in fields] != [4, 2, 2] or not all(f.isascii() and f.isdigit() for f in fields):
        raise InvalidDate(text, "expected yyyy-MM-dd with numeric fields")
    year, month, day = (int(f) for f in fields)
    if year < dt.MINYEAR:
        raise InvalidDate(text, f"year {year:04d} out of range")
    if not 1 <= month <= 12:
        raise InvalidDate(text, f"month {month:02d} out of range 01-12")
    try:
        value = dt.date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(text, f"day {day:02d} out of range for {year:04d}-{month:02d}") from exc
    return Threshold(kind=ThresholdKind.DATE, raw=text, date=value)


def parse_version(raw: str) -> Threshold:
    text = str(raw)
    components: list[int] = []
    for index, segment in enumerate(text.split("."), start=1):
        if not segment:
            raise InvalidVersion(text, f"segment {index} is empty")
        if segment.startswith("-") and segment[1:].isdigit():
            raise InvalidVersion(text, f"segment {index} `{segment}` is negative")
        if not (segment.isascii() and segment.isdigit()):
            raise InvalidVersion(text, f"segment {index} `{segment}` is not numeric")
        if len(segment.lstrip("0")) > len(str(MAX_COMPONENT)):
            raise InvalidVersion(text, f"segment {index} has {len(segment)} digits and exceeds {MAX_COMPONENT}")
        value = int(segment.lstrip("0") or "0")
        if value > MAX_COMPONENT:
            raise InvalidVersion(text, f"segment {index} `{segment}` exceeds {MAX_COMPONENT}")
        components.append(value)
    return Threshold(kind=ThresholdKind.VERSION, raw=text, components=tuple(components))


def parse_threshold(raw: str) -> Threshold:
    if classify(raw) is ThresholdKind.DATE:
        return parse_date(raw)
    return parse_version(raw)


def parse_project_version(raw: str | None) -> Threshold:
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise InvalidProjectVersion(text, "project version is not configured")
    try:
        kind = classify(text)
        if kind is not ThresholdKind.VERSION:
            raise InvalidProjectVersion(text, "expected a dot-separated numeric version, got a date")
        return parse_version(text)
    except ThresholdError as exc:
        raise InvalidProjectVersion(text, exc.detail) from exc


def compare_components(left: Sequence[int], right: Sequence[int]) -> int:
    width = max(len(left), len(right))
    lhs = tuple(left) + (0,) * (width - len(left))
    rhs = tuple(right) + (0,) * (width - len(right))
    return (lhs > rhs) - (lhs < rhs)


def compare_date(threshold: Threshold, reference_date: dt.date) -> bool:
    if threshold.kind is not ThresholdKind.DATE or threshold.date is None:
        raise TypeError(f"{threshold.kind.value} threshold `{threshold.raw}` cannot be compared against a date")
    if isinstance(reference_date, dt.datetime):
        reference_date = reference_date.date()
    return reference_date >= threshold.date


def compare_version(threshold: Threshold, reference_version: Threshold | Sequence[int]) -> bool:
    if threshold.kind is not ThresholdKind.VERSION:
        raise TypeError(f"{threshold.kind.value} threshold `{threshold.raw}` cannot be compared against a version")
    if isinstance(reference_version, Threshold):
        if reference_version.kind is not ThresholdKind.VERSION:
            raise TypeError(f"reference `{reference_version.raw}` is not a version")
        reference = reference_version.components
    else:
        reference = tuple(reference_version)
    return compare_components(reference, threshold.components) >= 0
