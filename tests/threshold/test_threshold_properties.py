from __future__ import annotations

import datetime as dt

import pytest
from hypothesis import given
from hypothesis import strategies as st

from deprecated_after.threshold import MAX_COMPONENT, ThresholdKind, classify, compare_version, parse_date, parse_version

_components = st.lists(st.integers(min_value=0, max_value=MAX_COMPONENT), min_size=1, max_size=6)


@pytest.mark.unit
@given(st.dates(min_value=dt.date(1, 1, 1), max_value=dt.date(9999, 12, 31)))
def test_valid_dates_classify_and_round_trip(value: dt.date) -> None:
    raw = value.isoformat()
    assert classify(raw) is ThresholdKind.DATE
    threshold = parse_date(raw)
    assert (threshold.year, threshold.month, threshold.day) == (value.year, value.month, value.day)


@pytest.mark.unit
@given(_components)
def test_numeric_versions_classify_and_round_trip(parts: list[int]) -> None:
    raw = ".".join(str(p) for p in parts)
    assert classify(raw) is ThresholdKind.VERSION
    assert parse_version(raw).components == tuple(parts)


@pytest.mark.unit
@given(_components, st.integers(min_value=0, max_value=4))
def test_trailing_zeros_compare_equal(parts: list[int], padding: int) -> None:
    short = parse_version(".".join(str(p) for p in parts))
    padded = parse_version(".".join(str(p) for p in parts + [0] * padding))
    assert compare_version(short, padded)
    assert compare_version(padded, short)


@pytest.mark.unit
@given(_components, _components)
def test_version_comparison_is_total(left: list[int], right: list[int]) -> None:
    a = parse_version(".".join(map(str, left)))
    b = parse_version(".".join(map(str, right)))
    assert compare_version(a, b) or compare_version(b, a)
