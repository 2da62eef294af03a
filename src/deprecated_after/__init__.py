"""Fail the build once a `deprecated_after` date or version threshold has been crossed."""

__version__ = "0.1.0"

from .marker import DeprecationMarker, deprecated_after, marker_of  # noqa: E402
from .threshold import (  # noqa: E402
    InvalidDate,
    InvalidProjectVersion,
    InvalidThresholdFormat,
    InvalidVersion,
    Threshold,
    ThresholdKind,
    classify,
    parse_threshold,
)
from .validation import AnnotationRecord, ValidationResult, ViolationReport, validate  # noqa: E402

__all__ = [
    "__version__",
    "AnnotationRecord",
    "DeprecationMarker",
    "InvalidDate",
    "InvalidProjectVersion",
    "InvalidThresholdFormat",
    "InvalidVersion",
    "Threshold",
    "ThresholdKind",
    "ValidationResult",
    "ViolationReport",
    "classify",
    "deprecated_after",
    "marker_of",
    "parse_threshold",
    "validate",
]
