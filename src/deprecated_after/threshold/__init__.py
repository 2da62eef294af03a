from .errors import InvalidDate, InvalidProjectVersion, InvalidThresholdFormat, InvalidVersion, ThresholdError
from .model import (
    MAX_COMPONENT,
    Threshold,
    ThresholdKind,
    classify,
    compare_components,
    compare_date,
    compare_version,
    parse_date,
    parse_project_version,
    parse_threshold,
    parse_version,
)

__all__ = [
    "InvalidDate",
    "InvalidProjectVersion",
    "InvalidThresholdFormat",
    "InvalidVersion",
    "MAX_COMPONENT",
    "Threshold",
    "ThresholdError",
    "ThresholdKind",
    "classify",
    "compare_components",
    "compare_date",
    "compare_version",
    "parse_date",
    "parse_project_version",
    "parse_threshold",
    "parse_version",
]
