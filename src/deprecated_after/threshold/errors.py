from __future__ import annotations

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG


class ThresholdError(ValueError):
    error_code = "invalid_threshold"

    def __init__(self, raw: str, detail: str) -> None:
        super().__init__(f"{detail}: `{raw}`")
        self.raw = raw
        self.detail = detail


class InvalidThresholdFormat(ThresholdError):
    error_code = "invalid_threshold_format"


class InvalidDate(ThresholdError):
    error_code = "invalid_date"


class InvalidVersion(ThresholdError):
    error_code = "invalid_version"


class InvalidProjectVersion(ScriptError):
    """Host-supplied project version is unusable; aborts a run before evaluation."""

    def __init__(self, raw: str, detail: str) -> None:
        shown = f" `{raw}`" if raw else ""
        super().__init__(f"invalid project version{shown}: {detail}", ERR_CONFIG, "invalid_project_version")
        self.raw = raw
        self.detail = detail
