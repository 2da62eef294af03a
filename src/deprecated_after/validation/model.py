from __future__ import annotations

from dataclasses import dataclass

from ..threshold.model import ThresholdKind

ELEMENT_KINDS = frozenset({"class", "function", "property", "constructor"})


@dataclass(frozen=True)
class AnnotationRecord:
    element_label: str
    value: str
    reason: str = ""
    replacement: str = ""
    element_kind: str = "function"
    path: str = ""
    line: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "element_label", str(self.element_label).strip())
        object.__setattr__(self, "value", str(self.value))
        object.__setattr__(self, "reason", str(self.reason or ""))
        object.__setattr__(self, "replacement", str(self.replacement or ""))
        if self.element_kind not in ELEMENT_KINDS:
            raise ValueError(f"invalid element kind `{self.element_kind}`: must be one of {sorted(ELEMENT_KINDS)}")
        object.__setattr__(self, "line", int(self.line or 0))

    @property
    def location(self) -> str:
        if not self.path:
            return ""
        return f"{self.path}:{self.line}" if self.line else self.path


@dataclass(frozen=True)
class ViolationReport:
    element_label: str
    threshold_raw: str
    kind: ThresholdKind | None
    reason: str = ""
    replacement: str = ""
    error_code: str = ""
    element_kind: str = "function"
    path: str = ""
    line: int = 0

    @property
    def malformed(self) -> bool:
        return bool(self.error_code)


@dataclass(frozen=True)
class ValidationResult:
    violations: tuple[ViolationReport, ...] = ()
    evaluated: int = 0

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def malformed_count(self) -> int:
        return sum(1 for v in self.violations if v.malformed)
